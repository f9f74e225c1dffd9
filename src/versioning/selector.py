"""Version selection for range requests under the snapshot policy."""

from __future__ import annotations

import logging
from typing import List, Sequence, Union

from common.logging_utils import extra_context, is_debug_enabled, Timer

from .errors import InvalidRangeError, MetadataLookupError
from .models import RangeRequest, SnapshotPolicy
from .range import VersionRange
from .sources import MetadataSource, VersionLister, as_metadata_source
from .version import ArtifactVersion, as_version

logger = logging.getLogger(__name__)


def apply_snapshot_policy(
    versions: Sequence[ArtifactVersion], include_latest_snapshot: bool
) -> List[ArtifactVersion]:
    """Sort newest first and drop snapshots.

    Only the newest entry may be a snapshot, and only when
    ``include_latest_snapshot`` is set.
    """
    if not versions:
        return []
    newest, *rest = sorted(versions, reverse=True)
    head = [newest] if include_latest_snapshot or not newest.is_snapshot else []
    return head + [v for v in rest if not v.is_snapshot]


class VersionSelector:
    """Turns a range request into the ordered list of versions to process."""

    def __init__(self, source: Union[MetadataSource, VersionLister]):
        self.source = as_metadata_source(source)

    def fetch_candidates(self, req: RangeRequest, version_range: VersionRange) -> List[ArtifactVersion]:
        """Versions known to the metadata source that fall inside the range.

        Raises:
            MetadataLookupError: when the source fails.
        """
        coordinate = req.coordinate
        with Timer() as timer:
            try:
                available = [as_version(v) for v in self.source.retrieve_available_versions(coordinate)]
            except MetadataLookupError as exc:
                raise exc.with_context(str(coordinate), req.version_range)
            except Exception as exc:
                raise MetadataLookupError(
                    f"Could not retrieve available versions: {exc!r}",
                    coordinate=str(coordinate),
                    version_range=req.version_range,
                ) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "Retrieved available versions",
                extra=extra_context(
                    event="metadata_lookup",
                    component="selector",
                    action="fetch_candidates",
                    outcome="success",
                    target=str(coordinate),
                    count=len(available),
                    duration_ms=timer.duration_ms(),
                ),
            )
        return version_range.filter(available)

    def pick(self, req: RangeRequest, candidates: Sequence[ArtifactVersion]) -> List[ArtifactVersion]:
        """Apply the snapshot policy to in-range candidates."""
        if req.snapshot_policy is SnapshotPolicy.ALL:
            logger.debug("Adding all versions %s", [str(v) for v in candidates])
            return list(candidates)
        return apply_snapshot_policy(candidates, req.snapshot_policy is SnapshotPolicy.LATEST)

    def select(self, req: RangeRequest) -> List[ArtifactVersion]:
        """Return the accepted versions for ``req``.

        Newest first when snapshots are filtered, source order when
        ``include_snapshots`` is set.

        Raises:
            InvalidRangeError: when the range spec is malformed; nothing is looked up.
            MetadataLookupError: when the metadata source fails.
        """
        logger.debug("Finding versions for: %s", req.describe())
        try:
            version_range = VersionRange.parse(req.version_range)
        except InvalidRangeError as exc:
            raise exc.with_context(str(req.coordinate), req.version_range)
        if not version_range.has_restrictions:
            logger.debug("Soft version %s accepts any available version", version_range.recommended_version)
        selected = self.pick(req, self.fetch_candidates(req, version_range))
        logger.debug("Final versions to process: %s", [str(v) for v in selected])
        return selected
