"""Range resolution service composing selection and materialization."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from common.logging_utils import extra_context, is_debug_enabled

from .errors import OutputDirectoryError, PartialResolutionError
from .materializer import ArtifactMaterializer, Filesystem
from .models import RangeRequest, ResolvedArtifact, ResolverSettings
from .selector import VersionSelector
from .sources import MetadataSource, VersionLister
from .version import ArtifactVersion

logger = logging.getLogger(__name__)


class ArtifactRangeResolver:
    """Expands a range request into one resolved artifact per accepted version."""

    def __init__(
        self,
        source: Union[MetadataSource, VersionLister],
        filesystem: Optional[Filesystem] = None,
        settings: Optional[ResolverSettings] = None,
    ):
        self.selector = VersionSelector(source)
        self.materializer = ArtifactMaterializer(filesystem)
        self.settings = settings or ResolverSettings()

    def resolve(
        self, req: RangeRequest, settings: Optional[ResolverSettings] = None
    ) -> List[ResolvedArtifact]:
        """Resolve ``req`` to artifact descriptors.

        Range and lookup errors propagate before anything is materialized.
        A directory failure only skips its own version; once every version
        has been tried, PartialResolutionError reports the successes and the
        failures together.
        """
        settings = settings or self.settings
        versions = self.selector.select(req)

        artifacts: List[ResolvedArtifact] = []
        failures: List[Tuple[ArtifactVersion, OutputDirectoryError]] = []
        for version in versions:
            try:
                artifacts.append(self.materializer.materialize(req, version, settings))
            except OutputDirectoryError as exc:
                logger.error("Skipping %s:%s: %s", req.coordinate, version, exc)
                failures.append((version, exc))

        if is_debug_enabled(logger):
            logger.debug(
                "Range resolved",
                extra=extra_context(
                    event="function_exit",
                    component="service",
                    action="resolve",
                    outcome="partial" if failures else "success",
                    target=str(req.coordinate),
                    count=len(artifacts),
                ),
            )

        if failures:
            raise PartialResolutionError(
                f"{len(failures)} of {len(versions)} artifacts could not be materialized",
                artifacts=artifacts,
                failures=failures,
                coordinate=str(req.coordinate),
                version_range=req.version_range,
            )
        return artifacts
