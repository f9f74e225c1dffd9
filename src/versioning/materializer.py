"""Builds resolved artifact descriptors for accepted versions."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

from .errors import OutputDirectoryError
from .models import RangeRequest, ResolvedArtifact, ResolverSettings
from .version import ArtifactVersion

logger = logging.getLogger(__name__)


class Filesystem(ABC):
    """Filesystem operations the materializer depends on."""

    @abstractmethod
    def ensure_directory(self, path: str) -> None:
        """Create ``path`` if absent; no-op if it already exists."""


class LocalFilesystem(Filesystem):
    """Creates directories on the local disk, parents included."""

    def ensure_directory(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)


def destination_file_name(artifact_id: str, version: ArtifactVersion, type_: str) -> str:
    """``<artifactId>-<version>.<type>``"""
    return f"{artifact_id}-{version}.{type_}"


class ArtifactMaterializer:
    """Turns (request, version) into a ResolvedArtifact and prepares its directory."""

    def __init__(self, filesystem: Optional[Filesystem] = None):
        self.filesystem = filesystem if filesystem is not None else LocalFilesystem()

    def materialize(
        self,
        req: RangeRequest,
        version: ArtifactVersion,
        settings: Optional[ResolverSettings] = None,
    ) -> ResolvedArtifact:
        """Build the descriptor for one accepted version.

        Raises:
            OutputDirectoryError: if the output directory cannot be created.
        """
        settings = settings or ResolverSettings()
        coordinate = req.coordinate
        output_directory = req.output_directory or settings.output_directory
        try:
            self.filesystem.ensure_directory(output_directory)
        except OSError as exc:
            raise OutputDirectoryError(
                f"Unable to create output directory {output_directory}: {exc}",
                path=output_directory,
                coordinate=f"{coordinate}:{version}",
                version_range=req.version_range,
            ) from exc

        artifact = ResolvedArtifact(
            group_id=coordinate.group_id,
            artifact_id=coordinate.artifact_id,
            version=version,
            type=coordinate.type,
            classifier=coordinate.classifier,
            destination_file_name=destination_file_name(coordinate.artifact_id, version, coordinate.type),
            output_directory=output_directory,
            overwrite=settings.overwrite if req.overwrite is None else bool(req.overwrite),
            needs_processing=True,
        )
        logger.info("Artifact : %s Found version : %s", coordinate.artifact_id, version)
        return artifact
