"""Data models for version range requests and resolved artifacts."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from constants import Constants

from .version import ArtifactVersion


class SnapshotPolicy(Enum):
    """Snapshot inclusion derived from the request flags."""
    ALL = "all"
    LATEST = "latest"
    NONE = "none"


def normalize_classifier(classifier: Optional[str]) -> Optional[str]:
    """Treat an empty or blank classifier as no classifier."""
    if classifier is None:
        return None
    classifier = str(classifier).strip()
    return classifier or None


@dataclass(frozen=True)
class ArtifactCoordinate:
    """groupId/artifactId plus packaging type and optional classifier."""
    group_id: str
    artifact_id: str
    type: str = Constants.DEFAULT_TYPE
    classifier: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "classifier", normalize_classifier(self.classifier))

    @property
    def key(self) -> str:
        """``groupId:artifactId``, the unit metadata is published for."""
        return f"{self.group_id}:{self.artifact_id}"

    def __str__(self) -> str:
        parts = [self.group_id, self.artifact_id, self.type]
        if self.classifier:
            parts.append(self.classifier)
        return ":".join(parts)


@dataclass
class RangeRequest:
    """A dependency declared with a version range instead of a pinned version."""
    group_id: str
    artifact_id: str
    version_range: str
    type: str = Constants.DEFAULT_TYPE
    classifier: Optional[str] = None
    include_snapshots: bool = False
    include_latest_snapshot: bool = False
    output_directory: Optional[str] = None
    overwrite: Optional[bool] = None  # None defers to ResolverSettings.overwrite

    @property
    def coordinate(self) -> ArtifactCoordinate:
        return ArtifactCoordinate(self.group_id, self.artifact_id, self.type, self.classifier)

    @property
    def snapshot_policy(self) -> SnapshotPolicy:
        if self.include_snapshots:
            return SnapshotPolicy.ALL
        if self.include_latest_snapshot:
            return SnapshotPolicy.LATEST
        return SnapshotPolicy.NONE

    def describe(self) -> str:
        return (
            f"{self.coordinate} range={self.version_range} "
            f"snapshots={self.snapshot_policy.value}"
        )


@dataclass(frozen=True)
class ResolverSettings:
    """Defaults applied to every resolution call."""
    output_directory: str = Constants.DEFAULT_OUTPUT_DIRECTORY
    overwrite: bool = Constants.DEFAULT_OVERWRITE


@dataclass
class ResolvedArtifact:
    """One concrete artifact produced from a range request, ready to be copied."""
    group_id: str
    artifact_id: str
    version: ArtifactVersion
    type: str
    classifier: Optional[str]
    destination_file_name: str
    output_directory: str
    overwrite: bool
    needs_processing: bool = field(default=True)

    @property
    def coordinate(self) -> str:
        """``groupId:artifactId:version:type[:classifier]``."""
        parts = [self.group_id, self.artifact_id, str(self.version), self.type]
        if self.classifier:
            parts.append(self.classifier)
        return ":".join(parts)

    @property
    def destination_path(self) -> str:
        return os.path.join(self.output_directory, self.destination_file_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "version": str(self.version),
            "type": self.type,
            "classifier": self.classifier,
            "destFileName": self.destination_file_name,
            "outputDirectory": self.output_directory,
            "overWrite": self.overwrite,
            "needsProcessing": self.needs_processing,
        }
