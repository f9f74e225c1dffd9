"""Metadata sources listing the published versions of an artifact."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Mapping, Sequence, Union

from common.logging_utils import extra_context, is_debug_enabled

from .errors import MetadataLookupError, MetadataNotFoundError
from .models import ArtifactCoordinate
from .version import ArtifactVersion, as_version

logger = logging.getLogger(__name__)

VersionLister = Callable[[ArtifactCoordinate], Iterable[Union[str, ArtifactVersion]]]


class MetadataSource(ABC):
    """Lists every known version of a coordinate.

    Ordering of the returned versions is not guaranteed. Implementations raise
    MetadataLookupError (or MetadataNotFoundError) on failure.
    """

    @abstractmethod
    def retrieve_available_versions(self, coordinate: ArtifactCoordinate) -> List[ArtifactVersion]:
        """Return all published versions for ``coordinate``."""


class CallableMetadataSource(MetadataSource):
    """Adapts a plain version-listing function."""

    def __init__(self, func: VersionLister):
        self._func = func

    def retrieve_available_versions(self, coordinate: ArtifactCoordinate) -> List[ArtifactVersion]:
        return [as_version(v) for v in self._func(coordinate)]


def as_metadata_source(source: Union[MetadataSource, VersionLister]) -> MetadataSource:
    """Accept either a MetadataSource or a callable taking a coordinate."""
    if isinstance(source, MetadataSource):
        return source
    if callable(source):
        return CallableMetadataSource(source)
    raise TypeError(f"Unsupported metadata source: {type(source).__name__}")


class StaticMetadataSource(MetadataSource):
    """Versions from an in-memory mapping.

    Keys are tried from most to least specific:
    ``group:artifact:type:classifier``, ``group:artifact:type``, ``group:artifact``.
    """

    def __init__(self, versions: Mapping[str, Sequence[str]]):
        self._versions: Dict[str, List[str]] = {}
        for key, values in versions.items():
            if not isinstance(values, (list, tuple)):
                raise ValueError(f"Versions for {key} must be a list, got {values!r}")
            values = list(values)
            for v in values:
                if not isinstance(v, str):
                    raise ValueError(
                        f"Version {v!r} for {key} must be a string; quote it in the config file"
                    )
            self._versions[str(key)] = values

    def _keys(self, coordinate: ArtifactCoordinate) -> List[str]:
        keys = []
        if coordinate.classifier:
            keys.append(f"{coordinate.key}:{coordinate.type}:{coordinate.classifier}")
        keys.append(f"{coordinate.key}:{coordinate.type}")
        keys.append(coordinate.key)
        return keys

    def retrieve_available_versions(self, coordinate: ArtifactCoordinate) -> List[ArtifactVersion]:
        for key in self._keys(coordinate):
            if key in self._versions:
                return [ArtifactVersion(v) for v in self._versions[key]]
        raise MetadataNotFoundError("No metadata available", coordinate=str(coordinate))


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(elem: ET.Element, name: str):
    for item in elem:
        if _local_name(item.tag) == name:
            return item
    return None


def _text(elem) -> str:
    if elem is None or not isinstance(elem.text, str):
        return ""
    return elem.text.strip()


def parse_metadata_document(text: str) -> Dict[str, object]:
    """Parse a maven-metadata.xml document.

    Returns a dict with ``groupId``, ``artifactId`` and ``versions`` (source
    order). Namespaced documents are accepted.

    Raises:
        ET.ParseError: on malformed XML.
    """
    root = ET.fromstring(text)
    versions: List[str] = []
    versioning = _child(root, "versioning")
    if versioning is not None:
        versions_elem = _child(versioning, "versions")
        if versions_elem is not None:
            for version_elem in versions_elem:
                if _local_name(version_elem.tag) == "version" and _text(version_elem):
                    versions.append(_text(version_elem))
    return {
        "groupId": _text(_child(root, "groupId")),
        "artifactId": _text(_child(root, "artifactId")),
        "versions": versions,
    }


class MavenMetadataFileSource(MetadataSource):
    """Reads maven-metadata.xml files already present on disk.

    Files are parsed on every lookup and matched by their groupId/artifactId.
    """

    def __init__(self, paths: Iterable[str]):
        self.paths = list(paths)

    def _load(self, path: str, coordinate: ArtifactCoordinate) -> Dict[str, object]:
        try:
            with open(path, "r", encoding="utf-8") as handle:
                return parse_metadata_document(handle.read())
        except OSError as exc:
            raise MetadataLookupError(
                f"Unable to read metadata file {path}: {exc}", coordinate=str(coordinate)
            ) from exc
        except ET.ParseError as exc:
            raise MetadataLookupError(
                f"Malformed metadata file {path}: {exc}", coordinate=str(coordinate)
            ) from exc

    def retrieve_available_versions(self, coordinate: ArtifactCoordinate) -> List[ArtifactVersion]:
        for path in self.paths:
            document = self._load(path, coordinate)
            if f"{document['groupId']}:{document['artifactId']}" != coordinate.key:
                continue
            if is_debug_enabled(logger):
                logger.debug(
                    "Loaded Maven metadata",
                    extra=extra_context(
                        event="metadata_loaded",
                        component="sources",
                        action="retrieve_available_versions",
                        target=path,
                        count=len(document["versions"]),
                    ),
                )
            return [ArtifactVersion(v) for v in document["versions"]]
        raise MetadataNotFoundError("No metadata file lists this artifact", coordinate=str(coordinate))


class ChainedMetadataSource(MetadataSource):
    """Asks each source in turn; the first one that knows the coordinate wins."""

    def __init__(self, sources: Sequence[MetadataSource]):
        self.sources = list(sources)

    def retrieve_available_versions(self, coordinate: ArtifactCoordinate) -> List[ArtifactVersion]:
        for source in self.sources:
            try:
                return source.retrieve_available_versions(coordinate)
            except MetadataNotFoundError:
                continue
        raise MetadataNotFoundError("No metadata source lists this artifact", coordinate=str(coordinate))
