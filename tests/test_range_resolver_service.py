"""Tests for the end-to-end range resolution service."""

import os
from unittest.mock import MagicMock

import pytest

from versioning.errors import (
    InvalidRangeError,
    MetadataLookupError,
    OutputDirectoryError,
    PartialResolutionError,
)
from versioning.materializer import Filesystem
from versioning.models import RangeRequest, ResolverSettings
from versioning.service import ArtifactRangeResolver
from versioning.sources import StaticMetadataSource

VERSIONS = {"com.example:lib": ["1.0", "1.1", "1.2-SNAPSHOT", "2.0"]}


def make_request(**overrides):
    fields = dict(group_id="com.example", artifact_id="lib", version_range="[1.0,2.0)")
    fields.update(overrides)
    return RangeRequest(**fields)


def test_resolve_end_to_end(tmp_path):
    settings = ResolverSettings(output_directory=str(tmp_path / "deps"))
    resolver = ArtifactRangeResolver(StaticMetadataSource(VERSIONS), settings=settings)

    artifacts = resolver.resolve(make_request(include_latest_snapshot=True))

    assert [a.destination_file_name for a in artifacts] == [
        "lib-1.2-SNAPSHOT.jar",
        "lib-1.1.jar",
        "lib-1.0.jar",
    ]
    assert all(a.needs_processing for a in artifacts)
    assert all(a.output_directory == settings.output_directory for a in artifacts)
    assert os.path.isdir(settings.output_directory)


def test_settings_per_call_override_defaults(tmp_path):
    resolver = ArtifactRangeResolver(
        StaticMetadataSource(VERSIONS),
        settings=ResolverSettings(output_directory=str(tmp_path / "a")),
    )
    call_settings = ResolverSettings(output_directory=str(tmp_path / "b"), overwrite=True)

    artifacts = resolver.resolve(make_request(), call_settings)

    assert {a.output_directory for a in artifacts} == {call_settings.output_directory}
    assert all(a.overwrite for a in artifacts)
    assert not os.path.exists(tmp_path / "a")


def test_no_matching_versions_returns_empty():
    filesystem = MagicMock(spec=Filesystem)
    resolver = ArtifactRangeResolver(StaticMetadataSource(VERSIONS), filesystem)
    assert resolver.resolve(make_request(version_range="[5.0,)")) == []
    filesystem.ensure_directory.assert_not_called()


def test_invalid_range_aborts_before_materializing():
    filesystem = MagicMock(spec=Filesystem)
    resolver = ArtifactRangeResolver(StaticMetadataSource(VERSIONS), filesystem)
    with pytest.raises(InvalidRangeError):
        resolver.resolve(make_request(version_range="(1.0)"))
    filesystem.ensure_directory.assert_not_called()


def test_lookup_error_aborts_request():
    filesystem = MagicMock(spec=Filesystem)
    resolver = ArtifactRangeResolver(StaticMetadataSource({}), filesystem)
    with pytest.raises(MetadataLookupError):
        resolver.resolve(make_request())
    filesystem.ensure_directory.assert_not_called()


def test_directory_failure_keeps_other_artifacts():
    filesystem = MagicMock(spec=Filesystem)
    calls = []

    def ensure_directory(path):
        calls.append(path)
        if len(calls) == 2:
            raise PermissionError("denied")

    filesystem.ensure_directory.side_effect = ensure_directory
    resolver = ArtifactRangeResolver(
        StaticMetadataSource(VERSIONS), filesystem, ResolverSettings(output_directory="out")
    )

    with pytest.raises(PartialResolutionError) as exc_info:
        resolver.resolve(make_request(include_latest_snapshot=True))

    error = exc_info.value
    assert [str(a.version) for a in error.artifacts] == ["1.2-SNAPSHOT", "1.0"]
    assert len(error.failures) == 1
    failed_version, failure = error.failures[0]
    assert str(failed_version) == "1.1"
    assert isinstance(failure, OutputDirectoryError)
    assert len(calls) == 3
    assert error.version_range == "[1.0,2.0)"
    assert "1 of 3" in str(error)
