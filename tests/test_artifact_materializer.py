"""Tests for resolved artifact construction."""

import os
from unittest.mock import MagicMock

import pytest

from versioning.errors import OutputDirectoryError
from versioning.materializer import ArtifactMaterializer, Filesystem, LocalFilesystem, destination_file_name
from versioning.models import RangeRequest, ResolverSettings
from versioning.version import ArtifactVersion


def make_request(**overrides):
    fields = dict(group_id="com.example", artifact_id="lib", version_range="[1.0,2.0)")
    fields.update(overrides)
    return RangeRequest(**fields)


@pytest.fixture
def settings(tmp_path):
    return ResolverSettings(output_directory=str(tmp_path / "default"), overwrite=False)


def test_destination_file_name_rule(settings):
    materializer = ArtifactMaterializer()
    for raw in ["1.0", "1.5-SNAPSHOT", "1.9.9"]:
        artifact = materializer.materialize(make_request(type="war"), ArtifactVersion(raw), settings)
        assert artifact.destination_file_name == f"lib-{raw}.war"
    assert destination_file_name("core", ArtifactVersion("2.0"), "jar") == "core-2.0.jar"


def test_default_output_directory_created(settings):
    artifact = ArtifactMaterializer().materialize(make_request(), ArtifactVersion("1.0"), settings)
    assert artifact.output_directory == settings.output_directory
    assert os.path.isdir(settings.output_directory)
    assert artifact.destination_path == os.path.join(settings.output_directory, "lib-1.0.jar")


def test_request_output_directory_wins(tmp_path, settings):
    override = str(tmp_path / "nested" / "override")
    artifact = ArtifactMaterializer().materialize(
        make_request(output_directory=override), ArtifactVersion("1.0"), settings
    )
    assert artifact.output_directory == override
    assert os.path.isdir(override)
    assert not os.path.exists(settings.output_directory)


def test_existing_directory_is_fine(settings):
    os.makedirs(settings.output_directory)
    materializer = ArtifactMaterializer(LocalFilesystem())
    first = materializer.materialize(make_request(), ArtifactVersion("1.0"), settings)
    second = materializer.materialize(make_request(), ArtifactVersion("1.1"), settings)
    assert first.output_directory == second.output_directory


def test_directory_failure_raises(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory", encoding="utf-8")
    settings = ResolverSettings(output_directory=str(blocker))
    with pytest.raises(OutputDirectoryError) as exc_info:
        ArtifactMaterializer().materialize(make_request(), ArtifactVersion("1.0"), settings)
    assert exc_info.value.path == str(blocker)
    assert exc_info.value.coordinate == "com.example:lib:jar:1.0"
    assert isinstance(exc_info.value.__cause__, OSError)


@pytest.mark.parametrize(
    "requested,default,expected",
    [
        (None, False, False),
        (None, True, True),
        (True, False, True),
        (False, True, False),
    ],
)
def test_overwrite_defaulting(requested, default, expected):
    filesystem = MagicMock(spec=Filesystem)
    settings = ResolverSettings(output_directory="out", overwrite=default)
    artifact = ArtifactMaterializer(filesystem).materialize(
        make_request(overwrite=requested), ArtifactVersion("1.0"), settings
    )
    assert artifact.overwrite is expected
    filesystem.ensure_directory.assert_called_once_with("out")


def test_needs_processing_and_coordinates():
    filesystem = MagicMock(spec=Filesystem)
    artifact = ArtifactMaterializer(filesystem).materialize(
        make_request(classifier="sources"), ArtifactVersion("1.2"), ResolverSettings(output_directory="out")
    )
    assert artifact.needs_processing is True
    assert artifact.group_id == "com.example"
    assert artifact.artifact_id == "lib"
    assert artifact.version == ArtifactVersion("1.2")
    assert artifact.type == "jar"
    assert artifact.classifier == "sources"
    assert artifact.coordinate == "com.example:lib:1.2:jar:sources"


@pytest.mark.parametrize("classifier", [None, "", "  "])
def test_empty_classifier_materialized_as_absent(classifier):
    filesystem = MagicMock(spec=Filesystem)
    artifact = ArtifactMaterializer(filesystem).materialize(
        make_request(classifier=classifier), ArtifactVersion("1.2"), ResolverSettings(output_directory="out")
    )
    assert artifact.classifier is None
    assert artifact.coordinate == "com.example:lib:1.2:jar"
    assert artifact.to_dict()["classifier"] is None


def test_default_settings_when_omitted():
    filesystem = MagicMock(spec=Filesystem)
    artifact = ArtifactMaterializer(filesystem).materialize(make_request(), ArtifactVersion("1.0"))
    assert artifact.output_directory == os.path.join("target", "dependency")
    assert artifact.overwrite is False


def test_to_dict():
    filesystem = MagicMock(spec=Filesystem)
    artifact = ArtifactMaterializer(filesystem).materialize(
        make_request(), ArtifactVersion("1.0"), ResolverSettings(output_directory="out", overwrite=True)
    )
    assert artifact.to_dict() == {
        "groupId": "com.example",
        "artifactId": "lib",
        "version": "1.0",
        "type": "jar",
        "classifier": None,
        "destFileName": "lib-1.0.jar",
        "outputDirectory": "out",
        "overWrite": True,
        "needsProcessing": True,
    }


def test_info_log_per_version(caplog):
    filesystem = MagicMock(spec=Filesystem)
    with caplog.at_level("INFO", logger="versioning.materializer"):
        ArtifactMaterializer(filesystem).materialize(
            make_request(), ArtifactVersion("1.3"), ResolverSettings(output_directory="out")
        )
    assert "Artifact : lib Found version : 1.3" in caplog.text
