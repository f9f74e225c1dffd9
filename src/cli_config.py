"""Configuration loading and CLI/environment overrides.

Builds explicit ResolverSettings, the list of RangeRequests and the metadata
source from, in order of precedence, CLI arguments, environment variables,
the configuration file and built-in defaults.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants
from versioning.models import RangeRequest, ResolverSettings
from versioning.parser import coerce_bool, parse_cli_token, parse_manifest_entry
from versioning.sources import (
    ChainedMetadataSource,
    MavenMetadataFileSource,
    MetadataSource,
    StaticMetadataSource,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """The configuration file is missing, unreadable or malformed."""


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file.

    JSON is used for ``.json`` files, YAML otherwise. An empty file yields an
    empty dict.

    Raises:
        ConfigError: on I/O or parse errors, or when the top level is not a mapping.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as handle:
            if path.lower().endswith(".json"):
                data = json.load(handle)
            else:
                data = yaml.safe_load(handle)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping at the top level")
    logger.info("Loaded config from: %s", path)
    return data


def _env_bool(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    logger.warning("Ignoring %s=%r: expected a boolean", name, raw)
    return None


def build_settings(args: Any, config: Optional[Dict[str, Any]] = None) -> ResolverSettings:
    """Resolve settings with CLI > environment > config file > defaults.

    Raises:
        ValueError: when the config file holds a non-boolean ``overwrite``.
    """
    config = config or {}

    output_directory = Constants.DEFAULT_OUTPUT_DIRECTORY
    if config.get("output_directory"):
        output_directory = str(config["output_directory"])
    env_output = os.environ.get(Constants.ENV_OUTPUT_DIRECTORY)
    if env_output and env_output.strip():
        output_directory = env_output.strip()
    if getattr(args, "OUTPUT_DIRECTORY", None):
        output_directory = args.OUTPUT_DIRECTORY

    overwrite = Constants.DEFAULT_OVERWRITE
    if config.get("overwrite") is not None:
        overwrite = coerce_bool(config["overwrite"], "overwrite")
    env_overwrite = _env_bool(Constants.ENV_OVERWRITE)
    if env_overwrite is not None:
        overwrite = env_overwrite
    if getattr(args, "OVERWRITE", False):
        overwrite = True

    return ResolverSettings(output_directory=output_directory, overwrite=overwrite)


def build_requests(args: Any, config: Optional[Dict[str, Any]] = None) -> List[RangeRequest]:
    """Collect requests from config ``artifacts`` entries, then ``--artifact`` tokens.

    Raises:
        ValueError: when an entry or token is malformed.
    """
    config = config or {}
    requests: List[RangeRequest] = []

    entries = config.get("artifacts") or []
    if not isinstance(entries, list):
        raise ValueError("Config 'artifacts' must be a list")
    for entry in entries:
        requests.append(parse_manifest_entry(entry))

    for token in getattr(args, "ARTIFACTS", None) or []:
        requests.append(
            parse_cli_token(
                token,
                type_=getattr(args, "TYPE", None),
                classifier=getattr(args, "CLASSIFIER", None),
                include_snapshots=bool(getattr(args, "INCLUDE_SNAPSHOTS", False)),
                include_latest_snapshot=bool(getattr(args, "INCLUDE_LATEST_SNAPSHOT", False)),
            )
        )
    return requests


def build_metadata_source(args: Any, config: Optional[Dict[str, Any]] = None) -> MetadataSource:
    """Chain metadata files (CLI first, then config) with static config versions."""
    config = config or {}
    sources: List[MetadataSource] = []

    files = list(getattr(args, "METADATA", None) or [])
    files.extend(str(p) for p in (config.get("metadata_files") or []))
    if files:
        sources.append(MavenMetadataFileSource(files))

    static = config.get("metadata") or {}
    if not isinstance(static, dict):
        raise ValueError("Config 'metadata' must map group:artifact to a list of versions")
    if static:
        sources.append(StaticMetadataSource(static))

    return ChainedMetadataSource(sources)
