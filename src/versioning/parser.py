"""Token and manifest parsing into RangeRequest objects."""

from typing import Any, Dict, Mapping, Optional, Tuple

from constants import Constants

from .models import RangeRequest, normalize_classifier

# Manifest keys accepted in Maven camelCase and snake_case.
_FIELD_ALIASES = {
    "groupId": "group_id",
    "artifactId": "artifact_id",
    "versionRange": "version_range",
    "version_range": "version_range",
    "range": "version_range",
    "type": "type",
    "classifier": "classifier",
    "includeSnapshots": "include_snapshots",
    "includeLatestSnapshot": "include_latest_snapshot",
    "outputDirectory": "output_directory",
    "overWrite": "overwrite",
    "overwrite": "overwrite",
}
_BOOL_FIELDS = ("include_snapshots", "include_latest_snapshot", "overwrite")


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, spec or None) using the rightmost-colon rule."""
    s = s.strip()
    if ':' not in s:
        return s, None
    identifier, spec_part = s.rsplit(':', 1)
    spec = spec_part.strip()
    return identifier.strip(), spec if spec else None


def coerce_bool(value: Any, field_name: str) -> bool:
    """Accept a bool or a true/false style string; anything else is a ValueError."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "yes", "1", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "no", "0", "off", ""):
        return False
    raise ValueError(f"Invalid boolean for {field_name}: {value!r}")


def parse_cli_token(
    token: str,
    *,
    type_: Optional[str] = None,
    classifier: Optional[str] = None,
    include_snapshots: bool = False,
    include_latest_snapshot: bool = False,
    output_directory: Optional[str] = None,
    overwrite: Optional[bool] = None,
) -> RangeRequest:
    """Parse ``groupId:artifactId[:type[:classifier]]:range`` into a RangeRequest.

    The range is everything after the rightmost colon, so commas and brackets
    need no escaping. Type and classifier inside the token win over the
    keyword defaults.
    """
    id_part, spec = tokenize_rightmost_colon(token)
    if spec is None:
        raise ValueError(f"Missing version range in artifact token: {token!r}")
    parts = [p.strip() for p in id_part.split(':')]
    if len(parts) < 2 or len(parts) > 4 or not all(parts[:2]):
        raise ValueError(
            f"Expected groupId:artifactId[:type[:classifier]]:range, got {token!r}"
        )
    token_type = parts[2] if len(parts) > 2 and parts[2] else None
    token_classifier = parts[3] if len(parts) > 3 else None
    return RangeRequest(
        group_id=parts[0],
        artifact_id=parts[1],
        version_range=spec,
        type=token_type or type_ or Constants.DEFAULT_TYPE,
        classifier=normalize_classifier(token_classifier) or normalize_classifier(classifier),
        include_snapshots=include_snapshots,
        include_latest_snapshot=include_latest_snapshot,
        output_directory=output_directory,
        overwrite=overwrite,
    )


def parse_manifest_entry(entry: Mapping[str, Any]) -> RangeRequest:
    """Construct a RangeRequest from a config-file artifact entry.

    Unknown keys are rejected so typos do not silently fall back to defaults.
    """
    if not isinstance(entry, Mapping):
        raise ValueError(f"Artifact entry must be a mapping, got {type(entry).__name__}")
    fields: Dict[str, Any] = {}
    for key, value in entry.items():
        name = _FIELD_ALIASES.get(key) or (key if key in _FIELD_ALIASES.values() else None)
        if name is None:
            raise ValueError(f"Unknown artifact field: {key}")
        fields[name] = value

    missing = [k for k in ("group_id", "artifact_id", "version_range") if not fields.get(k)]
    if missing:
        raise ValueError(f"Artifact entry is missing: {', '.join(missing)}")

    for name in _BOOL_FIELDS:
        if name in fields and fields[name] is not None:
            fields[name] = coerce_bool(fields[name], name)
    fields["version_range"] = str(fields["version_range"]).strip()
    fields["type"] = fields.get("type") or Constants.DEFAULT_TYPE
    fields["classifier"] = normalize_classifier(fields.get("classifier"))
    if fields.get("output_directory") is not None:
        fields["output_directory"] = str(fields["output_directory"])
    for name in ("include_snapshots", "include_latest_snapshot"):
        if fields.get(name) is None:
            fields[name] = False
    return RangeRequest(**fields)
