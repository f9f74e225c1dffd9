"""Maven version range parsing and containment.

Supports bracket notation like ``[1.0,2.0)``, ``(1.0,]``, ``[1.2]``, unions of
such sets separated by commas, and a bare version acting as a soft
recommendation that matches everything.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .errors import InvalidRangeError
from .version import ArtifactVersion


@dataclass(frozen=True)
class Restriction:
    """One interval of a version range; a ``None`` bound is open-ended."""
    lower_bound: Optional[ArtifactVersion]
    lower_inclusive: bool
    upper_bound: Optional[ArtifactVersion]
    upper_inclusive: bool

    @classmethod
    def everything(cls) -> "Restriction":
        return cls(None, False, None, False)

    def contains(self, version: ArtifactVersion) -> bool:
        if self.lower_bound is not None:
            cmp = self.lower_bound.compare_to(version)
            if cmp > 0 or (cmp == 0 and not self.lower_inclusive):
                return False
        if self.upper_bound is not None:
            cmp = self.upper_bound.compare_to(version)
            if cmp < 0 or (cmp == 0 and not self.upper_inclusive):
                return False
        return True

    def __str__(self) -> str:
        if (
            self.lower_bound is not None
            and self.lower_bound == self.upper_bound
            and self.lower_inclusive
            and self.upper_inclusive
        ):
            return f"[{self.lower_bound}]"
        lower = str(self.lower_bound) if self.lower_bound is not None else ""
        upper = str(self.upper_bound) if self.upper_bound is not None else ""
        return (
            ("[" if self.lower_inclusive else "(")
            + f"{lower},{upper}"
            + ("]" if self.upper_inclusive else ")")
        )


@dataclass(frozen=True)
class VersionRange:
    """Parsed version range: a union of restrictions."""
    spec: str
    restrictions: Tuple[Restriction, ...]
    recommended_version: Optional[ArtifactVersion] = None

    @classmethod
    def parse(cls, spec: Optional[str]) -> "VersionRange":
        """Parse a range specification.

        Raises:
            InvalidRangeError: when the spec is empty or malformed.
        """
        if spec is None or not str(spec).strip():
            raise InvalidRangeError("Version range must not be empty", version_range=spec)
        raw = str(spec).strip()
        restrictions: List[Restriction] = []
        process = raw
        upper_bound: Optional[ArtifactVersion] = None

        while process.startswith("[") or process.startswith("("):
            end = _closing_index(process)
            if end < 0:
                raise InvalidRangeError(f"Unbounded range: {raw}", version_range=raw)
            restriction = _parse_restriction(process[: end + 1], raw)
            if restrictions and (
                restriction.lower_bound is None
                or upper_bound is None
                or restriction.lower_bound < upper_bound
            ):
                raise InvalidRangeError(f"Ranges overlap: {raw}", version_range=raw)
            restrictions.append(restriction)
            upper_bound = restriction.upper_bound
            process = process[end + 1:].strip()
            if process.startswith(","):
                process = process[1:].strip()

        if process:
            if restrictions:
                raise InvalidRangeError(
                    f"Only fully-qualified sets allowed in multiple set scenario: {raw}",
                    version_range=raw,
                )
            if any(char in process for char in "[](),"):
                raise InvalidRangeError(f"Invalid version range: {raw}", version_range=raw)
            return cls(raw, (Restriction.everything(),), ArtifactVersion(process))

        return cls(raw, tuple(restrictions))

    @property
    def has_restrictions(self) -> bool:
        """False for a soft recommendation that accepts any version."""
        return self.recommended_version is None

    def contains(self, version: ArtifactVersion) -> bool:
        return any(restriction.contains(version) for restriction in self.restrictions)

    def filter(self, versions: Iterable[ArtifactVersion]) -> List[ArtifactVersion]:
        """Versions inside the range, in their original order."""
        return [v for v in versions if self.contains(v)]

    def __str__(self) -> str:
        if self.recommended_version is not None:
            return str(self.recommended_version)
        return ",".join(str(r) for r in self.restrictions)


def _closing_index(process: str) -> int:
    """Index of the first ``)`` or ``]``, whichever comes first."""
    candidates = [i for i in (process.find(")"), process.find("]")) if i >= 0]
    return min(candidates) if candidates else -1


def _parse_restriction(spec: str, raw: str) -> Restriction:
    lower_inclusive = spec.startswith("[")
    upper_inclusive = spec.endswith("]")
    inner = spec[1:-1].strip()

    if "," not in inner:
        if not lower_inclusive or not upper_inclusive:
            raise InvalidRangeError(
                f"Single version must be surrounded by []: {raw}", version_range=raw
            )
        if not inner:
            raise InvalidRangeError(f"Single version must not be empty: {raw}", version_range=raw)
        version = ArtifactVersion(inner)
        return Restriction(version, True, version, True)

    lower_str, upper_str = (part.strip() for part in inner.split(",", 1))
    if lower_str == upper_str:
        raise InvalidRangeError(f"Range cannot have identical boundaries: {raw}", version_range=raw)

    lower = ArtifactVersion(lower_str) if lower_str else None
    upper = ArtifactVersion(upper_str) if upper_str else None
    if lower is not None and upper is not None and upper < lower:
        raise InvalidRangeError(f"Range defies version ordering: {raw}", version_range=raw)
    return Restriction(lower, lower_inclusive, upper, upper_inclusive)
