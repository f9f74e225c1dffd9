"""Exceptions raised while resolving version ranges to artifacts."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple


class ResolutionError(Exception):
    """Base class for resolution failures.

    Carries the coordinate and range spec of the failing request so callers
    can report what was being resolved.
    """

    def __init__(
        self,
        message: str,
        *,
        coordinate: Optional[str] = None,
        version_range: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.coordinate = coordinate
        self.version_range = version_range

    def with_context(self, coordinate: Optional[str], version_range: Optional[str]) -> "ResolutionError":
        """Fill in missing context and return self for re-raising."""
        if self.coordinate is None:
            self.coordinate = coordinate
        if self.version_range is None:
            self.version_range = version_range
        return self

    def __str__(self) -> str:
        context = []
        if self.coordinate:
            context.append(f"coordinate={self.coordinate}")
        if self.version_range:
            context.append(f"range={self.version_range}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class InvalidRangeError(ResolutionError, ValueError):
    """The version range specification could not be parsed."""


class MetadataLookupError(ResolutionError):
    """The metadata source failed to list available versions."""


class MetadataNotFoundError(MetadataLookupError):
    """The metadata source has no entry for the coordinate."""


class OutputDirectoryError(ResolutionError):
    """The output directory for one artifact could not be created."""

    def __init__(self, message: str, *, path: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.path = path


class PartialResolutionError(ResolutionError):
    """Some versions of a request failed to materialize.

    ``artifacts`` holds the descriptors that succeeded, ``failures`` the
    ``(version, error)`` pairs for the ones that did not.
    """

    def __init__(
        self,
        message: str,
        *,
        artifacts: Sequence[Any],
        failures: Sequence[Tuple[Any, ResolutionError]],
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.artifacts: List[Any] = list(artifacts)
        self.failures: List[Tuple[Any, ResolutionError]] = list(failures)
