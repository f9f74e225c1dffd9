"""Maven-compatible artifact versions.

Ordering follows Maven's comparable version rules, component extraction
(major/minor/incremental/build number/qualifier) follows Maven's default
artifact version parsing.
"""
from __future__ import annotations

import functools
import re
from typing import List, Optional, Union

from constants import Constants

_DIGITS = re.compile(r"^[0-9]+$")

# Well-known qualifiers in ascending order; "" marks a release.
_QUALIFIERS = ["alpha", "beta", "milestone", "rc", "snapshot", "", "sp"]
_ALIASES = {"ga": "", "final": "", "release": "", "cr": "rc"}
_RELEASE_VERSION_INDEX = str(_QUALIFIERS.index(""))
_SHORT_QUALIFIERS = {"a": "alpha", "b": "beta", "m": "milestone"}


def _comparable_qualifier(qualifier: str) -> str:
    """Map a qualifier to a string that sorts in qualifier order."""
    if qualifier in _QUALIFIERS:
        return str(_QUALIFIERS.index(qualifier))
    return f"{len(_QUALIFIERS)}-{qualifier}"


def _cmp(left, right) -> int:
    return (left > right) - (left < right)


class _IntItem:
    __slots__ = ("value",)

    def __init__(self, text: str = "0"):
        self.value = int(text)

    def is_null(self) -> bool:
        return self.value == 0

    def compare_to(self, other: Optional[_Item]) -> int:
        if other is None:
            return 0 if self.value == 0 else 1
        if isinstance(other, _IntItem):
            return _cmp(self.value, other.value)
        return 1

    def __str__(self) -> str:
        return str(self.value)


class _StringItem:
    __slots__ = ("value",)

    def __init__(self, text: str, followed_by_digit: bool):
        if followed_by_digit and len(text) == 1:
            text = _SHORT_QUALIFIERS.get(text, text)
        self.value = _ALIASES.get(text, text)

    def is_null(self) -> bool:
        return _comparable_qualifier(self.value) == _RELEASE_VERSION_INDEX

    def compare_to(self, other: Optional[_Item]) -> int:
        if other is None:
            return _cmp(_comparable_qualifier(self.value), _RELEASE_VERSION_INDEX)
        if isinstance(other, _IntItem):
            return -1
        if isinstance(other, _StringItem):
            return _cmp(_comparable_qualifier(self.value), _comparable_qualifier(other.value))
        return -1

    def __str__(self) -> str:
        return self.value


class _ListItem(list):
    def is_null(self) -> bool:
        return len(self) == 0

    def normalize(self) -> None:
        """Drop trailing null items, looking through nested lists."""
        for i in range(len(self) - 1, -1, -1):
            item = self[i]
            if item.is_null():
                del self[i]
            elif not isinstance(item, _ListItem):
                break

    def compare_to(self, other: Optional[_Item]) -> int:
        if other is None:
            if not self:
                return 0
            return self[0].compare_to(None)
        if isinstance(other, _IntItem):
            return -1
        if isinstance(other, _StringItem):
            return 1
        for i in range(max(len(self), len(other))):
            left = self[i] if i < len(self) else None
            right = other[i] if i < len(other) else None
            if left is None:
                result = 0 if right is None else -right.compare_to(None)
            else:
                result = left.compare_to(right)
            if result != 0:
                return result
        return 0

    def __str__(self) -> str:
        parts: List[str] = []
        for i, item in enumerate(self):
            if i > 0:
                parts.append("-" if isinstance(item, _ListItem) else ".")
            parts.append(str(item))
        return "".join(parts)


_Item = Union[_IntItem, _StringItem, _ListItem]


def _parse_item(is_digit: bool, text: str) -> _Item:
    return _IntItem(text) if is_digit else _StringItem(text, False)


def _parse_comparable(raw: str) -> _ListItem:
    """Tokenize a version string into nested comparable items."""
    version = raw.lower()
    items = current = _ListItem()
    stack = [current]
    is_digit = False
    start = 0

    def open_sublist() -> _ListItem:
        sub = _ListItem()
        current.append(sub)
        stack.append(sub)
        return sub

    for i, char in enumerate(version):
        if char == ".":
            current.append(_IntItem() if i == start else _parse_item(is_digit, version[start:i]))
            start = i + 1
        elif char == "-":
            current.append(_IntItem() if i == start else _parse_item(is_digit, version[start:i]))
            start = i + 1
            current = open_sublist()
        elif "0" <= char <= "9":
            if not is_digit and i > start:
                current.append(_StringItem(version[start:i], True))
                start = i
                current = open_sublist()
            is_digit = True
        else:
            if is_digit and i > start:
                current.append(_parse_item(True, version[start:i]))
                start = i
                current = open_sublist()
            is_digit = False

    if len(version) > start:
        current.append(_parse_item(is_digit, version[start:]))

    while stack:
        stack.pop().normalize()
    return items


def _try_parse_int(text: str) -> Optional[int]:
    if not _DIGITS.match(text):
        return None
    value = int(text)
    return value if value <= 2**31 - 1 else None


def _next_integer_token(token: str) -> Optional[int]:
    if len(token) > 1 and token.startswith("0"):
        return None
    return _try_parse_int(token)


@functools.total_ordering
class ArtifactVersion:
    """A published artifact version.

    Instances compare using Maven ordering, so ``ArtifactVersion("1.0")`` equals
    ``ArtifactVersion("1.0.0")`` and ``1.0-SNAPSHOT`` sorts before ``1.0``.
    ``str()`` always returns the string the version was created from.
    """

    def __init__(self, raw: str):
        if raw is None:
            raise ValueError("Version string must not be None")
        self.raw = str(raw).strip()
        self._comparable = _parse_comparable(self.raw)
        self.major: Optional[int] = None
        self.minor: Optional[int] = None
        self.incremental: Optional[int] = None
        self.build_number: Optional[int] = None
        self.qualifier: Optional[str] = None
        self._parse_components()

    def _parse_components(self) -> None:
        raw = self.raw
        part1, sep, part2 = raw.partition("-")
        if sep:
            if len(part2) == 1 or not part2.startswith("0"):
                self.build_number = _try_parse_int(part2)
                if self.build_number is None:
                    self.qualifier = part2
            else:
                self.qualifier = part2

        if "." not in part1 and not part1.startswith("0"):
            self.major = _try_parse_int(part1)
            if self.major is None:
                self.qualifier = raw
                self.build_number = None
            return

        tokens = [token for token in part1.split(".") if token]
        numbers = [_next_integer_token(token) for token in tokens[:3]]
        fallback = not numbers or any(number is None for number in numbers)
        numbers += [None] * (3 - len(numbers))
        self.major, self.minor, self.incremental = numbers
        if len(tokens) > 3:
            self.qualifier = tokens[3]
            fallback = fallback or bool(_DIGITS.match(tokens[3]))
        if ".." in part1 or part1.startswith(".") or part1.endswith("."):
            fallback = True
        if fallback:
            self.qualifier = raw
            self.major = self.minor = self.incremental = self.build_number = None

    @property
    def is_snapshot(self) -> bool:
        """True when the qualifier is exactly the snapshot marker."""
        return self.qualifier == Constants.SNAPSHOT_QUALIFIER

    @property
    def canonical(self) -> str:
        """Normalized form shared by all equal versions."""
        return str(self._comparable)

    def compare_to(self, other: "ArtifactVersion") -> int:
        return self._comparable.compare_to(other._comparable)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArtifactVersion):
            return NotImplemented
        return self.compare_to(other) == 0

    def __lt__(self, other: "ArtifactVersion") -> bool:
        if not isinstance(other, ArtifactVersion):
            return NotImplemented
        return self.compare_to(other) < 0

    def __hash__(self) -> int:
        return hash(self.canonical)

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"ArtifactVersion({self.raw!r})"


def as_version(value: Union[str, ArtifactVersion]) -> ArtifactVersion:
    """Coerce a version string to ArtifactVersion, passing instances through."""
    if isinstance(value, ArtifactVersion):
        return value
    return ArtifactVersion(value)
