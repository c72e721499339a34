"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

type ContentHash = str

_VERSION_PATTERN: Final = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


@dataclass(frozen=True, order=True, slots=True)
class Version:
    """Semantic version without pre-release or build metadata.

    Field order gives the lexicographic ``(major, minor, patch)`` total order.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError(f"Version components must be non-negative: {self!r}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, value: str) -> Version:
        match = _VERSION_PATTERN.match(value.strip())
        if match is None:
            raise ValueError(f"Invalid version: {value!r}")
        major, minor, patch = (int(part) for part in match.groups())
        return cls(major, minor, patch)


def compare_versions(left: Version, right: Version) -> int:
    """Return -1, 0 or 1 as ``left`` sorts before, equal to or after ``right``."""

    if left < right:
        return -1
    if left > right:
        return 1
    return 0
