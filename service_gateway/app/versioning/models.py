"""
Value types for API version resolution.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Optional

# Components are bounded so int() never sees an oversized digit string.
_VERSION_TEXT = re.compile(r"([0-9]{1,9})(?:\.([0-9]{1,9}))?")


@total_ordering
@dataclass(frozen=True)
class ApiVersion:
    """An API version, ordered by (major, minor)."""

    major: int
    minor: int = 0

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0:
            raise ValueError("API version components must be non-negative")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ApiVersion):
            return NotImplemented
        return (self.major, self.minor) < (other.major, other.minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

    @property
    def group_name(self) -> str:
        """Documentation group identifier, e.g. ``v1.0``."""
        return f"v{self}"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["ApiVersion"]:
        """Parse ``"{major}"`` or ``"{major}.{minor}"``; return None when malformed."""
        if text is None:
            return None
        match = _VERSION_TEXT.fullmatch(text.strip())
        if match is None:
            return None
        major, minor = match.groups()
        return cls(int(major), int(minor or 0))


class VersionSource(str, Enum):
    """Where the effective API version came from."""

    PATH_SEGMENT = "path_segment"
    HEADER = "header"
    QUERY_PARAM = "query_param"
    DEFAULT = "default"


@dataclass(frozen=True)
class VersionSignal:
    """One raw version indicator carried by a request."""

    source: VersionSource
    raw_text: str


@dataclass(frozen=True)
class ResolvedVersion:
    """The effective API version of a request and its provenance."""

    version: ApiVersion
    source: VersionSource

    @property
    def is_default(self) -> bool:
        return self.source is VersionSource.DEFAULT
