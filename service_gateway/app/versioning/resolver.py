"""
API version resolution from request signals.

A request may name its version in three places. They are tried in a fixed
order and the first one that parses wins:

1. a ``v{major}`` / ``v{major}.{minor}`` segment directly after the API prefix,
2. the version header (``x-api-version`` by default),
3. the version query parameter (``api-version`` by default).

Malformed values count as absent. When nothing parses the configured default
applies, so resolution never fails.
"""

from __future__ import annotations

import re
from typing import Callable, List, Mapping, Optional, Tuple

from .models import ApiVersion, ResolvedVersion, VersionSignal, VersionSource

Extractor = Callable[[str, Mapping[str, str], Mapping[str, str]], Optional[VersionSignal]]

_PATH_TOKEN = re.compile(r"[vV][0-9]+(?:\.[0-9]+)?")


def parse_version_segment(segment: str) -> Optional[ApiVersion]:
    """Parse a single path segment such as ``v2`` or ``v1.1``."""
    if _PATH_TOKEN.fullmatch(segment) is None:
        return None
    return ApiVersion.parse(segment[1:])


def normalize_prefix(api_prefix: str) -> str:
    """``"api/"`` -> ``"/api"``; an empty prefix stays empty."""
    stripped = api_prefix.strip("/")
    return f"/{stripped}" if stripped else ""


def api_segments(path: str, api_prefix: str) -> Optional[List[str]]:
    """Path segments after a normalized API prefix, or None outside the prefix."""
    if api_prefix and not (path == api_prefix or path.startswith(api_prefix + "/")):
        return None
    return path[len(api_prefix):].split("/")[1:]


def version_segment(path: str, api_prefix: str = "") -> Optional[str]:
    """Return the segment in the version position when it looks like a version token.

    Only the first segment after the API prefix is a version position; later
    segments belong to the resource, so ``/api/files/v2`` carries no version.
    """
    segments = api_segments(path, api_prefix)
    if not segments or _PATH_TOKEN.fullmatch(segments[0]) is None:
        return None
    return segments[0]


def _lookup(mapping: Mapping[str, str], key: str) -> Optional[str]:
    """Case-insensitive key lookup."""
    value = mapping.get(key)
    if value is not None:
        return value
    lowered = key.lower()
    for name, candidate in mapping.items():
        if name.lower() == lowered:
            return candidate
    return None


class VersionResolver:
    """Resolve the effective API version of a request."""

    def __init__(
        self,
        default_version: ApiVersion,
        *,
        api_prefix: str = "",
        header_name: str = "x-api-version",
        query_param: str = "api-version",
    ) -> None:
        self.default_version = default_version
        self.api_prefix = normalize_prefix(api_prefix)
        self.header_name = header_name
        self.query_param = query_param
        self._extractors: Tuple[Extractor, ...] = (
            self._from_path,
            self._from_header,
            self._from_query,
        )

    def resolve(
        self,
        path: str,
        headers: Mapping[str, str],
        query_params: Mapping[str, str],
    ) -> ResolvedVersion:
        """Return exactly one resolved version for the given request parts."""
        for extract in self._extractors:
            signal = extract(path, headers, query_params)
            if signal is None:
                continue
            version = self._parse_signal(signal)
            if version is not None:
                return ResolvedVersion(version=version, source=signal.source)
        return ResolvedVersion(version=self.default_version, source=VersionSource.DEFAULT)

    @staticmethod
    def _parse_signal(signal: VersionSignal) -> Optional[ApiVersion]:
        if signal.source is VersionSource.PATH_SEGMENT:
            return ApiVersion.parse(signal.raw_text[1:])
        return ApiVersion.parse(signal.raw_text)

    def _from_path(self, path, headers, query_params) -> Optional[VersionSignal]:
        segment = version_segment(path, self.api_prefix)
        if segment is None:
            return None
        return VersionSignal(VersionSource.PATH_SEGMENT, segment)

    def _from_header(self, path, headers, query_params) -> Optional[VersionSignal]:
        value = _lookup(headers, self.header_name)
        if value is None:
            return None
        return VersionSignal(VersionSource.HEADER, value)

    def _from_query(self, path, headers, query_params) -> Optional[VersionSignal]:
        value = _lookup(query_params, self.query_param)
        if value is None:
            return None
        return VersionSignal(VersionSource.QUERY_PARAM, value)
