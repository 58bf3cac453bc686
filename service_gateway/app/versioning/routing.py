"""
Version-aware mounting of API routers.

Business routers are written without any version in their paths and are
registered here per version. Each one is mounted under
``{api_prefix}/v{major}.{minor}`` so FastAPI's own routing selects the
handler once a request path carries the canonical version segment.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute

from .models import ApiVersion
from .resolver import api_segments, normalize_prefix, parse_version_segment


class VersionedRoutes:
    """Registry of routers keyed by the API version they serve."""

    def __init__(self, api_prefix: str = "/api") -> None:
        self.api_prefix = normalize_prefix(api_prefix)
        self._routers: Dict[ApiVersion, List[APIRouter]] = {}
        self._mounted = False

    def register(self, version: ApiVersion, router: APIRouter) -> None:
        if self._mounted:
            raise RuntimeError("Cannot register routers after they have been mounted")
        self._routers.setdefault(version, []).append(router)

    @property
    def versions(self) -> Tuple[ApiVersion, ...]:
        """Every version at least one router serves, ascending."""
        return tuple(sorted(self._routers))

    def prefix_for(self, version: ApiVersion) -> str:
        return f"{self.api_prefix}/{version.group_name}"

    def mount(self, app: FastAPI) -> None:
        """Include every registered router in the app under its version prefix."""
        for version in self.versions:
            for router in self._routers[version]:
                app.include_router(
                    router,
                    prefix=self.prefix_for(version),
                    tags=[version.group_name],
                )
        self._mounted = True

    def routes_for(self, app: FastAPI, version: ApiVersion) -> List[APIRoute]:
        """App routes mounted for one version."""
        prefix = self.prefix_for(version) + "/"
        return [
            route for route in app.routes
            if isinstance(route, APIRoute) and route.path.startswith(prefix)
        ]

    def canonical_path(self, path: str, version: ApiVersion) -> Optional[str]:
        """Rewrite an API path so its version segment reads ``v{major}.{minor}``.

        Returns None for paths outside the API prefix.
        """
        tail = api_segments(path, self.api_prefix)
        if tail is None:
            return None

        if tail and parse_version_segment(tail[0]) is not None:
            tail = tail[1:]
        rest = "/".join(tail)
        canonical = self.prefix_for(version)
        return f"{canonical}/{rest}" if rest else canonical
