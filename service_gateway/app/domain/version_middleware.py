"""
Version resolution middleware for the Gateway.
"""

from fastapi import Request
from shared.base_service import error_response
from shared.errors import UnsupportedApiVersionError
from shared.logging import get_logger, set_api_version_context
from shared.metrics import MetricsCollector
from ..versioning.models import ApiVersion
from ..versioning.resolver import VersionResolver
from ..versioning.routing import VersionedRoutes
from .request_state import RESOLVED_VERSION, bind_once

SUPPORTED_VERSIONS_HEADER = "api-supported-versions"
RESOLVED_VERSION_HEADER = "api-version"


class VersionMiddleware:
    """Resolve the API version of every request and route it accordingly."""

    def __init__(
        self,
        resolver: VersionResolver,
        routes: VersionedRoutes,
        metrics: MetricsCollector,
        *,
        report_api_versions: bool = True,
    ) -> None:
        self.resolver = resolver
        self.routes = routes
        self.metrics = metrics
        self.report_api_versions = report_api_versions
        self.logger = get_logger("gateway.versioning")
        self._known = frozenset(routes.versions)
        self._supported_header = ", ".join(str(v) for v in routes.versions)

    async def __call__(self, request: Request, call_next):
        resolved = self.resolver.resolve(
            request.url.path,
            request.headers,
            request.query_params,
        )
        bind_once(request, RESOLVED_VERSION, resolved)
        set_api_version_context(str(resolved.version))
        self.metrics.record_version_resolution(resolved.source.value)

        canonical = self.routes.canonical_path(request.url.path, resolved.version)
        if canonical is not None:
            if resolved.version not in self._known:
                self.logger.info(
                    "Unsupported API version requested",
                    version=str(resolved.version),
                    source=resolved.source.value,
                )
                error = UnsupportedApiVersionError(
                    str(resolved.version),
                    [str(v) for v in self.routes.versions],
                )
                return self._with_version_headers(error_response(error), resolved.version)
            request.scope["path"] = canonical
            request.scope["raw_path"] = canonical.encode("utf-8")

        response = await call_next(request)
        return self._with_version_headers(response, resolved.version)

    def _with_version_headers(self, response, version: ApiVersion):
        if self.report_api_versions:
            response.headers[SUPPORTED_VERSIONS_HEADER] = self._supported_header
            response.headers[RESOLVED_VERSION_HEADER] = str(version)
        return response
