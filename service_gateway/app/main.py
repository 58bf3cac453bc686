"""
API Gateway service for the Versioned Gateway.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException

from shared.base_service import BaseService
from shared.config import GatewayConfig, get_config
from shared.errors import ConfigurationError
from .auth import SigningKey, TokenAuthenticator
from .domain import AuthMiddleware, VersionMiddleware
from .routes import identity
from .versioning import ApiVersion, VersionDocumentCatalog, VersionResolver, VersionedRoutes
from .versioning.openapi import build_version_document


class GatewayService(BaseService):
    """API Gateway service implementation."""

    def __init__(self, config: Optional[GatewayConfig] = None, **authenticator_options: Any):
        self._authenticator_options = authenticator_options
        super().__init__("gateway", config if config is not None else get_config())

    def _setup_service(self):
        config = self.config

        default_version = ApiVersion.parse(config.default_api_version)
        if default_version is None:
            raise ConfigurationError(
                f"Invalid default API version: {config.default_api_version!r}"
            )
        signing_key = SigningKey.from_secret(config.signing_key.get_secret_value())

        self.resolver = VersionResolver(
            default_version,
            api_prefix=config.api_prefix,
            header_name=config.version_header,
            query_param=config.version_query_param,
        )
        self.authenticator = TokenAuthenticator(
            signing_key,
            algorithms=config.token_algorithms,
            validate_issuer=config.validate_issuer,
            issuer=config.issuer,
            validate_audience=config.validate_audience,
            audience=config.audience,
            **self._authenticator_options,
        )

        self.versioned_routes = VersionedRoutes(config.api_prefix)
        self.versioned_routes.register(ApiVersion(1, 0), identity.router_v1)
        self.versioned_routes.register(ApiVersion(2, 0), identity.router_v2)
        self.versioned_routes.mount(self.app)

        self.catalog = VersionDocumentCatalog(
            self.versioned_routes.versions,
            title=config.api_title,
            description=config.api_description,
        )
        self.version_documents: Dict[str, Dict[str, Any]] = {
            descriptor.group_name: build_version_document(
                descriptor,
                self.versioned_routes.routes_for(self.app, descriptor.version),
            )
            for descriptor in self.catalog
        }

        # Registered inner-first: version resolution ends up running before authentication.
        self.app.middleware("http")(AuthMiddleware(self.authenticator, self.metrics))
        self.app.middleware("http")(
            VersionMiddleware(
                self.resolver,
                self.versioned_routes,
                self.metrics,
                report_api_versions=config.report_api_versions,
            )
        )

        self._setup_gateway_routes()

        self.logger.info(
            "Gateway configured",
            default_api_version=str(default_version),
            versions=[str(v) for v in self.catalog.versions],
            validate_issuer=config.validate_issuer,
            validate_audience=config.validate_audience,
        )
        if not (config.validate_issuer and config.validate_audience):
            self.logger.warning(
                "Token issuer/audience validation is disabled",
                validate_issuer=config.validate_issuer,
                validate_audience=config.validate_audience,
            )

        # Expose service instance via app state for introspection/testing
        self.app.state.gateway_service = self

    def _setup_gateway_routes(self):
        """Set up gateway-specific anonymous routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "gateway",
                "message": "Versioned Gateway - API Gateway",
                "version": "1.0.0",
            }

        @self.app.get("/versions")
        async def list_versions():
            """Descriptors for every supported API version."""
            return {
                "default": str(self.resolver.default_version),
                "versions": [descriptor.to_dict() for descriptor in self.catalog],
            }

        @self.app.get("/swagger/{group_name}/swagger.json", include_in_schema=False)
        async def version_document(group_name: str):
            """OpenAPI document for one API version."""
            document = self.version_documents.get(group_name)
            if document is None:
                raise HTTPException(status_code=404, detail="Unknown API version group")
            return document

    async def _health_details(self) -> Dict[str, Any]:
        return {
            "default_api_version": str(self.resolver.default_version),
            "api_versions": [str(v) for v in self.catalog.versions],
        }


def create_app(config: Optional[GatewayConfig] = None, **authenticator_options: Any):
    """Create FastAPI application."""
    service = GatewayService(config, **authenticator_options)
    return service.app


if __name__ == "__main__":
    service = GatewayService()
    service.run()
