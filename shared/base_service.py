"""
Base service class for Versioned Gateway services.
"""

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.routing import Match
from typing import Dict, Any
import time
import os

from shared.config import BaseConfig
from shared.logging import clear_context, configure_logging, get_logger, set_request_id
from shared.metrics import get_metrics_collector
from shared.errors import AccessLayerException

REQUEST_ID_HEADER = "X-Request-ID"
UNMATCHED_ROUTE = "unmatched"


def error_response(exc: AccessLayerException) -> JSONResponse:
    """Render an AccessLayerException as a JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
        headers=exc.response_headers() or None
    )


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, service_name: str, config: BaseConfig):
        self.service_name = service_name
        self.config = config
        self.port = config.port

        configure_logging(service_name, self.config.log_level)
        self.logger = get_logger(f"{service_name}.service")
        self.metrics = get_metrics_collector(service_name)
        self._start_time = time.time()

        self.app = self._create_app()
        # Middleware added by the subclass hook sits inside the request context middleware.
        self._setup_service()
        self._setup_middleware()
        self._setup_routes()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""
        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description=f"Versioned Gateway - {self.service_name.title()} Service",
            version="1.0.0",
            docs_url="/docs" if self.config.env == "local" else None,
            redoc_url=None,
        )

    def _setup_service(self):
        """Build service components, routes and inner middleware. Override in subclasses."""

    def _setup_middleware(self):
        """Set up middleware."""

        # Request timing and correlation middleware
        @self.app.middleware("http")
        async def add_request_context(request: Request, call_next):
            request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
            start_time = time.time()
            # Captured before inner middleware may rewrite the path.
            path = request.url.path

            try:
                response = await call_next(request)

                duration = time.time() - start_time
                self.metrics.record_http_request(
                    method=request.method,
                    endpoint=self._route_template(request.scope),
                    status_code=response.status_code,
                    duration=duration
                )
                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=path,
                    status_code=response.status_code,
                    duration_ms=round(duration * 1000, 2)
                )

                response.headers[REQUEST_ID_HEADER] = request_id
                return response
            finally:
                clear_context()

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            try:
                details = await self._health_details()
                self.metrics.record_health_check("ok")

                return {
                    "service": self.service_name,
                    "status": "ok",
                    "uptime_seconds": self._get_uptime(),
                    "version": "1.0.0",
                    "commit": os.getenv("GIT_COMMIT", "unknown"),
                    **details
                }
            except Exception as e:
                self.logger.error("Health check failed", error=str(e))
                self.metrics.record_health_check("error")
                return JSONResponse(
                    status_code=503,
                    content={
                        "service": self.service_name,
                        "status": "error",
                        "error": str(e)
                    }
                )

        @self.app.get("/metrics")
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            from prometheus_client import CONTENT_TYPE_LATEST
            return Response(
                content=self.metrics.export(),
                media_type=CONTENT_TYPE_LATEST
            )

        @self.app.exception_handler(AccessLayerException)
        async def access_layer_exception_handler(request: Request, exc: AccessLayerException):
            """Handle AccessLayerException."""
            self.logger.info(
                "Access layer error",
                code=exc.code,
                status_code=exc.status_code
            )
            self.metrics.record_error(exc.code)
            return error_response(exc)

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle general exceptions."""
            self.logger.error("Unhandled exception", error=str(exc), exc_info=True)
            self.metrics.record_error("INTERNAL_ERROR")
            return JSONResponse(
                status_code=500,
                content={
                    "code": "INTERNAL_ERROR",
                    "message": "Internal server error",
                    "details": {}
                }
            )

    async def _health_details(self) -> Dict[str, Any]:
        """Extra health payload. Override in subclasses."""
        return {}

    def _route_template(self, scope) -> str:
        """Path template of the route serving ``scope``; keeps metric labels bounded."""
        for route in self.app.router.routes:
            match, _ = route.matches(scope)
            if match == Match.FULL:
                return route.path
        return UNMATCHED_ROUTE

    def _get_uptime(self) -> float:
        """Get service uptime in seconds."""
        return time.time() - self._start_time

    def run(self):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )
