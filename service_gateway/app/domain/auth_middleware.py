"""
Authentication middleware for Gateway.

Every request is authenticated up front and the outcome is stored on
``request.state``. Rejection happens at the route boundary through the
``require_principal`` / ``require_role`` dependencies, so anonymous endpoints
(health, metrics, documentation) stay reachable.
"""

from fastapi import Depends, Request

from shared.errors import AuthenticationError, AuthorizationError
from shared.logging import get_logger, set_user_context
from shared.metrics import MetricsCollector
from ..auth.token_authenticator import AuthenticationFailure, Principal, TokenAuthenticator
from .request_state import AUTHENTICATION, PRINCIPAL, bind_once, get_authentication

logger = get_logger("gateway.auth_middleware")


class AuthMiddleware:
    """Annotate each request with its bearer token authentication outcome."""

    def __init__(self, authenticator: TokenAuthenticator, metrics: MetricsCollector):
        self.authenticator = authenticator
        self.metrics = metrics
        self.logger = logger

    async def __call__(self, request: Request, call_next):
        result = self.authenticator.authenticate(request.headers.get("Authorization"))
        bind_once(request, AUTHENTICATION, result)
        self.metrics.record_token_validation(result.outcome)

        if result.authenticated:
            bind_once(request, PRINCIPAL, result.principal)
            set_user_context(result.principal.subject)
            self.logger.debug(
                "Request authenticated",
                user_id=result.principal.subject,
                role=result.principal.role
            )
        elif result.failure is not AuthenticationFailure.MISSING_CREDENTIAL:
            self.logger.warning(
                "Bearer token rejected",
                reason=result.failure.value,
                detail=result.detail,
                path=request.url.path
            )

        return await call_next(request)


async def require_principal(request: Request) -> Principal:
    """FastAPI dependency returning the authenticated principal or rejecting with 401."""
    result = get_authentication(request)
    if result is None or not result.authenticated:
        raise AuthenticationError()
    return result.principal


def require_role(*roles: str):
    """FastAPI dependency factory admitting principals whose role is one of ``roles``."""
    allowed = frozenset(roles)

    async def _require_role(principal: Principal = Depends(require_principal)) -> Principal:
        if principal.role not in allowed:
            logger.info(
                "Role not permitted",
                user_id=principal.subject,
                role=principal.role,
                allowed=sorted(allowed)
            )
            raise AuthorizationError(
                "Insufficient role for this operation",
                details={"required_roles": sorted(allowed)}
            )
        return principal

    return _require_role
