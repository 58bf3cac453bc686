"""
Request-path middleware and dependencies for the Gateway Service.

Version resolution runs first, bearer authentication second; both write their
result to ``request.state`` exactly once.
"""

from .auth_middleware import AuthMiddleware, require_principal, require_role
from .request_state import get_authentication, get_principal, get_resolved_version
from .version_middleware import VersionMiddleware

__all__ = [
    "AuthMiddleware",
    "VersionMiddleware",
    "get_authentication",
    "get_principal",
    "get_resolved_version",
    "require_principal",
    "require_role",
]
