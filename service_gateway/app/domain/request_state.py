"""
Write-once request annotations shared by the gateway middleware.
"""

from typing import Any, Optional

from fastapi import Request

from ..auth.token_authenticator import AuthenticationResult, Principal
from ..versioning.models import ResolvedVersion

RESOLVED_VERSION = "resolved_version"
AUTHENTICATION = "authentication"
PRINCIPAL = "principal"


def bind_once(request: Request, name: str, value: Any) -> None:
    """Attach ``value`` to ``request.state``; a second write is a programming error."""
    if getattr(request.state, name, None) is not None:
        raise RuntimeError(f"request.state.{name} is already set")
    setattr(request.state, name, value)


def get_resolved_version(request: Request) -> Optional[ResolvedVersion]:
    return getattr(request.state, RESOLVED_VERSION, None)


def get_authentication(request: Request) -> Optional[AuthenticationResult]:
    return getattr(request.state, AUTHENTICATION, None)


def get_principal(request: Request) -> Optional[Principal]:
    return getattr(request.state, PRINCIPAL, None)
