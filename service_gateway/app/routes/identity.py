"""
Identity endpoints exposing the caller's principal, one router per API version.
"""

from fastapi import APIRouter, Depends, Request

from ..auth.token_authenticator import Principal
from ..domain.auth_middleware import require_principal, require_role
from ..domain.request_state import get_resolved_version

router_v1 = APIRouter()
router_v2 = APIRouter()


@router_v1.get("/me")
async def whoami_v1(request: Request, principal: Principal = Depends(require_principal)):
    """Return the authenticated subject and role."""
    return {
        "subject": principal.subject,
        "role": principal.role,
        "api_version": str(get_resolved_version(request).version),
    }


@router_v2.get("/me")
async def whoami_v2(request: Request, principal: Principal = Depends(require_principal)):
    """Return the authenticated principal with its claims and version provenance."""
    resolved = get_resolved_version(request)
    return {
        "subject": principal.subject,
        "role": principal.role,
        "claims": dict(principal.claims),
        "expires_at": principal.expires_at.isoformat(),
        "api_version": {
            "version": str(resolved.version),
            "source": resolved.source.value,
        },
    }


@router_v1.get("/admin/ping")
@router_v2.get("/admin/ping")
async def admin_ping(principal: Principal = Depends(require_role("Admin"))):
    """Reachable only by principals holding the Admin role."""
    return {"status": "ok", "subject": principal.subject}
