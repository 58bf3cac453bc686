"""
Per-version OpenAPI documents.
"""

from typing import Any, Dict, List

from fastapi.openapi.utils import get_openapi
from fastapi.routing import APIRoute

from .catalog import VersionDescriptor

BEARER_SCHEME = "Bearer"


def build_version_document(descriptor: VersionDescriptor, routes: List[APIRoute]) -> Dict[str, Any]:
    """Build the OpenAPI document for one version from the routes mounted for it."""
    document = get_openapi(
        title=descriptor.title,
        version=str(descriptor.version),
        description=descriptor.description,
        routes=routes,
    )
    components = document.setdefault("components", {})
    components.setdefault("securitySchemes", {})[BEARER_SCHEME] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
        "description": "Enter: Bearer {token}",
    }
    document["security"] = [{BEARER_SCHEME: []}]
    return document
