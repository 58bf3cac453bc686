"""
API versioning for the Gateway.

- models: ApiVersion, VersionSource, VersionSignal, ResolvedVersion.
- resolver: precedence-ordered extraction of the requested version.
- routing: per-version router registry and path canonicalisation.
- catalog: one documentation descriptor per known version.
- openapi: per-version OpenAPI documents built from the catalog.
"""

from .catalog import VersionDescriptor, VersionDocumentCatalog
from .models import ApiVersion, ResolvedVersion, VersionSignal, VersionSource
from .resolver import VersionResolver
from .routing import VersionedRoutes

__all__ = [
    "ApiVersion",
    "ResolvedVersion",
    "VersionDescriptor",
    "VersionDocumentCatalog",
    "VersionResolver",
    "VersionSignal",
    "VersionSource",
    "VersionedRoutes",
]
