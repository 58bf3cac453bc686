"""
Static documentation descriptors, one per API version served by the gateway.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Tuple

from .models import ApiVersion


@dataclass(frozen=True)
class VersionDescriptor:
    """Documentation metadata for one API version."""

    version: ApiVersion
    title: str
    description: str

    @property
    def group_name(self) -> str:
        return self.version.group_name

    @property
    def document_url(self) -> str:
        return f"/swagger/{self.group_name}/swagger.json"

    def to_dict(self) -> Dict[str, str]:
        return {
            "version": str(self.version),
            "group_name": self.group_name,
            "title": self.title,
            "description": self.description,
            "document_url": self.document_url,
        }


class VersionDocumentCatalog:
    """Descriptors for every known API version, built once and never mutated."""

    def __init__(self, versions: Iterable[ApiVersion], title: str, description: str) -> None:
        self._descriptors: Tuple[VersionDescriptor, ...] = tuple(
            VersionDescriptor(
                version=version,
                title=f"{title} {version.group_name.upper()}",
                description=description,
            )
            for version in sorted(set(versions))
        )

    def __iter__(self) -> Iterator[VersionDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    @property
    def versions(self) -> Tuple[ApiVersion, ...]:
        return tuple(descriptor.version for descriptor in self._descriptors)

    def get(self, group_name: str):
        """Return the descriptor for a group name such as ``v1.0``, or None."""
        for descriptor in self._descriptors:
            if descriptor.group_name == group_name:
                return descriptor
        return None

    def as_mapping(self) -> Dict[str, VersionDescriptor]:
        """Group name to descriptor, in ascending version order."""
        return {descriptor.group_name: descriptor for descriptor in self._descriptors}
