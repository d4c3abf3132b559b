# SPDX-License-Identifier: MIT
"""Errors raised while resolving catalog: and workspace: references.

All of these are fatal for the build target being produced. Failing to
*read* the workspace catalog is not an error; the resolver falls back to an
empty catalog and only fails once a reference actually needs it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from jsdist_manifest import CATALOG_PREFIX, WORKSPACE_PREFIX


@dataclass(frozen=True, slots=True)
class DependencyReference:
    """A dependency whose version uses a catalog: or workspace: reference.

    Attributes:
        field: Manifest field holding the dependency (e.g., "devDependencies")
        name: Dependency name
        version: Version string as written in the manifest
    """

    field: str
    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.field}.{self.name}: {self.version}"


def _format_references(references: Sequence[DependencyReference]) -> str:
    return "\n".join(f"  - {ref}" for ref in references)


class CatalogError(Exception):
    """Base exception for dependency reference resolution failures."""

    pass


class MissingCatalogError(CatalogError):
    """Raised when catalog: references exist but the workspace catalog is empty."""

    def __init__(self, references: Sequence[DependencyReference]):
        self.references = list(references)
        super().__init__(
            f"Package contains {CATALOG_PREFIX} dependencies but catalog configuration is missing:\n"
            f"{_format_references(self.references)}"
        )


class UnresolvedReferencesError(CatalogError):
    """Raised when references remain after resolution.

    Attributes:
        prefixes: Reference prefixes still present ("catalog:", "workspace:")
        references: Every dependency still carrying a reference
    """

    def __init__(self, references: Sequence[DependencyReference]):
        self.references = list(references)
        self.prefixes = [
            prefix
            for prefix in (CATALOG_PREFIX, WORKSPACE_PREFIX)
            if any(ref.version.startswith(prefix) for ref in self.references)
        ]
        super().__init__(
            f"Transformation failed: unresolved {' and '.join(self.prefixes)} references "
            f"remain in package.json:\n{_format_references(self.references)}"
        )


class CatalogResolutionError(CatalogError):
    """Raised when the manifest exporter fails on a catalog reference."""

    pass


class WorkspaceResolutionError(CatalogError):
    """Raised when the manifest exporter fails on a workspace reference."""

    pass


class ManifestProcessingError(CatalogError):
    """Raised when the manifest exporter cannot process the manifest."""

    pass


class TransformationError(CatalogError):
    """Raised for any other manifest exporter failure."""

    pass


def classify_export_error(message: str) -> CatalogError:
    """Classify a manifest exporter failure by its message text.

    The message is checked for "catalog", "workspace" and "manifest", in that
    order; anything else becomes a generic TransformationError.

    Example:
        >>> type(classify_export_error('No catalog entry "react" was found')).__name__
        'CatalogResolutionError'
    """
    if "catalog" in message:
        return CatalogResolutionError(f"Catalog resolution failed: {message}")
    if "workspace" in message:
        return WorkspaceResolutionError(f"Workspace resolution failed: {message}")
    if "manifest" in message:
        return ManifestProcessingError(f"Manifest processing failed: {message}")
    return TransformationError(f"pnpm transformation failed: {message}")
