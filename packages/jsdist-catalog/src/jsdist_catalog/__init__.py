# SPDX-License-Identifier: MIT
"""Workspace catalog and workspace: reference resolution for package.json.

This package provides utilities for publishing packages from a pnpm workspace:
- Workspace root discovery
- Cached loading of the pnpm-workspace.yaml catalog
- Substitution of catalog: and workspace: dependency references
- A categorized error taxonomy for resolution failures

Example:
    >>> from jsdist_catalog import WorkspaceCatalog
    >>>
    >>> catalog = WorkspaceCatalog(start_dir="packages/my-lib")
    >>> catalog.get_catalog()
    {'react': '^18.2.0'}
    >>> resolved = catalog.resolve_package_json(package_json, "packages/my-lib")
"""

__version__ = "0.1.0"

from .catalog import (
    CatalogCache,
    CatalogCacheEntry,
    WorkspaceCatalog,
    collect_references,
    collect_unresolved_references,
    load_catalog_file,
)
from .errors import (
    CatalogError,
    CatalogResolutionError,
    DependencyReference,
    ManifestProcessingError,
    MissingCatalogError,
    TransformationError,
    UnresolvedReferencesError,
    WorkspaceResolutionError,
    classify_export_error,
)
from .exportable import (
    DEFAULT_CATALOG_NAME,
    PUBLISH_CONFIG_OVERRIDES,
    ExportableManifestError,
    create_exportable_manifest,
    resolve_catalog_reference,
    resolve_workspace_reference,
)
from .workspace import WORKSPACE_FILE, find_workspace_root

__all__ = [
    # Catalog
    "WorkspaceCatalog",
    "CatalogCache",
    "CatalogCacheEntry",
    "collect_references",
    "collect_unresolved_references",
    "load_catalog_file",
    # Errors
    "CatalogError",
    "MissingCatalogError",
    "CatalogResolutionError",
    "WorkspaceResolutionError",
    "ManifestProcessingError",
    "TransformationError",
    "UnresolvedReferencesError",
    "DependencyReference",
    "classify_export_error",
    # Exportable manifest
    "DEFAULT_CATALOG_NAME",
    "PUBLISH_CONFIG_OVERRIDES",
    "ExportableManifestError",
    "create_exportable_manifest",
    "resolve_catalog_reference",
    "resolve_workspace_reference",
    # Workspace
    "WORKSPACE_FILE",
    "find_workspace_root",
]
