# SPDX-License-Identifier: MIT
"""Workspace catalog loading and dependency reference resolution.

The workspace catalog lives in ``pnpm-workspace.yaml`` at the workspace root:

    packages:
      - "packages/*"
    catalog:
      react: ^18.2.0
      typescript: ^5.4.0

A package refers to it with ``"react": "catalog:"``. Before publishing, every
catalog: and workspace: reference must be replaced by a real version range.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import structlog
import yaml

from jsdist_manifest import CATALOG_PREFIX, DEPENDENCY_FIELDS, REFERENCE_PREFIXES, WORKSPACE_PREFIX

from .errors import (
    DependencyReference,
    MissingCatalogError,
    UnresolvedReferencesError,
    classify_export_error,
)
from .exportable import DEFAULT_CATALOG_NAME, create_exportable_manifest
from .workspace import WORKSPACE_FILE, find_workspace_root

logger = structlog.get_logger(__name__)

WorkspaceLocator = Callable[[Path], Optional[Path]]
ManifestExporter = Callable[[Path, Mapping[str, Any], Mapping[str, Mapping[str, str]]], dict]


@dataclass
class CatalogCacheEntry:
    """Cached catalog versions and the modification time they were read at."""

    versions: dict[str, str]
    source_mtime: int


class CatalogCache:
    """Catalog versions keyed by catalog file, valid while the file is unchanged."""

    def __init__(self) -> None:
        self._entries: dict[Path, CatalogCacheEntry] = {}

    def get_or_refresh(
        self,
        key: Path,
        current_mtime: int,
        loader: Callable[[], dict[str, str]],
    ) -> dict[str, str]:
        """Return cached versions, reloading when the modification time differs."""
        entry = self._entries.get(key)
        if entry is not None and entry.source_mtime == current_mtime:
            return entry.versions

        versions = loader()
        self._entries[key] = CatalogCacheEntry(versions=versions, source_mtime=current_mtime)
        return versions

    def get(self, key: Path) -> Optional[CatalogCacheEntry]:
        return self._entries.get(key)

    def invalidate(self) -> None:
        self._entries.clear()


def collect_references(manifest: Mapping[str, Any], prefix: str) -> list[DependencyReference]:
    """Collect dependencies whose version starts with a reference prefix."""
    references: list[DependencyReference] = []
    for field_name in DEPENDENCY_FIELDS:
        dependencies = manifest.get(field_name)
        if not isinstance(dependencies, dict):
            continue
        for name, version in dependencies.items():
            if isinstance(version, str) and version.startswith(prefix):
                references.append(DependencyReference(field_name, name, version))
    return references


def collect_unresolved_references(manifest: Mapping[str, Any]) -> list[DependencyReference]:
    """Collect every dependency still carrying a catalog: or workspace: reference."""
    return [ref for prefix in REFERENCE_PREFIXES for ref in collect_references(manifest, prefix)]


def load_catalog_file(path: Path) -> dict[str, str]:
    """Parse the default catalog out of a workspace file.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
    """
    with open(path, encoding="utf-8") as f:
        workspace = yaml.safe_load(f)

    if not isinstance(workspace, dict):
        return {}
    catalog = workspace.get("catalog")
    if not isinstance(catalog, dict):
        return {}
    return {str(name): str(version) for name, version in catalog.items() if version is not None}


class WorkspaceCatalog:
    """Resolves catalog: and workspace: references with a cached catalog.

    Each instance owns its own cache. Share an instance explicitly to share
    the cache between builds.

    Args:
        start_dir: Directory the workspace root is searched from (defaults to cwd)
        locator: Workspace root locator
        exporter: Manifest exporter substituting references
    """

    def __init__(
        self,
        start_dir: Optional[str | Path] = None,
        locator: WorkspaceLocator = find_workspace_root,
        exporter: ManifestExporter = create_exportable_manifest,
    ) -> None:
        self.start_dir = Path(start_dir) if start_dir else None
        self._locator = locator
        self._exporter = exporter
        self._cache = CatalogCache()
        self._workspace_root: Optional[Path] = None

    @property
    def workspace_root(self) -> Optional[Path]:
        """Workspace root found by the last catalog read, if any."""
        return self._workspace_root

    def clear_cache(self) -> None:
        """Forget the workspace root and all cached catalog data."""
        self._workspace_root = None
        self._cache.invalidate()

    def get_catalog(self) -> dict[str, str]:
        """Return the workspace catalog, or an empty catalog if it is unavailable.

        The catalog is re-read only when the modification time of the workspace
        file changes. Failures are logged and never raised.
        """
        log = logger.bind(category="catalog")

        if self._workspace_root is None:
            self._workspace_root = self._locator(self.start_dir or Path.cwd())
            if self._workspace_root is None:
                log.error("Failed to read pnpm catalog: could not find workspace root")
                log.error("  -> Ensure you're in a pnpm workspace")
                return {}

        workspace_file = self._workspace_root / WORKSPACE_FILE
        try:
            current_mtime = workspace_file.stat().st_mtime_ns
            return self._cache.get_or_refresh(
                workspace_file,
                current_mtime,
                lambda: load_catalog_file(workspace_file),
            )
        except FileNotFoundError:
            log.error("Failed to read pnpm catalog: workspace configuration not found", path=str(workspace_file))
            log.error("  -> Ensure you're in a pnpm workspace with proper configuration")
        except yaml.YAMLError as e:
            log.error("Failed to read pnpm catalog: Invalid YAML syntax in workspace configuration", error=str(e))
            log.error("  -> Check workspace configuration file syntax")
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"Failed to read pnpm catalog from {WORKSPACE_FILE}: {e}")
        return {}

    def resolve_package_json(
        self,
        manifest: Mapping[str, Any],
        directory: Optional[str | Path] = None,
    ) -> dict[str, Any]:
        """Resolve catalog: and workspace: references in a manifest.

        Args:
            manifest: Source package.json, not modified
            directory: Directory containing the package (defaults to cwd)

        Returns:
            A new manifest without catalog: or workspace: references

        Raises:
            MissingCatalogError: If catalog: references exist but the catalog is empty
            CatalogResolutionError: If the exporter fails on a catalog reference
            WorkspaceResolutionError: If the exporter fails on a workspace reference
            ManifestProcessingError: If the exporter fails to process the manifest
            TransformationError: If the exporter fails for any other reason
            UnresolvedReferencesError: If references remain after resolution
        """
        log = logger.bind(category="pnpm")
        package_dir = Path(directory) if directory else Path.cwd()
        catalog = self.get_catalog()

        catalog_refs = collect_references(manifest, CATALOG_PREFIX)
        workspace_refs = collect_references(manifest, WORKSPACE_PREFIX)

        if catalog_refs and not catalog:
            error = MissingCatalogError(catalog_refs)
            log.error(f"Package contains {CATALOG_PREFIX} dependencies but catalog configuration is missing")
            log.error("  -> Catalog dependencies found:")
            for ref in catalog_refs:
                log.error(f"    - {ref}")
            raise error

        if catalog_refs:
            log.info(f"Resolving {len(catalog_refs)} {CATALOG_PREFIX} dependencies")
        if workspace_refs:
            log.info(f"Resolving {len(workspace_refs)} {WORKSPACE_PREFIX} dependencies")

        try:
            result = self._exporter(package_dir, manifest, {DEFAULT_CATALOG_NAME: catalog})
        except Exception as e:
            error = classify_export_error(str(e))
            log.error(f"Failed to apply pnpm transformations for directory {package_dir}: {e}")
            log.error(f"  -> {error}")
            raise error from e

        if catalog_refs or workspace_refs:
            self._log_resolved(result, catalog_refs + workspace_refs, log)

        unresolved = collect_unresolved_references(result)
        if unresolved:
            error = UnresolvedReferencesError(unresolved)
            log.error(
                f"Transformation failed: unresolved {' and '.join(error.prefixes)} "
                "references remain in package.json"
            )
            log.error("  -> This would result in invalid package.json being published")
            log.error("  -> Unresolved dependencies:")
            for ref in unresolved:
                log.error(f"    - {ref}")
            raise error

        return result

    @staticmethod
    def _log_resolved(
        result: Mapping[str, Any],
        references: list[DependencyReference],
        log: Any,
    ) -> None:
        """Log resolved versions grouped by dependency field."""
        resolved: dict[str, list[tuple[str, str]]] = {}
        for ref in references:
            dependencies = result.get(ref.field)
            if isinstance(dependencies, dict) and dependencies.get(ref.name):
                resolved.setdefault(ref.field, []).append((ref.name, dependencies[ref.name]))

        if not resolved:
            return
        log.info("Resolved dependencies:")
        for field_name, entries in resolved.items():
            log.info(f"- {field_name}:")
            for name, version in entries:
                log.info(f"    {name}: {version}")
