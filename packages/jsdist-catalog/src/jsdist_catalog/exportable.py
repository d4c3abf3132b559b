# SPDX-License-Identifier: MIT
"""Exportable manifest creation (pnpm publish semantics).

Produces the manifest pnpm would publish: catalog: references are replaced by
catalog versions, workspace: references by the linked package's version, and
whitelisted ``publishConfig`` fields override their top-level counterparts.

Example:
    Original dependencies:
        {"react": "catalog:", "@acme/utils": "workspace:^"}

    Exported (react pinned in the catalog, @acme/utils linked at 2.1.0):
        {"react": "^18.2.0", "@acme/utils": "^2.1.0"}
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Mapping, Optional

from jsdist_manifest import CATALOG_PREFIX, DEPENDENCY_FIELDS, WORKSPACE_PREFIX

DEFAULT_CATALOG_NAME = "default"

# publishConfig fields that replace the top-level field when publishing
PUBLISH_CONFIG_OVERRIDES = (
    "bin",
    "main",
    "exports",
    "types",
    "typings",
    "module",
    "browser",
    "esnext",
    "es2015",
    "unpkg",
    "umd:main",
    "typesVersions",
    "cpu",
    "os",
)

# workspace: specifiers resolved from the linked package version
_VERSION_SPECIFIERS = {"*": "", "": "", "^": "^", "~": "~"}


class ExportableManifestError(Exception):
    """Raised when a manifest cannot be converted for publishing."""

    pass


def _read_package_version(manifest_path: Path, dependency: str) -> str:
    """Read the version of a linked workspace package."""
    if not manifest_path.is_file():
        raise ExportableManifestError(
            f'Cannot resolve workspace protocol of dependency "{dependency}" because this '
            f'dependency is not installed. Try running "pnpm install".'
        )
    try:
        linked = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ExportableManifestError(
            f'Cannot read manifest of workspace dependency "{dependency}" at {manifest_path}: {e}'
        ) from e

    version = linked.get("version") if isinstance(linked, dict) else None
    if not isinstance(version, str) or not version:
        raise ExportableManifestError(
            f'Cannot resolve workspace protocol of dependency "{dependency}": '
            f"linked manifest {manifest_path} has no version"
        )
    return version


def resolve_catalog_reference(
    dependency: str,
    specifier: str,
    catalogs: Mapping[str, Mapping[str, str]],
) -> str:
    """Resolve ``catalog:`` or ``catalog:<name>`` to a catalog version."""
    catalog_name = specifier[len(CATALOG_PREFIX) :].strip() or DEFAULT_CATALOG_NAME
    catalog = catalogs.get(catalog_name)
    if catalog is None:
        raise ExportableManifestError(
            f'Dependency "{dependency}" refers to catalog "{catalog_name}", which is not defined'
        )
    version = catalog.get(dependency)
    if not version:
        raise ExportableManifestError(
            f'No catalog entry "{dependency}" was found for catalog "{catalog_name}"'
        )
    return version


def resolve_workspace_reference(directory: Path, dependency: str, specifier: str) -> str:
    """Resolve a ``workspace:`` specifier to a publishable version range.

    - ``workspace:*`` becomes the linked version
    - ``workspace:^`` and ``workspace:~`` prefix the linked version
    - ``workspace:<path>`` reads the version of the package at that path
    - any other ``workspace:<range>`` becomes ``<range>``
    """
    target = specifier[len(WORKSPACE_PREFIX) :]

    if target in _VERSION_SPECIFIERS:
        manifest_path = directory / "node_modules" / dependency / "package.json"
        return f"{_VERSION_SPECIFIERS[target]}{_read_package_version(manifest_path, dependency)}"

    if target.startswith(("./", "../")):
        return _read_package_version(directory / target / "package.json", dependency)

    return target


def create_exportable_manifest(
    directory: str | Path,
    manifest: Mapping[str, Any],
    catalogs: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> dict[str, Any]:
    """Create the publishable form of a manifest.

    Args:
        directory: Directory containing the package (its node_modules holds
            linked workspace packages)
        manifest: Source package.json, not modified
        catalogs: Catalog name to dependency versions, "default" for ``catalog:``

    Returns:
        A new manifest with references substituted

    Raises:
        ExportableManifestError: If a reference cannot be resolved
    """
    package_dir = Path(directory)
    catalogs = catalogs or {}
    result = copy.deepcopy(dict(manifest))

    publish_config = result.get("publishConfig")
    if isinstance(publish_config, dict):
        for field_name in PUBLISH_CONFIG_OVERRIDES:
            if field_name in publish_config:
                result[field_name] = copy.deepcopy(publish_config[field_name])

    for field_name in DEPENDENCY_FIELDS:
        dependencies = result.get(field_name)
        if not isinstance(dependencies, dict):
            continue

        resolved: dict[str, Any] = {}
        for dependency, specifier in dependencies.items():
            if isinstance(specifier, str) and specifier.startswith(CATALOG_PREFIX):
                resolved[dependency] = resolve_catalog_reference(dependency, specifier, catalogs)
            elif isinstance(specifier, str) and specifier.startswith(WORKSPACE_PREFIX):
                resolved[dependency] = resolve_workspace_reference(package_dir, dependency, specifier)
            else:
                resolved[dependency] = specifier
        result[field_name] = resolved

    return result
