# SPDX-License-Identifier: MIT
"""Tests for exportable manifest creation."""

import json
from pathlib import Path

import pytest

from jsdist_catalog.exportable import (
    ExportableManifestError,
    create_exportable_manifest,
    resolve_catalog_reference,
    resolve_workspace_reference,
)

CATALOGS = {"default": {"react": "^18.2.0"}, "legacy": {"react": "^16.14.0"}}


class TestResolveCatalogReference:
    """Tests for catalog: substitution."""

    def test_default_catalog(self):
        assert resolve_catalog_reference("react", "catalog:", CATALOGS) == "^18.2.0"
        assert resolve_catalog_reference("react", "catalog:default", CATALOGS) == "^18.2.0"

    def test_named_catalog(self):
        assert resolve_catalog_reference("react", "catalog:legacy", CATALOGS) == "^16.14.0"

    def test_missing_entry_names_catalog(self):
        with pytest.raises(ExportableManifestError, match="catalog"):
            resolve_catalog_reference("vue", "catalog:", CATALOGS)

    def test_undefined_catalog(self):
        with pytest.raises(ExportableManifestError, match='catalog "next"'):
            resolve_catalog_reference("react", "catalog:next", CATALOGS)


class TestResolveWorkspaceReference:
    """Tests for workspace: substitution."""

    @pytest.mark.parametrize(
        ("specifier", "expected"),
        [
            ("workspace:*", "2.1.0"),
            ("workspace:", "2.1.0"),
            ("workspace:^", "^2.1.0"),
            ("workspace:~", "~2.1.0"),
            ("workspace:^1.0.0", "^1.0.0"),
        ],
    )
    def test_specifiers(self, package_dir: Path, specifier: str, expected: str):
        assert resolve_workspace_reference(package_dir, "@acme/utils", specifier) == expected

    def test_relative_path(self, workspace: Path, package_dir: Path):
        sibling = workspace / "packages" / "core"
        sibling.mkdir()
        (sibling / "package.json").write_text(json.dumps({"name": "core", "version": "0.3.0"}))
        assert resolve_workspace_reference(package_dir, "core", "workspace:../core") == "0.3.0"

    def test_not_installed(self, package_dir: Path):
        with pytest.raises(ExportableManifestError, match="workspace"):
            resolve_workspace_reference(package_dir, "@acme/missing", "workspace:*")

    def test_linked_manifest_without_version(self, package_dir: Path):
        linked = package_dir / "node_modules" / "noversion"
        linked.mkdir(parents=True)
        (linked / "package.json").write_text("{}")
        with pytest.raises(ExportableManifestError, match="has no version"):
            resolve_workspace_reference(package_dir, "noversion", "workspace:^")


class TestCreateExportableManifest:
    """Tests for create_exportable_manifest."""

    def test_substitutes_all_dependency_fields(self, package_dir: Path):
        manifest = {
            "name": "lib",
            "dependencies": {"react": "catalog:", "lodash": "^4.17.21"},
            "devDependencies": {"@acme/utils": "workspace:^"},
            "peerDependencies": {"react": "catalog:legacy"},
        }
        result = create_exportable_manifest(package_dir, manifest, CATALOGS)
        assert result["dependencies"] == {"react": "^18.2.0", "lodash": "^4.17.21"}
        assert result["devDependencies"] == {"@acme/utils": "^2.1.0"}
        assert result["peerDependencies"] == {"react": "^16.14.0"}

    def test_does_not_mutate_input(self, package_dir: Path):
        manifest = {"dependencies": {"react": "catalog:"}, "publishConfig": {"bin": "./cli.js"}}
        create_exportable_manifest(package_dir, manifest, CATALOGS)
        assert manifest == {"dependencies": {"react": "catalog:"}, "publishConfig": {"bin": "./cli.js"}}

    def test_publish_config_overrides(self, package_dir: Path):
        manifest = {
            "main": "./src/index.ts",
            "publishConfig": {"access": "public", "main": "./dist/index.js", "registry": "x"},
        }
        result = create_exportable_manifest(package_dir, manifest)
        assert result["main"] == "./dist/index.js"
        assert "registry" not in result
        assert result["publishConfig"]["access"] == "public"

    def test_missing_catalogs(self, package_dir: Path):
        with pytest.raises(ExportableManifestError, match="catalog"):
            create_exportable_manifest(package_dir, {"dependencies": {"react": "catalog:"}})
