# SPDX-License-Identifier: MIT
"""Tests for workspace catalog loading and caching."""

import os
from pathlib import Path
from unittest import mock

import pytest
from structlog.testing import capture_logs

from jsdist_catalog import catalog as catalog_module
from jsdist_catalog.catalog import (
    CatalogCache,
    WorkspaceCatalog,
    collect_references,
    collect_unresolved_references,
    load_catalog_file,
)
from jsdist_catalog.errors import DependencyReference


def _bump_mtime(path: Path) -> None:
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))


class TestLoadCatalogFile:
    """Tests for load_catalog_file."""

    def test_reads_catalog(self, workspace: Path):
        assert load_catalog_file(workspace / "pnpm-workspace.yaml") == {
            "react": "^18.2.0",
            "typescript": "^5.4.0",
        }

    def test_coerces_versions_to_strings(self, tmp_path: Path):
        path = tmp_path / "pnpm-workspace.yaml"
        path.write_text("catalog:\n  answer: 42\n  empty:\n")
        assert load_catalog_file(path) == {"answer": "42"}

    def test_without_catalog(self, tmp_path: Path):
        path = tmp_path / "pnpm-workspace.yaml"
        path.write_text("packages:\n  - packages/*\n")
        assert load_catalog_file(path) == {}

    def test_non_mapping_document(self, tmp_path: Path):
        path = tmp_path / "pnpm-workspace.yaml"
        path.write_text("- just\n- a list\n")
        assert load_catalog_file(path) == {}


class TestCatalogCache:
    """Tests for CatalogCache."""

    def test_same_mtime_reuses_versions(self):
        cache = CatalogCache()
        loader = mock.Mock(return_value={"a": "1"})
        assert cache.get_or_refresh(Path("x"), 1, loader) == {"a": "1"}
        assert cache.get_or_refresh(Path("x"), 1, loader) == {"a": "1"}
        loader.assert_called_once()

    def test_changed_mtime_replaces_entry(self):
        cache = CatalogCache()
        cache.get_or_refresh(Path("x"), 1, lambda: {"a": "1"})
        assert cache.get_or_refresh(Path("x"), 2, lambda: {"a": "2"}) == {"a": "2"}
        assert cache.get(Path("x")).source_mtime == 2

    def test_invalidate(self):
        cache = CatalogCache()
        cache.get_or_refresh(Path("x"), 1, lambda: {})
        cache.invalidate()
        assert cache.get(Path("x")) is None


class TestGetCatalog:
    """Tests for WorkspaceCatalog.get_catalog."""

    def test_reads_workspace_catalog(self, workspace: Path, package_dir: Path):
        catalog = WorkspaceCatalog(start_dir=package_dir)
        assert catalog.get_catalog() == {"react": "^18.2.0", "typescript": "^5.4.0"}
        assert catalog.workspace_root == workspace.resolve()

    def test_unchanged_file_read_once(self, package_dir: Path):
        catalog = WorkspaceCatalog(start_dir=package_dir)
        with mock.patch.object(
            catalog_module, "load_catalog_file", wraps=catalog_module.load_catalog_file
        ) as loader:
            first = catalog.get_catalog()
            second = catalog.get_catalog()
        assert first == second
        loader.assert_called_once()

    def test_changed_file_reread(self, workspace: Path, package_dir: Path):
        catalog = WorkspaceCatalog(start_dir=package_dir)
        workspace_file = workspace / "pnpm-workspace.yaml"
        with mock.patch.object(
            catalog_module, "load_catalog_file", wraps=catalog_module.load_catalog_file
        ) as loader:
            catalog.get_catalog()
            workspace_file.write_text("catalog:\n  react: ^19.0.0\n")
            _bump_mtime(workspace_file)
            updated = catalog.get_catalog()
        assert updated == {"react": "^19.0.0"}
        assert loader.call_count == 2

    def test_clear_cache(self, workspace: Path, package_dir: Path):
        locator = mock.Mock(return_value=workspace)
        catalog = WorkspaceCatalog(start_dir=package_dir, locator=locator)
        catalog.get_catalog()
        catalog.clear_cache()
        assert catalog.workspace_root is None

        with mock.patch.object(
            catalog_module, "load_catalog_file", wraps=catalog_module.load_catalog_file
        ) as loader:
            catalog.get_catalog()
        loader.assert_called_once()
        assert locator.call_count == 2

    def test_instances_do_not_share_cache(self, package_dir: Path):
        first = WorkspaceCatalog(start_dir=package_dir)
        second = WorkspaceCatalog(start_dir=package_dir)
        with mock.patch.object(
            catalog_module, "load_catalog_file", wraps=catalog_module.load_catalog_file
        ) as loader:
            first.get_catalog()
            second.get_catalog()
        assert loader.call_count == 2

    def test_no_workspace_root(self, tmp_path: Path):
        catalog = WorkspaceCatalog(start_dir=tmp_path, locator=lambda _: None)
        with capture_logs() as logs:
            assert catalog.get_catalog() == {}
        assert logs[0]["log_level"] == "error"
        assert logs[0]["category"] == "catalog"
        assert "could not find workspace root" in logs[0]["event"]

    def test_missing_workspace_file(self, tmp_path: Path):
        catalog = WorkspaceCatalog(start_dir=tmp_path, locator=lambda _: tmp_path)
        with capture_logs() as logs:
            assert catalog.get_catalog() == {}
        assert "workspace configuration not found" in logs[0]["event"]

    def test_invalid_yaml(self, tmp_path: Path):
        (tmp_path / "pnpm-workspace.yaml").write_text("catalog: [unclosed\n")
        catalog = WorkspaceCatalog(start_dir=tmp_path, locator=lambda _: tmp_path)
        with capture_logs() as logs:
            assert catalog.get_catalog() == {}
        assert "Invalid YAML syntax" in logs[0]["event"]
        assert all(entry["category"] == "catalog" for entry in logs)

    def test_unreadable_workspace_file(self, tmp_path: Path):
        (tmp_path / "pnpm-workspace.yaml").write_bytes(b"catalog:\n  react: \xff\xfe\n")
        catalog = WorkspaceCatalog(start_dir=tmp_path, locator=lambda _: tmp_path)
        with capture_logs() as logs:
            assert catalog.get_catalog() == {}
        assert "Failed to read pnpm catalog" in logs[0]["event"]


class TestCollectReferences:
    """Tests for reference scanning."""

    @pytest.fixture
    def manifest(self) -> dict:
        return {
            "dependencies": {"react": "catalog:", "lodash": "^4.0.0"},
            "devDependencies": {"@acme/utils": "workspace:*"},
            "peerDependencies": "not-a-map",
            "optionalDependencies": {"fsevents": "catalog:mac"},
        }

    def test_catalog_references(self, manifest):
        assert collect_references(manifest, "catalog:") == [
            DependencyReference("dependencies", "react", "catalog:"),
            DependencyReference("optionalDependencies", "fsevents", "catalog:mac"),
        ]

    def test_unresolved_references(self, manifest):
        assert [str(ref) for ref in collect_unresolved_references(manifest)] == [
            "dependencies.react: catalog:",
            "optionalDependencies.fsevents: catalog:mac",
            "devDependencies.@acme/utils: workspace:*",
        ]
