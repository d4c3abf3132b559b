# SPDX-License-Identifier: MIT
"""Pytest fixtures for build tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Generator

import pytest

PACKAGE_JSON = {
    "name": "@acme/lib",
    "version": "1.0.0",
    "type": "module",
    "exports": {
        ".": "./src/index.ts",
        "./utils": "./src/utils/index.ts",
        "./package.json": "./package.json",
    },
    "bin": {"acme": "./src/bin/cli.ts"},
    "files": ["./public/logo.svg"],
    "scripts": {"build": "jsdist build"},
    "publishConfig": {"access": "public"},
    "dependencies": {"react": "catalog:"},
    "devDependencies": {"@acme/utils": "workspace:*"},
}


@pytest.fixture
def project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a workspace package with a catalog and a linked dependency."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    (workspace / "pnpm-workspace.yaml").write_text(
        'packages:\n  - "packages/*"\ncatalog:\n  react: ^18.2.0\n'
    )

    project_dir = workspace / "packages" / "lib"
    project_dir.mkdir(parents=True)
    (project_dir / "package.json").write_text(json.dumps(PACKAGE_JSON, indent=2))
    (project_dir / "README.md").write_text("# lib\n")

    linked = project_dir / "node_modules" / "@acme" / "utils"
    linked.mkdir(parents=True)
    (linked / "package.json").write_text(json.dumps({"name": "@acme/utils", "version": "2.1.0"}))

    yield project_dir
