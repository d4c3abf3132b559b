# SPDX-License-Identifier: MIT
"""Pytest fixtures for catalog tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Generator

import pytest

WORKSPACE_YAML = """\
packages:
  - "packages/*"
catalog:
  react: ^18.2.0
  typescript: ^5.4.0
"""


@pytest.fixture
def workspace(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a pnpm workspace with a catalog and one package."""
    root = tmp_path / "workspace"
    root.mkdir()
    (root / "pnpm-workspace.yaml").write_text(WORKSPACE_YAML)

    package_dir = root / "packages" / "lib"
    package_dir.mkdir(parents=True)

    linked = package_dir / "node_modules" / "@acme" / "utils"
    linked.mkdir(parents=True)
    (linked / "package.json").write_text(json.dumps({"name": "@acme/utils", "version": "2.1.0"}))

    yield root


@pytest.fixture
def package_dir(workspace: Path) -> Path:
    """Directory of the workspace package."""
    return workspace / "packages" / "lib"
