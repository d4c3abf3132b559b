# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for CLI tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Generator

import pytest
import structlog
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo the logging configuration installed by each CLI invocation."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_workspace(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary pnpm workspace with a catalog."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    (workspace / "pnpm-workspace.yaml").write_text(
        """packages:
  - "packages/*"
catalog:
  react: ^18.2.0
  typescript: ^5.4.0
"""
    )
    yield workspace


@pytest.fixture
def temp_project(temp_workspace: Path) -> Generator[Path, None, None]:
    """Create a temporary package inside the workspace."""
    project_dir = temp_workspace / "packages" / "lib"
    (project_dir / "src" / "utils").mkdir(parents=True)

    (project_dir / "package.json").write_text(
        json.dumps(
            {
                "name": "@acme/lib",
                "version": "1.0.0",
                "type": "module",
                "exports": {
                    ".": "./src/index.ts",
                    "./utils": "./src/utils/index.ts",
                    "./api/v1": "./src/api/v1.ts",
                },
                "bin": {"acme": "./src/cli.ts"},
                "scripts": {"build": "jsdist build"},
                "publishConfig": {"access": "public"},
                "dependencies": {"react": "catalog:"},
                "devDependencies": {"typescript": "catalog:"},
            },
            indent=2,
        )
    )
    (project_dir / "README.md").write_text("# @acme/lib\n")
    (project_dir / "src" / "index.ts").write_text("export {};\n")

    yield project_dir
