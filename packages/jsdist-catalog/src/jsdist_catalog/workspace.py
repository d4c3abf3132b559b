# SPDX-License-Identifier: MIT
"""Workspace root discovery."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

WORKSPACE_FILE = "pnpm-workspace.yaml"


def find_workspace_root(start_dir: Optional[str | Path] = None) -> Optional[Path]:
    """Find the workspace root by looking for pnpm-workspace.yaml.

    Args:
        start_dir: Directory to start searching from (defaults to cwd)

    Returns:
        Path to the workspace root directory, or None if there is none
    """
    current = Path(start_dir) if start_dir else Path.cwd()
    current = current.resolve()

    while True:
        if (current / WORKSPACE_FILE).is_file():
            return current
        if current == current.parent:
            return None
        current = current.parent
