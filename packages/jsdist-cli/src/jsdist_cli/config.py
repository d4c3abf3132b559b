# SPDX-License-Identifier: MIT
"""CLI configuration: project root discovery and jsdist.toml loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from jsdist_build import CONFIG_FILENAME, MANIFEST_FILENAME, BuildConfig, BuildConfigError


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


@dataclass
class CLIConfig:
    """CLI configuration for a project.

    Attributes:
        project_dir: Directory containing package.json
        build: Build configuration from jsdist.toml (defaults when absent)
    """

    project_dir: Path
    build: BuildConfig = field(default_factory=BuildConfig)

    @property
    def manifest_path(self) -> Path:
        return self.project_dir / MANIFEST_FILENAME

    def has_build_config(self) -> bool:
        """Check if jsdist.toml exists in the project directory."""
        return (self.project_dir / CONFIG_FILENAME).exists()


def find_project_root(start_dir: Optional[str | Path] = None) -> Path:
    """Find the project root by looking for package.json.

    Args:
        start_dir: Directory to start searching from (defaults to cwd)

    Returns:
        Path to the project root directory

    Raises:
        ConfigError: If no project root is found
    """
    current = Path(start_dir) if start_dir else Path.cwd()
    current = current.resolve()

    while True:
        if (current / MANIFEST_FILENAME).exists():
            return current
        if current == current.parent:
            break
        current = current.parent

    raise ConfigError(f"Could not find project root (no {MANIFEST_FILENAME} found)")


def load_config(project_dir: Optional[str | Path] = None) -> CLIConfig:
    """Load CLI configuration for the project containing a directory.

    Args:
        project_dir: Directory to search from (defaults to cwd)

    Returns:
        CLIConfig instance

    Raises:
        ConfigError: If no project is found or jsdist.toml is invalid
    """
    project_path = find_project_root(project_dir)

    try:
        build = BuildConfig.load(project_path)
    except BuildConfigError as e:
        raise ConfigError(f"Invalid {CONFIG_FILENAME}: {e}") from e

    return CLIConfig(project_dir=project_path, build=build)
