# SPDX-License-Identifier: MIT
"""Build configuration for package manifests.

This module provides the BuildConfig dataclass that holds the options of a
build run, loaded from an optional ``jsdist.toml`` next to package.json:

    [build]
    bundle = true
    format = "esm"
    exports_as_indexes = false
    targets = ["dev", "npm"]
    output_dir = "dist"
    jsr_name = "@scope/name"
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from jsdist_manifest import FORMAT_ESM, OUTPUT_FORMATS


class BuildConfigError(Exception):
    """Raised when build configuration is invalid."""

    pass


CONFIG_FILENAME = "jsdist.toml"

# Build targets: local development, npm registry, JSR registry
TARGET_DEV = "dev"
TARGET_NPM = "npm"
TARGET_JSR = "jsr"
VALID_TARGETS = (TARGET_DEV, TARGET_NPM, TARGET_JSR)
DEFAULT_TARGETS = [TARGET_DEV, TARGET_NPM]
DEFAULT_OUTPUT_DIR = "dist"


@dataclass(frozen=True)
class TargetOptions:
    """Manifest options derived for a single build target.

    Attributes:
        target: Target name
        is_production: Resolve catalog: and workspace: references
        force_private: Always publish as private
        process_ts_exports: Rewrite TypeScript sources to output modules
        name: Package name override
    """

    target: str
    is_production: bool
    force_private: bool
    process_ts_exports: bool
    name: Optional[str] = None


@dataclass
class BuildConfig:
    """Configuration for building package manifests.

    Attributes:
        bundle: Bundled output; collapses "<dir>/index" modules to "<dir>"
        format: Output module format ("esm" or "cjs")
        exports_as_indexes: Emit nested exports as "<path>/index" entries
        targets: Build targets to produce
        output_dir: Output root; each target is written to "<output_dir>/<target>"
        jsr_name: Package name used for the jsr target
    """

    bundle: bool = True
    format: str = FORMAT_ESM
    exports_as_indexes: bool = False
    targets: list[str] = field(default_factory=lambda: DEFAULT_TARGETS.copy())
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    jsr_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.format not in OUTPUT_FORMATS:
            raise BuildConfigError(
                f"Invalid format '{self.format}'. Must be one of: {', '.join(OUTPUT_FORMATS)}"
            )
        invalid = [target for target in self.targets if target not in VALID_TARGETS]
        if invalid:
            raise BuildConfigError(
                f"Invalid target(s): {', '.join(invalid)}. Must be one of: {', '.join(VALID_TARGETS)}"
            )
        if self.exports_as_indexes and not self.bundle:
            raise BuildConfigError("exports_as_indexes requires bundled output (bundle = true)")
        self.output_dir = Path(self.output_dir)

    @classmethod
    def load(cls, project_dir: str | Path) -> "BuildConfig":
        """Load configuration from ``jsdist.toml`` in a project directory.

        Returns the default configuration when the file does not exist.
        """
        config_path = Path(project_dir) / CONFIG_FILENAME
        if not config_path.exists():
            return cls()
        return cls.from_toml(config_path)

    @classmethod
    def from_toml(cls, config_path: str | Path) -> "BuildConfig":
        """Create a BuildConfig from a ``jsdist.toml`` file.

        Raises:
            BuildConfigError: If the file is invalid
            FileNotFoundError: If the file doesn't exist
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"{CONFIG_FILENAME} not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise BuildConfigError(f"Invalid TOML syntax: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildConfig":
        """Create a BuildConfig from a parsed ``jsdist.toml`` dictionary.

        Raises:
            BuildConfigError: If a value has the wrong type
        """
        build = data.get("build", {})
        if not isinstance(build, dict):
            raise BuildConfigError("[build] must be a table")

        expected_types: dict[str, type] = {
            "bundle": bool,
            "format": str,
            "exports_as_indexes": bool,
            "targets": list,
            "output_dir": str,
            "jsr_name": str,
        }
        for key, value in build.items():
            expected = expected_types.get(key)
            if expected is None:
                raise BuildConfigError(f"Unknown option: [build].{key}")
            if not isinstance(value, expected):
                raise BuildConfigError(
                    f"[build].{key} must be {expected.__name__}, got {type(value).__name__}"
                )

        return cls(
            bundle=build.get("bundle", True),
            format=build.get("format", FORMAT_ESM),
            exports_as_indexes=build.get("exports_as_indexes", False),
            targets=list(build.get("targets", DEFAULT_TARGETS)),
            output_dir=Path(build.get("output_dir", DEFAULT_OUTPUT_DIR)),
            jsr_name=build.get("jsr_name"),
        )

    def target_options(self, target: str) -> TargetOptions:
        """Derive the manifest options of a build target.

        Raises:
            BuildConfigError: If the target is unknown
        """
        if target not in VALID_TARGETS:
            raise BuildConfigError(
                f"Invalid target '{target}'. Must be one of: {', '.join(VALID_TARGETS)}"
            )
        return TargetOptions(
            target=target,
            is_production=target != TARGET_DEV,
            force_private=target == TARGET_DEV,
            process_ts_exports=target != TARGET_JSR,
            name=self.jsr_name if target == TARGET_JSR else None,
        )

    def target_output_dir(self, project_dir: str | Path, target: str) -> Path:
        """Return the output directory of a target."""
        output_dir = self.output_dir
        if not output_dir.is_absolute():
            output_dir = Path(project_dir) / output_dir
        return output_dir / target
