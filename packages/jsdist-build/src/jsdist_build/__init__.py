# SPDX-License-Identifier: MIT
"""Manifest assembly for JavaScript package builds.

This package provides utilities for producing the published package.json:
- Build configuration from jsdist.toml
- Output manifest assembly (reference resolution, path rewriting, cleanup)
- Per-target build runs (dev, npm, jsr) with files-array merging

Example:
    >>> from jsdist_build import BuildConfig, BuildRun, build_package_json
    >>>
    >>> build_package_json({"name": "lib", "exports": {".": "./src/index.ts"}})
    {'name': 'lib', 'private': True, 'exports': {'.': {'types': './index.d.ts', 'import': './index.js'}}}
    >>>
    >>> run = BuildRun("packages/my-lib", BuildConfig(targets=["npm"]))
    >>> run.run()[0].path
    PosixPath('packages/my-lib/dist/npm/package.json')
"""

__version__ = "0.1.0"

from .config import (
    CONFIG_FILENAME,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_TARGETS,
    TARGET_DEV,
    TARGET_JSR,
    TARGET_NPM,
    VALID_TARGETS,
    BuildConfig,
    BuildConfigError,
    TargetOptions,
)
from .pipeline import (
    ESSENTIAL_FILES,
    MANIFEST_FILENAME,
    BuildRun,
    EntryPlan,
    TargetResult,
    merge_files_array,
)
from .transformer import (
    UNPUBLISHED_FIELDS,
    ManifestAssembler,
    apply_output_transformations,
    build_package_json,
    is_public,
)

__all__ = [
    # Config
    "BuildConfig",
    "BuildConfigError",
    "TargetOptions",
    "CONFIG_FILENAME",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_TARGETS",
    "TARGET_DEV",
    "TARGET_NPM",
    "TARGET_JSR",
    "VALID_TARGETS",
    # Transformer
    "ManifestAssembler",
    "build_package_json",
    "apply_output_transformations",
    "is_public",
    "UNPUBLISHED_FIELDS",
    # Pipeline
    "BuildRun",
    "EntryPlan",
    "TargetResult",
    "merge_files_array",
    "MANIFEST_FILENAME",
    "ESSENTIAL_FILES",
]
