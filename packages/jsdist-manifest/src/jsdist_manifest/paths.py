# SPDX-License-Identifier: MIT
"""Source-tree to build-output path conversion.

Example:
    >>> transform_path("./src/index.ts")
    './index.js'
    >>> transform_path("./src/utils/index.ts", PathOptions(collapse_index=True))
    './utils.js'
    >>> derive_type_path("./utils.js")
    './utils.d.ts'
"""

from __future__ import annotations

from dataclasses import dataclass

from .schema import (
    DECLARATION_SUFFIX,
    FORMAT_ESM,
    MODULE_CONDITIONS,
    OUTPUT_EXTENSIONS,
    OUTPUT_FORMATS,
    SOURCE_EXTENSIONS,
    SOURCE_ROOT_PREFIXES,
)


@dataclass(frozen=True)
class PathOptions:
    """Options controlling path conversion.

    Attributes:
        process_ts_exports: Convert TypeScript sources to output modules and
            synthesize declaration conditions
        collapse_index: Emit ``<dir>/index.ts`` as ``<dir>.js`` (bundled output)
        format: Output module format, "esm" or "cjs"
    """

    process_ts_exports: bool = True
    collapse_index: bool = False
    format: str = FORMAT_ESM

    def __post_init__(self) -> None:
        if self.format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format '{self.format}'. Must be one of: {', '.join(OUTPUT_FORMATS)}"
            )

    @property
    def extension(self) -> str:
        """Extension of emitted modules."""
        return OUTPUT_EXTENSIONS[self.format]

    @property
    def module_condition(self) -> str:
        """Export condition under which emitted modules are published."""
        return MODULE_CONDITIONS[self.format]


DEFAULT_PATH_OPTIONS = PathOptions()


def is_declaration_file(path: str) -> bool:
    """Check if a path points to a TypeScript declaration file."""
    return path.endswith(DECLARATION_SUFFIX)


def is_source_module(path: str) -> bool:
    """Check if a path points to a buildable TypeScript source module."""
    return path.endswith(SOURCE_EXTENSIONS) and not is_declaration_file(path)


def strip_source_root(path: str) -> str:
    """Strip the first matching source root, keeping the leading ``./``."""
    for prefix in SOURCE_ROOT_PREFIXES:
        if path.startswith(prefix):
            return f"./{path[len(prefix):]}"
    return path


def transform_path(path: str, options: PathOptions = DEFAULT_PATH_OPTIONS) -> str:
    """Transform a source-tree path into its build-output path.

    Args:
        path: Path as written in the source manifest
        options: Path conversion options

    Returns:
        The output path. Paths that are not TypeScript sources only lose
        their source root prefix.
    """
    transformed = strip_source_root(path)

    if not options.process_ts_exports or not is_source_module(transformed):
        return transformed

    extension = options.extension
    if options.collapse_index:
        for source_ext in SOURCE_EXTENSIONS:
            index_suffix = f"/index{source_ext}"
            # The root index has no parent directory to collapse into
            if transformed.endswith(index_suffix) and transformed != f".{index_suffix}":
                return f"{transformed[: -len(index_suffix)]}{extension}"

    for source_ext in sorted(SOURCE_EXTENSIONS, key=len, reverse=True):
        if transformed.endswith(source_ext):
            return f"{transformed[: -len(source_ext)]}{extension}"
    return transformed


def derive_type_path(output_path: str, options: PathOptions = DEFAULT_PATH_OPTIONS) -> str:
    """Derive the declaration file path for an output module path.

    Example:
        >>> derive_type_path("./api/v1/index.js", PathOptions(collapse_index=True))
        './api/v1.d.ts'
    """
    if options.collapse_index:
        for extension in OUTPUT_EXTENSIONS.values():
            index_suffix = f"/index{extension}"
            if output_path.endswith(index_suffix) and output_path != f".{index_suffix}":
                return f"{output_path[: -len(index_suffix)]}{DECLARATION_SUFFIX}"

    for extension in OUTPUT_EXTENSIONS.values():
        if output_path.endswith(extension):
            return f"{output_path[: -len(extension)]}{DECLARATION_SUFFIX}"
    return f"{output_path}{DECLARATION_SUFFIX}"
