# SPDX-License-Identifier: MIT
"""Build entry extraction from package.json exports and bin fields.

Entry names are derived from export keys:

- the root export "." becomes "index"
- "./utils" becomes "utils"
- "./api/v1" becomes "api-v1", or "api/v1/index" with the nested index layout
- bin commands become "bin/<command>"; a single string bin becomes "bin/cli"

Example:
    >>> manifest = {
    ...     "exports": {".": "./src/index.ts", "./utils": "./src/utils.ts"},
    ...     "bin": {"my-cli": "./src/bin/cli.ts"},
    ... }
    >>> extract_entries(manifest).entries
    {'index': './src/index.ts', 'utils': './src/utils.ts', 'bin/my-cli': './src/bin/cli.ts'}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .paths import is_source_module
from .schema import (
    ASSET_EXPORT_SUFFIX,
    COMPILED_DIR_SEGMENT,
    COMPILED_EXTENSION,
    FORMAT_ESM,
    MANIFEST_SELF_EXPORT,
    OUTPUT_EXTENSIONS,
    SOURCE_DIR_SEGMENT,
)

ROOT_EXPORT_KEY = "."
ROOT_ENTRY_NAME = "index"
BIN_ENTRY_PREFIX = "bin/"
DEFAULT_BIN_ENTRY = "bin/cli"

# Condition keys consulted for a source path, in priority order
SOURCE_CONDITION_PRIORITY = ("import", "default", "types")


@dataclass
class ExtractedEntries:
    """Result of entry extraction.

    Attributes:
        entries: Entry name to TypeScript source path mapping
    """

    entries: dict[str, str] = field(default_factory=dict)


def resolve_to_source(path: str) -> str:
    """Map a compiled ``/dist/*.js`` path back to its ``/src/*.ts`` source."""
    if path.endswith(COMPILED_EXTENSION) and COMPILED_DIR_SEGMENT in path:
        source = path.replace(COMPILED_DIR_SEGMENT, SOURCE_DIR_SEGMENT, 1)
        return f"{source[: -len(COMPILED_EXTENSION)]}.ts"
    return path


def _select_source_path(value: Any) -> Optional[str]:
    """Pick the source path of an export value."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        for condition in SOURCE_CONDITION_PRIORITY:
            candidate = value.get(condition)
            if candidate:
                return candidate if isinstance(candidate, str) else None
    return None


class EntryExtractor:
    """Extracts TypeScript build entries from a manifest.

    Args:
        exports_as_indexes: Name nested exports "<path>/index" instead of
            joining path segments with hyphens
    """

    def __init__(self, exports_as_indexes: bool = False) -> None:
        self.exports_as_indexes = exports_as_indexes

    def extract(self, manifest: Mapping[str, Any]) -> ExtractedEntries:
        """Extract entries from the ``exports`` and ``bin`` fields."""
        entries: dict[str, str] = {}
        self._extract_from_exports(manifest.get("exports"), entries)
        self._extract_from_bin(manifest.get("bin"), entries)
        return ExtractedEntries(entries=entries)

    def create_entry_name(self, export_key: str) -> str:
        """Create an entry name from an export key."""
        if export_key == ROOT_EXPORT_KEY:
            return ROOT_ENTRY_NAME

        stripped = export_key[2:] if export_key.startswith("./") else export_key
        if self.exports_as_indexes:
            return f"{stripped}/index"
        return stripped.replace("/", "-")

    def _extract_from_exports(self, exports: Any, entries: dict[str, str]) -> None:
        if isinstance(exports, str):
            if is_source_module(exports):
                entries[ROOT_ENTRY_NAME] = exports
            return

        if not isinstance(exports, dict):
            return

        for key, value in exports.items():
            if key == MANIFEST_SELF_EXPORT or key.endswith(ASSET_EXPORT_SUFFIX):
                continue

            source_path = _select_source_path(value)
            if not source_path:
                continue

            resolved = resolve_to_source(source_path)
            if not is_source_module(resolved):
                continue

            entries[self.create_entry_name(key)] = resolved

    def _extract_from_bin(self, bin_field: Any, entries: dict[str, str]) -> None:
        if isinstance(bin_field, str):
            resolved = resolve_to_source(bin_field)
            if is_source_module(resolved):
                entries[DEFAULT_BIN_ENTRY] = resolved
            return

        if not isinstance(bin_field, dict):
            return

        for command, path in bin_field.items():
            if not isinstance(path, str):
                continue
            resolved = resolve_to_source(path)
            if is_source_module(resolved):
                entries[f"{BIN_ENTRY_PREFIX}{command}"] = resolved


def extract_entries(
    manifest: Mapping[str, Any],
    exports_as_indexes: bool = False,
) -> ExtractedEntries:
    """Extract TypeScript build entries from a manifest.

    Args:
        manifest: Parsed package.json
        exports_as_indexes: Use the nested index layout for entry names

    Returns:
        ExtractedEntries holding the entry table
    """
    return EntryExtractor(exports_as_indexes=exports_as_indexes).extract(manifest)


def entries_to_output_paths(
    entries: Mapping[str, str],
    output_format: str = FORMAT_ESM,
) -> dict[str, str]:
    """Map entry names to the module each entry is emitted as.

    Example:
        >>> entries_to_output_paths({"utils": "./src/lib/utils.ts"})
        {'utils': './utils.js'}
    """
    extension = OUTPUT_EXTENSIONS[output_format]
    return {name: f"./{name}{extension}" for name in entries}


def build_export_output_map(
    manifest: Mapping[str, Any],
    entries: Mapping[str, str],
    output_format: str = FORMAT_ESM,
) -> dict[str, str]:
    """Map export keys to output paths for the nested index layout.

    Each export key is matched to the entry whose name, without a trailing
    "/index", equals the key without its leading "./". The root export matches
    the "index" entry.

    Example:
        >>> build_export_output_map(
        ...     {"exports": {"./api/v1": "./src/api/v1.ts"}},
        ...     {"api/v1/index": "./src/api/v1.ts"},
        ... )
        {'./api/v1': './api/v1/index.js'}
    """
    exports = manifest.get("exports")
    if not isinstance(exports, dict):
        return {}

    extension = OUTPUT_EXTENSIONS[output_format]
    output_map: dict[str, str] = {}
    for export_key in exports:
        if export_key == MANIFEST_SELF_EXPORT:
            continue
        normalized_key = export_key[2:] if export_key.startswith("./") else export_key
        for entry_name in entries:
            normalized_entry = entry_name[: -len("/index")] if entry_name.endswith("/index") else entry_name
            if (export_key == ROOT_EXPORT_KEY and entry_name == ROOT_ENTRY_NAME) or (
                normalized_key == normalized_entry
            ):
                output_map[export_key] = f"./{entry_name}{extension}"
                break
    return output_map
