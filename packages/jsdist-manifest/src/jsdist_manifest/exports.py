# SPDX-License-Identifier: MIT
"""Rewriting of path-bearing manifest fields for the build output.

The ``exports`` field is parsed once into a tree of tagged nodes:

- ``PathNode``: a single path string
- ``FallbackNode``: an ordered list of alternatives
- ``ConditionNode``: an object keyed by conditions (import, require, types, default)
- ``SubpathNode``: an object keyed by subpaths ("./utils")
- ``OpaqueNode``: any other JSON value (null, numbers), passed through

An object is a condition object when it holds at least one of the four
condition keys. The classification is made at parse time for every object in
the tree, so rewriting never re-inspects raw dictionaries.

Example:
    >>> rewriter = ExportRewriter()
    >>> rewriter.transform_exports({".": "./src/index.ts"})
    {'.': {'types': './index.d.ts', 'import': './index.js'}}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from .entries import EntryExtractor
from .paths import DEFAULT_PATH_OPTIONS, PathOptions, derive_type_path, is_source_module, transform_path
from .schema import CONDITION_KEYS, STATIC_ASSET_DIR
from .validator import ManifestError


class ExportMappingError(ManifestError):
    """Raised when an export override claims a key but maps it to nothing."""

    def __init__(self, export_key: str):
        self.export_key = export_key
        super().__init__(f'Export key "{export_key}" has no mapped path')


@dataclass(frozen=True)
class PathNode:
    """A path string."""

    path: str


@dataclass(frozen=True)
class FallbackNode:
    """Ordered fallback alternatives."""

    items: tuple[ExportNode, ...]


@dataclass(frozen=True)
class ConditionNode:
    """An object keyed by export conditions."""

    entries: dict[str, ExportNode] = field(default_factory=dict)


@dataclass(frozen=True)
class SubpathNode:
    """An object keyed by export subpaths."""

    entries: dict[str, ExportNode] = field(default_factory=dict)


@dataclass(frozen=True)
class OpaqueNode:
    """A JSON value that carries no path (null, booleans, numbers)."""

    value: Any = None


ExportNode = Union[PathNode, FallbackNode, ConditionNode, SubpathNode, OpaqueNode]


def is_conditions_object(exports: Mapping[str, Any]) -> bool:
    """Check if an export object is keyed by conditions rather than subpaths.

    A subpath literally named like a condition ("import") is indistinguishable
    from a condition key and is classified as a condition.
    """
    return any(key in CONDITION_KEYS for key in exports)


def parse_export_node(value: Any) -> ExportNode:
    """Parse a raw ``exports`` value into a tagged export tree."""
    if isinstance(value, str):
        return PathNode(value)
    if isinstance(value, list):
        return FallbackNode(tuple(parse_export_node(item) for item in value))
    if isinstance(value, dict):
        entries = {key: parse_export_node(child) for key, child in value.items()}
        if is_conditions_object(value):
            return ConditionNode(entries)
        return SubpathNode(entries)
    return OpaqueNode(value)


def render_export_node(node: ExportNode) -> Any:
    """Convert a tagged export tree back to plain JSON values."""
    if isinstance(node, PathNode):
        return node.path
    if isinstance(node, FallbackNode):
        return [render_export_node(item) for item in node.items]
    if isinstance(node, (ConditionNode, SubpathNode)):
        return {key: render_export_node(child) for key, child in node.entries.items()}
    return node.value


class ExportRewriter:
    """Rewrites exports, bin, typesVersions and files for the build output.

    Output paths for a string export are resolved in priority order:

    1. ``export_output_map`` entry for the current export key
    2. ``entrypoints`` entry for the export key, with or without leading ``./``,
       or for the entry name the key extracts to ("." is "index", "./api/v1"
       is "api-v1")
    3. generic :func:`transform_path`

    Args:
        options: Path conversion options
        entrypoints: Entry name to output path table
        export_output_map: Export key to exact output path table, used by the
            nested index layout
        exports_as_indexes: Entry names follow the nested index layout
    """

    def __init__(
        self,
        options: PathOptions = DEFAULT_PATH_OPTIONS,
        entrypoints: Optional[Mapping[str, str]] = None,
        export_output_map: Optional[Mapping[str, Optional[str]]] = None,
        exports_as_indexes: bool = False,
    ) -> None:
        self.options = options
        self.entrypoints: Mapping[str, str] = entrypoints or {}
        self.export_output_map: Mapping[str, Optional[str]] = export_output_map or {}
        self.entry_namer = EntryExtractor(exports_as_indexes=exports_as_indexes)

    def transform_path(self, path: str) -> str:
        """Transform a single path with this rewriter's options."""
        return transform_path(path, self.options)

    def derive_type_path(self, output_path: str) -> str:
        """Derive the declaration path for an output module path."""
        return derive_type_path(output_path, self.options)

    def transform_exports(self, exports: Any, export_key: Optional[str] = None) -> Any:
        """Transform an ``exports`` value recursively.

        Args:
            exports: Raw exports value from the manifest
            export_key: Export key providing lookup context for string values

        Returns:
            The rewritten exports value as plain JSON

        Raises:
            ExportMappingError: If the override table maps a key to nothing
        """
        return self.rewrite(parse_export_node(exports), export_key)

    def rewrite(self, node: ExportNode, export_key: Optional[str] = None) -> Any:
        """Rewrite a parsed export node into plain JSON."""
        if isinstance(node, PathNode):
            return self._rewrite_path(node.path, export_key)

        if isinstance(node, FallbackNode):
            result = []
            for item in node.items:
                transformed = self.rewrite(item, export_key)
                result.append(transformed if transformed is not None else render_export_node(item))
            return result

        if isinstance(node, ConditionNode):
            result_map: dict[str, Any] = {}
            for key, child in node.entries.items():
                if key in CONDITION_KEYS:
                    result_map[key] = self._rewrite_condition(child, export_key)
                else:
                    result_map[key] = self.rewrite(child, key)
            return result_map

        if isinstance(node, SubpathNode):
            return {key: self.rewrite(child, key) for key, child in node.entries.items()}

        return node.value

    def _rewrite_condition(self, node: ExportNode, export_key: Optional[str]) -> Any:
        """Rewrite the value of a condition key without synthesizing types."""
        if isinstance(node, PathNode):
            return self.transform_path(node.path)
        if isinstance(node, OpaqueNode):
            return node.value
        return self.rewrite(node, export_key)

    def _rewrite_path(self, path: str, export_key: Optional[str]) -> Any:
        """Rewrite a string export, turning TypeScript sources into conditions."""
        output_path = self.resolve_output_path(path, export_key)

        if self.options.process_ts_exports and is_source_module(path):
            return {
                "types": self.derive_type_path(output_path),
                self.options.module_condition: output_path,
            }
        return output_path

    def resolve_output_path(self, path: str, export_key: Optional[str] = None) -> str:
        """Resolve the output path of a string export under an export key."""
        if export_key is not None and export_key in self.export_output_map:
            mapped_path = self.export_output_map[export_key]
            if not mapped_path:
                raise ExportMappingError(export_key)
            return mapped_path

        if export_key is not None and self.entrypoints:
            bare_key = export_key[2:] if export_key.startswith("./") else export_key
            entry_name = self.entry_namer.create_entry_name(export_key)
            for lookup_key in (export_key, bare_key, entry_name):
                if lookup_key in self.entrypoints:
                    return self.entrypoints[lookup_key] or path

        return self.transform_path(path)

    def transform_bin(self, bin_field: Any) -> Any:
        """Transform the ``bin`` field. Paths are rewritten without type synthesis.

        Executables are single entry files, so index collapsing never applies.
        """
        bin_options = PathOptions(
            process_ts_exports=self.options.process_ts_exports,
            format=self.options.format,
        )
        if isinstance(bin_field, str):
            return transform_path(bin_field, bin_options)
        if isinstance(bin_field, dict):
            return {
                command: transform_path(path, bin_options)
                for command, path in bin_field.items()
                if isinstance(path, str)
            }
        return bin_field

    def transform_types_versions(self, types_versions: Any) -> Any:
        """Transform every path listed in ``typesVersions``."""
        if not isinstance(types_versions, dict):
            return types_versions

        transformed: dict[str, Any] = {}
        for version_range, path_map in types_versions.items():
            if not isinstance(path_map, dict):
                transformed[version_range] = path_map
                continue
            transformed[version_range] = {
                pattern: [self.transform_path(p) if isinstance(p, str) else p for p in paths]
                if isinstance(paths, list)
                else paths
                for pattern, paths in path_map.items()
            }
        return transformed

    @staticmethod
    def transform_files(files: Any) -> Any:
        """Transform the ``files`` list; static assets land in the output root.

        Example:
            >>> ExportRewriter.transform_files(["./public/index.js", "dist/"])
            ['index.js', 'dist/']
        """
        if not isinstance(files, list):
            return files

        result = []
        for entry in files:
            if not isinstance(entry, str):
                result.append(entry)
                continue
            transformed = entry[2:] if entry.startswith("./") else entry
            if transformed.startswith(STATIC_ASSET_DIR):
                transformed = transformed[len(STATIC_ASSET_DIR) :]
            result.append(transformed)
        return result
