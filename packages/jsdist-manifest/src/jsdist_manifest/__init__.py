# SPDX-License-Identifier: MIT
"""Entry extraction and build-output rewriting for package.json manifests.

This package provides the pure transformation layer of the manifest build:
- Build entry extraction from exports and bin fields
- Source-tree to build-output path conversion
- Recursive exports rewriting with declaration conditions
- Deterministic key ordering and structural validation

Example:
    >>> from jsdist_manifest import ExportRewriter, extract_entries
    >>>
    >>> manifest = {"exports": {"./utils": "./src/utils.ts"}}
    >>> extract_entries(manifest).entries
    {'utils': './src/utils.ts'}
    >>> ExportRewriter().transform_exports(manifest["exports"])
    {'./utils': {'types': './utils.d.ts', 'import': './utils.js'}}
"""

__version__ = "0.1.0"

from .entries import (
    BIN_ENTRY_PREFIX,
    DEFAULT_BIN_ENTRY,
    ROOT_ENTRY_NAME,
    EntryExtractor,
    ExtractedEntries,
    build_export_output_map,
    entries_to_output_paths,
    extract_entries,
    resolve_to_source,
)
from .exports import (
    ConditionNode,
    ExportMappingError,
    ExportNode,
    ExportRewriter,
    FallbackNode,
    OpaqueNode,
    PathNode,
    SubpathNode,
    is_conditions_object,
    parse_export_node,
    render_export_node,
)
from .paths import (
    DEFAULT_PATH_OPTIONS,
    PathOptions,
    derive_type_path,
    is_declaration_file,
    is_source_module,
    strip_source_root,
    transform_path,
)
from .schema import (
    CATALOG_PREFIX,
    CONDITION_KEYS,
    DEPENDENCY_FIELDS,
    FORMAT_CJS,
    FORMAT_ESM,
    MANIFEST_SCHEMA,
    OUTPUT_FORMATS,
    REFERENCE_PREFIXES,
    WORKSPACE_PREFIX,
    get_manifest_schema,
)
from .sorting import sort_conditions, sort_manifest
from .validator import (
    ManifestError,
    ManifestValidationError,
    ValidationErrorDetail,
    ValidationResult,
    validate_manifest,
    validate_manifest_strict,
)

__all__ = [
    # Schema
    "CATALOG_PREFIX",
    "WORKSPACE_PREFIX",
    "REFERENCE_PREFIXES",
    "DEPENDENCY_FIELDS",
    "CONDITION_KEYS",
    "FORMAT_ESM",
    "FORMAT_CJS",
    "OUTPUT_FORMATS",
    "MANIFEST_SCHEMA",
    "get_manifest_schema",
    # Entries
    "BIN_ENTRY_PREFIX",
    "DEFAULT_BIN_ENTRY",
    "ROOT_ENTRY_NAME",
    "EntryExtractor",
    "ExtractedEntries",
    "extract_entries",
    "entries_to_output_paths",
    "build_export_output_map",
    "resolve_to_source",
    # Paths
    "DEFAULT_PATH_OPTIONS",
    "PathOptions",
    "transform_path",
    "derive_type_path",
    "strip_source_root",
    "is_source_module",
    "is_declaration_file",
    # Exports
    "ExportRewriter",
    "ExportMappingError",
    "ExportNode",
    "PathNode",
    "FallbackNode",
    "ConditionNode",
    "SubpathNode",
    "OpaqueNode",
    "parse_export_node",
    "render_export_node",
    "is_conditions_object",
    # Sorting
    "sort_manifest",
    "sort_conditions",
    # Validation
    "validate_manifest",
    "validate_manifest_strict",
    "ValidationResult",
    "ValidationErrorDetail",
    "ManifestError",
    "ManifestValidationError",
]
