# SPDX-License-Identifier: MIT
"""Constants and JSON Schema for package.json manifests.

This module defines the path conventions of the source tree and the build
output, the dependency reference prefixes understood by the catalog resolver,
and the schema used to sanity-check a source manifest before it is built.
"""

from __future__ import annotations

# Dependency reference prefixes (pnpm protocols)
CATALOG_PREFIX = "catalog:"
WORKSPACE_PREFIX = "workspace:"
REFERENCE_PREFIXES = (CATALOG_PREFIX, WORKSPACE_PREFIX)

# Manifest fields holding dependency name -> version maps
DEPENDENCY_FIELDS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)

# Keys that mark an export object as a condition object
CONDITION_KEYS = ("import", "require", "types", "default")

# Source modules and declarations
SOURCE_EXTENSIONS = (".ts", ".tsx")
DECLARATION_SUFFIX = ".d.ts"

# Source roots stripped from export paths, checked in order
SOURCE_ROOT_PREFIXES = ("./exports/", "./public/", "./src/")

# Static assets are copied to the root of the output directory
STATIC_ASSET_DIR = "public/"

# Compiled output directory mapped back to the source tree by entry extraction
COMPILED_DIR_SEGMENT = "/dist/"
SOURCE_DIR_SEGMENT = "/src/"
COMPILED_EXTENSION = ".js"

# Export keys that never produce build entries
MANIFEST_SELF_EXPORT = "./package.json"
ASSET_EXPORT_SUFFIX = ".json"

# Output module formats
FORMAT_ESM = "esm"
FORMAT_CJS = "cjs"
OUTPUT_FORMATS = (FORMAT_ESM, FORMAT_CJS)
OUTPUT_EXTENSIONS = {FORMAT_ESM: ".js", FORMAT_CJS: ".cjs"}
MODULE_CONDITIONS = {FORMAT_ESM: "import", FORMAT_CJS: "require"}

# Canonical key order of a published package.json
FIELD_ORDER = (
    "$schema",
    "name",
    "displayName",
    "version",
    "private",
    "description",
    "categories",
    "keywords",
    "homepage",
    "bugs",
    "repository",
    "funding",
    "license",
    "author",
    "maintainers",
    "contributors",
    "publisher",
    "sideEffects",
    "type",
    "imports",
    "exports",
    "main",
    "umd:main",
    "jsdelivr",
    "unpkg",
    "module",
    "source",
    "jsnext:main",
    "browser",
    "react-native",
    "types",
    "typesVersions",
    "typings",
    "style",
    "example",
    "assets",
    "bin",
    "man",
    "directories",
    "files",
    "workspaces",
    "binary",
    "scripts",
    "config",
    "resolutions",
    "dependencies",
    "devDependencies",
    "dependenciesMeta",
    "peerDependencies",
    "peerDependenciesMeta",
    "optionalDependencies",
    "bundledDependencies",
    "bundleDependencies",
    "packageManager",
    "engines",
    "engineStrict",
    "volta",
    "os",
    "cpu",
    "preferGlobal",
    "publishConfig",
    "pnpm",
)

_STRING_MAP = {"type": "object", "additionalProperties": {"type": "string"}}

# JSON Schema for the fields this toolkit reads from package.json
MANIFEST_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Package Manifest",
    "description": "Source-tree package.json consumed by the manifest build",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "version": {"type": "string"},
        "private": {"type": "boolean"},
        "type": {"type": "string", "enum": ["module", "commonjs"]},
        "exports": {"type": ["string", "array", "object", "null"]},
        "bin": {
            "anyOf": [
                {"type": "string"},
                _STRING_MAP,
            ],
        },
        "typesVersions": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": {"type": "array", "items": {"type": "string"}},
            },
        },
        "files": {"type": "array", "items": {"type": "string"}},
        "dependencies": _STRING_MAP,
        "devDependencies": _STRING_MAP,
        "peerDependencies": _STRING_MAP,
        "optionalDependencies": _STRING_MAP,
        "scripts": _STRING_MAP,
        "publishConfig": {
            "type": "object",
            "properties": {"access": {"type": "string", "enum": ["public", "restricted"]}},
        },
    },
    "additionalProperties": True,
}


def get_manifest_schema() -> dict:
    """Return a copy of the manifest JSON schema."""
    return MANIFEST_SCHEMA.copy()
