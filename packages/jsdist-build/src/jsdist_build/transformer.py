# SPDX-License-Identifier: MIT
"""Transform a source package.json into the manifest of a build output.

Production-like builds first resolve catalog: and workspace: references, then
every build rewrites path-bearing fields for the output layout, drops fields
that must not be published, and sorts the result.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Mapping, Optional

from jsdist_catalog import WorkspaceCatalog
from jsdist_manifest import (
    FORMAT_ESM,
    ExportRewriter,
    PathOptions,
    sort_manifest,
)

CustomTransform = Callable[[dict[str, Any]], Optional[dict[str, Any]]]

# Fields removed from every published manifest (devDependencies stay)
UNPUBLISHED_FIELDS = ("publishConfig", "scripts")


def is_public(manifest: Mapping[str, Any]) -> bool:
    """Check if a manifest's publishConfig explicitly grants public access."""
    publish_config = manifest.get("publishConfig")
    return isinstance(publish_config, dict) and publish_config.get("access") == "public"


def apply_output_transformations(
    manifest: Mapping[str, Any],
    original: Mapping[str, Any],
    rewriter: ExportRewriter,
) -> dict[str, Any]:
    """Rewrite a manifest for the build output layout.

    Args:
        manifest: Manifest to rewrite (already reference-resolved for
            production builds)
        original: Source manifest; typesVersions, files and the publish
            access level are always taken from it
        rewriter: Path rewriter configured for the build

    Returns:
        The rewritten, key-sorted manifest
    """
    processed = {key: value for key, value in manifest.items() if key not in UNPUBLISHED_FIELDS}
    processed["private"] = not is_public(original)

    if processed.get("exports"):
        processed["exports"] = rewriter.transform_exports(processed["exports"])

    if processed.get("bin"):
        processed["bin"] = rewriter.transform_bin(processed["bin"])

    if original.get("typesVersions"):
        processed["typesVersions"] = rewriter.transform_types_versions(original["typesVersions"])

    if original.get("files"):
        processed["files"] = rewriter.transform_files(original["files"])

    return sort_manifest(processed)


def build_package_json(
    manifest: Mapping[str, Any],
    is_production: bool = False,
    process_ts_exports: bool = True,
    entrypoints: Optional[Mapping[str, str]] = None,
    export_output_map: Optional[Mapping[str, Optional[str]]] = None,
    bundle: bool = False,
    transform: Optional[CustomTransform] = None,
    *,
    output_format: str = FORMAT_ESM,
    exports_as_indexes: bool = False,
    catalog: Optional[WorkspaceCatalog] = None,
    directory: Optional[str] = None,
) -> dict[str, Any]:
    """Build the manifest of a build output from a source manifest.

    Args:
        manifest: Source package.json, not modified
        is_production: Resolve catalog: and workspace: references first
        process_ts_exports: Rewrite TypeScript sources and add declaration conditions
        entrypoints: Entry name to output path table
        export_output_map: Export key to exact output path table
        bundle: Bundled output (collapses index modules)
        transform: Callback applied last; its return value replaces the
            manifest, a None return keeps the (possibly mutated) manifest
        output_format: Output module format ("esm" or "cjs")
        exports_as_indexes: Entry names in ``entrypoints`` follow the nested
            index layout
        catalog: Catalog resolver for production builds (a fresh one is
            created for ``directory`` when omitted)
        directory: Directory containing the package

    Returns:
        The transformed package.json

    Raises:
        CatalogError: If reference resolution fails in a production build
        ExportMappingError: If the export override table maps a key to nothing
    """
    source = copy.deepcopy(dict(manifest))

    if is_production:
        resolver = catalog or WorkspaceCatalog(start_dir=directory)
        resolved = resolver.resolve_package_json(source, directory)
    else:
        # Development builds keep workspace links for local iteration
        resolved = source

    rewriter = ExportRewriter(
        options=PathOptions(
            process_ts_exports=process_ts_exports,
            collapse_index=bundle,
            format=output_format,
        ),
        entrypoints=entrypoints,
        export_output_map=export_output_map,
        exports_as_indexes=exports_as_indexes,
    )
    result = apply_output_transformations(resolved, source, rewriter)

    if transform is not None:
        transformed = transform(result)
        if transformed is not None:
            result = transformed

    return result


class ManifestAssembler:
    """Reusable manifest builder sharing one catalog resolver across builds.

    Args:
        catalog: Catalog resolver; owned by the caller so its cache can be
            shared or cleared explicitly
        directory: Directory containing the package
    """

    def __init__(
        self,
        catalog: Optional[WorkspaceCatalog] = None,
        directory: Optional[str] = None,
    ) -> None:
        self.directory = directory
        self.catalog = catalog or WorkspaceCatalog(start_dir=directory)

    def build(
        self,
        manifest: Mapping[str, Any],
        is_production: bool = False,
        process_ts_exports: bool = True,
        entrypoints: Optional[Mapping[str, str]] = None,
        export_output_map: Optional[Mapping[str, Optional[str]]] = None,
        bundle: bool = False,
        transform: Optional[CustomTransform] = None,
        output_format: str = FORMAT_ESM,
        exports_as_indexes: bool = False,
    ) -> dict[str, Any]:
        """Build an output manifest. See :func:`build_package_json`."""
        return build_package_json(
            manifest,
            is_production,
            process_ts_exports,
            entrypoints,
            export_output_map,
            bundle,
            transform,
            output_format=output_format,
            exports_as_indexes=exports_as_indexes,
            catalog=self.catalog,
            directory=self.directory,
        )
