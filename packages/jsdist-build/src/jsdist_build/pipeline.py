# SPDX-License-Identifier: MIT
"""Build run pipeline producing one output manifest per target.

A build run reads the project's package.json once, derives the entry table
and export override table from it, and then assembles and writes the
manifest of every configured target:

    <project>/
        package.json
        jsdist.toml          (optional)
        dist/
            dev/package.json
            npm/package.json

Example:
    >>> from jsdist_build import BuildRun
    >>>
    >>> run = BuildRun("packages/my-lib")
    >>> results = run.run(assets=["index.js", "index.d.ts"])
    >>> [result.path for result in results]
    [PosixPath('packages/my-lib/dist/dev/package.json'), PosixPath('packages/my-lib/dist/npm/package.json')]
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import structlog

from jsdist_catalog import WorkspaceCatalog
from jsdist_manifest import (
    FORMAT_CJS,
    ManifestError,
    build_export_output_map,
    entries_to_output_paths,
    extract_entries,
    validate_manifest,
)

from .config import BuildConfig
from .transformer import build_package_json

logger = structlog.get_logger(__name__)

MANIFEST_FILENAME = "package.json"

# Project files published with every build when present
ESSENTIAL_FILES = (MANIFEST_FILENAME, "README.md", "LICENSE")

SOURCE_MAP_SUFFIX = ".map"

TargetTransform = Callable[[str, dict[str, Any]], Optional[dict[str, Any]]]


@dataclass
class EntryPlan:
    """Entries derived from the source manifest.

    Attributes:
        entries: Entry name to TypeScript source path mapping
        export_output_map: Export key to output path (nested index layout only)
    """

    entries: dict[str, str] = field(default_factory=dict)
    export_output_map: dict[str, str] = field(default_factory=dict)


@dataclass
class TargetResult:
    """Result of building one target.

    Attributes:
        target: Target name
        path: Path of the written package.json
        manifest: The written manifest
    """

    target: str
    path: Path
    manifest: dict[str, Any]


def merge_files_array(
    files: Any,
    project_dir: str | Path,
    assets: Iterable[str] = (),
) -> Optional[list[str]]:
    """Merge the published ``files`` list with essential files and emitted assets.

    Args:
        files: Transformed ``files`` value of the manifest
        project_dir: Project directory checked for package.json, README.md and LICENSE
        assets: Names of the emitted build assets; source maps are skipped

    Returns:
        The sorted union, or None when nothing is published
    """
    project_path = Path(project_dir)
    merged: set[str] = set()
    if isinstance(files, list):
        merged.update(entry for entry in files if isinstance(entry, str))
    merged.update(name for name in ESSENTIAL_FILES if (project_path / name).is_file())
    merged.update(asset for asset in assets if not asset.endswith(SOURCE_MAP_SUFFIX))
    return sorted(merged) or None


class BuildRun:
    """A manifest build for one project.

    Args:
        project_dir: Directory containing package.json
        config: Build configuration (loaded from jsdist.toml when omitted)
        catalog: Catalog resolver shared by all targets of the run
        transform: Callback ``transform(target, manifest)`` applied after the
            standard transformations; may mutate in place and return None
    """

    def __init__(
        self,
        project_dir: str | Path,
        config: Optional[BuildConfig] = None,
        catalog: Optional[WorkspaceCatalog] = None,
        transform: Optional[TargetTransform] = None,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.config = config if config is not None else BuildConfig.load(self.project_dir)
        self.catalog = catalog or WorkspaceCatalog(start_dir=self.project_dir)
        self.transform = transform
        self._manifest: Optional[dict[str, Any]] = None
        self._plan: Optional[EntryPlan] = None

    @property
    def manifest_path(self) -> Path:
        return self.project_dir / MANIFEST_FILENAME

    def load_manifest(self) -> dict[str, Any]:
        """Read and validate the source package.json.

        Schema problems are logged as warnings; the build continues.

        Raises:
            FileNotFoundError: If package.json doesn't exist
            ManifestError: If package.json is not a JSON object
        """
        if self._manifest is not None:
            return self._manifest

        if not self.manifest_path.is_file():
            raise FileNotFoundError(f"{MANIFEST_FILENAME} not found: {self.manifest_path}")

        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON in {self.manifest_path}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestError(f"{self.manifest_path} must contain a JSON object")

        result = validate_manifest(data)
        for error in result.errors:
            logger.warning("Manifest validation", field=error.field, problem=error.message)

        self._manifest = data
        return data

    def configure(self) -> EntryPlan:
        """Extract build entries and the export override table."""
        if self._plan is not None:
            return self._plan

        log = logger.bind(category="auto-entry")
        manifest = self.load_manifest()
        entries = extract_entries(manifest, exports_as_indexes=self.config.exports_as_indexes).entries

        export_output_map: dict[str, str] = {}
        if self.config.exports_as_indexes:
            export_output_map = build_export_output_map(manifest, entries, self.config.format)

        if entries:
            log.info(f"Found {len(entries)} entries")
            for name, source in entries.items():
                log.debug(f"  {name} => {source}")
        else:
            log.warning("No TypeScript entries found in exports or bin")

        self._plan = EntryPlan(entries=entries, export_output_map=export_output_map)
        return self._plan

    def assemble(self, target: str, assets: Iterable[str] = ()) -> dict[str, Any]:
        """Build the output manifest of a target without writing it.

        Raises:
            BuildConfigError: If the target is unknown
            CatalogError: If reference resolution fails for a production target
            ExportMappingError: If the export override table maps a key to nothing
        """
        options = self.config.target_options(target)
        plan = self.configure()
        log = logger.bind(category=target)

        # Targets publishing TypeScript sources never point at bundle outputs
        entrypoints = None
        export_output_map = None
        if self.config.bundle and options.process_ts_exports:
            entrypoints = entries_to_output_paths(plan.entries, self.config.format)
            export_output_map = plan.export_output_map

        def finalize(pkg: dict[str, Any]) -> Optional[dict[str, Any]]:
            if self.config.format == FORMAT_CJS:
                pkg["type"] = "commonjs"
            if self.transform is None:
                return pkg
            transformed = self.transform(target, pkg)
            return pkg if transformed is None else transformed

        manifest = build_package_json(
            self.load_manifest(),
            options.is_production,
            options.process_ts_exports,
            entrypoints,
            export_output_map,
            self.config.bundle,
            finalize,
            output_format=self.config.format,
            exports_as_indexes=self.config.exports_as_indexes,
            catalog=self.catalog,
            directory=str(self.project_dir),
        )

        if options.force_private:
            manifest["private"] = True
        if options.name:
            manifest["name"] = options.name

        previous = set(manifest.get("files") or [])
        files = merge_files_array(manifest.get("files"), self.project_dir, assets)
        if files is None:
            manifest.pop("files", None)
        else:
            added = [name for name in files if name not in previous]
            if added:
                log.info("added to files array", files=added)
            manifest["files"] = files

        return manifest

    def write(self, target: str, manifest: dict[str, Any]) -> Path:
        """Write a target manifest to ``<output_dir>/<target>/package.json``."""
        output_dir = self.config.target_output_dir(self.project_dir, target)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / MANIFEST_FILENAME
        path.write_text(json.dumps(manifest, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.bind(category=target).info(f"Wrote {path}")
        return path

    def run(
        self,
        assets: Iterable[str] = (),
        targets: Optional[Iterable[str]] = None,
    ) -> list[TargetResult]:
        """Assemble and write every target.

        Args:
            assets: Names of the emitted build assets
            targets: Targets to build (defaults to the configured targets)

        Returns:
            One TargetResult per target, in build order
        """
        asset_names = list(assets)
        results: list[TargetResult] = []
        for target in targets if targets is not None else self.config.targets:
            manifest = self.assemble(target, asset_names)
            path = self.write(target, manifest)
            results.append(TargetResult(target=target, path=path, manifest=manifest))
        return results
