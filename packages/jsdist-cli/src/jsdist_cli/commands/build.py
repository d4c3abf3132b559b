# SPDX-License-Identifier: MIT
"""Build output package.json files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click

from jsdist_build import VALID_TARGETS, BuildConfigError, BuildRun
from jsdist_catalog import CatalogError
from jsdist_manifest import ManifestError

from ..config import ConfigError
from ..main import Context, echo_error, echo_info, echo_success, pass_context


@click.command()
@click.option(
    "--target",
    "-t",
    "targets",
    multiple=True,
    type=click.Choice(VALID_TARGETS),
    help="Target to build (repeatable, defaults to jsdist.toml targets).",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path),
    help="Output root; each target is written to <output-dir>/<target>.",
)
@click.option(
    "--asset",
    "assets",
    multiple=True,
    help="Emitted asset name to list in the files array (repeatable).",
)
@pass_context
def build(
    ctx: Context,
    targets: tuple[str, ...],
    output_dir: Optional[Path],
    assets: tuple[str, ...],
) -> None:
    """Build the published package.json for each target.

    Production targets (npm, jsr) resolve catalog: and workspace: dependency
    references from the pnpm workspace. The dev target keeps them and is
    always private.

    \b
    Examples:
        jsdist build                         # Build configured targets
        jsdist build -t npm                  # Build the npm target only
        jsdist build -o ./out                # Output to custom directory
        jsdist build --asset index.js        # List an emitted asset
    """
    try:
        cli_config = ctx.load_config()
    except (ConfigError, FileNotFoundError) as e:
        echo_error(str(e))
        raise SystemExit(1)

    build_config = cli_config.build
    if output_dir is not None:
        build_config.output_dir = output_dir

    run = BuildRun(cli_config.project_dir, build_config)

    try:
        run.load_manifest()
    except (ManifestError, FileNotFoundError) as e:
        echo_error(str(e))
        raise SystemExit(1)

    echo_info(f"Building from: {run.manifest_path}")

    selected = list(targets) or build_config.targets
    try:
        results = run.run(assets=assets, targets=selected)
    except BuildConfigError as e:
        echo_error(f"Configuration error: {e}")
        raise SystemExit(1)
    except (CatalogError, ManifestError) as e:
        echo_error(str(e))
        raise SystemExit(1)

    for result in results:
        echo_success(f"  {result.target}: {result.path}")
        if ctx.verbose:
            echo_info(json.dumps(result.manifest, indent=2))

    echo_success(f"\nBuild complete! {len(results)} manifest(s) written.")
