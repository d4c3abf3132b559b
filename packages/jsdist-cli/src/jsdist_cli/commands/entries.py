# SPDX-License-Identifier: MIT
"""Show the build entries of a package."""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Optional

import click

from jsdist_build import BuildConfigError, BuildRun
from jsdist_manifest import ManifestError, entries_to_output_paths

from ..config import ConfigError
from ..main import Context, echo_error, echo_info, pass_context


@click.command()
@click.option(
    "--exports-as-indexes/--no-exports-as-indexes",
    default=None,
    help="Name nested exports '<path>/index' (defaults to jsdist.toml).",
)
@click.option(
    "--outputs",
    is_flag=True,
    help="Show output module paths instead of source paths.",
)
@pass_context
def entries(ctx: Context, exports_as_indexes: Optional[bool], outputs: bool) -> None:
    """Show the TypeScript entries found in package.json.

    Prints the entry table as JSON. With the nested index layout, the export
    override table is printed alongside it.

    \b
    Examples:
        jsdist entries
        jsdist entries --outputs
        jsdist entries --exports-as-indexes
    """
    try:
        cli_config = ctx.load_config()
    except (ConfigError, FileNotFoundError) as e:
        echo_error(str(e))
        raise SystemExit(1)

    build_config = cli_config.build
    if exports_as_indexes is not None:
        try:
            build_config = replace(build_config, exports_as_indexes=exports_as_indexes)
        except BuildConfigError as e:
            echo_error(f"Configuration error: {e}")
            raise SystemExit(1)

    run = BuildRun(cli_config.project_dir, build_config)
    try:
        plan = run.configure()
    except (ManifestError, FileNotFoundError) as e:
        echo_error(str(e))
        raise SystemExit(1)

    table = entries_to_output_paths(plan.entries, build_config.format) if outputs else plan.entries
    if build_config.exports_as_indexes:
        echo_info(json.dumps({"entries": table, "exports": plan.export_output_map}, indent=2))
    else:
        echo_info(json.dumps(table, indent=2))
