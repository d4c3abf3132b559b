# SPDX-License-Identifier: MIT
"""Inspect the pnpm workspace catalog."""

from __future__ import annotations

import json

import click

from jsdist_build import BuildRun
from jsdist_catalog import WORKSPACE_FILE, CatalogError, WorkspaceCatalog
from jsdist_manifest import DEPENDENCY_FIELDS, ManifestError

from ..config import ConfigError
from ..main import Context, echo_error, echo_info, pass_context


@click.command()
@click.option(
    "--resolve",
    is_flag=True,
    help="Show the dependencies of package.json with references resolved.",
)
@pass_context
def catalog(ctx: Context, resolve: bool) -> None:
    """Show the workspace catalog as JSON.

    \b
    Examples:
        jsdist catalog
        jsdist catalog --resolve
    """
    workspace_catalog = WorkspaceCatalog(start_dir=ctx.project_dir)
    versions = workspace_catalog.get_catalog()
    if workspace_catalog.workspace_root is None:
        echo_error(f"Could not find {WORKSPACE_FILE} in this directory or any parent")
        raise SystemExit(1)

    if not resolve:
        echo_info(json.dumps(versions, indent=2, sort_keys=True))
        return

    try:
        cli_config = ctx.load_config()
        manifest = BuildRun(cli_config.project_dir, cli_config.build).load_manifest()
        resolved = workspace_catalog.resolve_package_json(manifest, cli_config.project_dir)
    except (ConfigError, ManifestError, CatalogError, FileNotFoundError) as e:
        echo_error(str(e))
        raise SystemExit(1)

    dependencies = {name: resolved[name] for name in DEPENDENCY_FIELDS if name in resolved}
    echo_info(json.dumps(dependencies, indent=2))
