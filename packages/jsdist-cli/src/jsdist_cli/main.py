# SPDX-License-Identifier: MIT
"""CLI entry point for jsdist command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from jsdist_build import BuildConfigError
from jsdist_catalog import CatalogError
from jsdist_manifest import ManifestError

from .config import CLIConfig, ConfigError, load_config
from .logging import configure_logging


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[CLIConfig] = None
        self.verbose: bool = False
        self.project_dir: Optional[Path] = None

    def load_config(self) -> CLIConfig:
        """Load configuration, caching the result."""
        if self.config is None:
            self.config = load_config(self.project_dir)
        return self.config


pass_context = click.make_pass_decorator(Context, ensure=True)


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.secho(message, fg="green")


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(message)


@click.group()
@click.version_option(package_name="jsdist-packaging-tools")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Change to directory before running command.",
)
@click.option(
    "--log-json",
    is_flag=True,
    help="Emit log records as JSON lines.",
)
@pass_context
def cli(ctx: Context, verbose: bool, directory: Optional[Path], log_json: bool) -> None:
    """Package manifest build tool.

    Turn a source package.json into the package.json published with a
    TypeScript library build.

    \b
    Examples:
        jsdist entries
        jsdist build
        jsdist build -t npm --asset index.js --asset index.d.ts
        jsdist catalog
    """
    ctx.verbose = verbose
    ctx.project_dir = directory
    configure_logging("INFO" if verbose else "WARNING", json_output=log_json)


# Import and register commands
from .commands import build, catalog, entries

cli.add_command(entries.entries)
cli.add_command(build.build)
cli.add_command(catalog.catalog)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except (ConfigError, BuildConfigError, ManifestError, CatalogError) as e:
        echo_error(str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        echo_error(str(e))
        sys.exit(1)
    except Exception as e:
        echo_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
