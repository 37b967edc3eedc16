"""
extdl — CLI entrypoint.

Usage:
    python -m src.main --help
    python -m src.main dl foobar
    python -m src.main ext list --remote
    python -m src.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from src.core.observability.logging_config import resolve_level, setup_logging

from src import __version__


@click.group()
@click.version_option(version=__version__, prog_name="extdl")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to extdl.yml (default: auto-detect).",
)
@click.option("--mock", is_flag=True, help="Use the mock backend (no network or disk).")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    mock: bool,
) -> None:
    """extdl — download and enable extensions from a remote catalog."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["mock"] = mock
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug, verbose, quiet, os.environ.get("EXTDL_LOG_LEVEL")),
        log_file=os.environ.get("EXTDL_LOG_FILE"),
        log_file_level=os.environ.get("EXTDL_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate extdl.yml configuration."""
    from src.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.settings is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Feed:       {result.settings.feed_url}")
        click.echo(f"   Extensions: {result.settings.extensions_dir}")
        click.echo(f"   State:      {result.settings.state_dir}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


# ── Register sub-command groups from src/ui/cli/ ──────────────────

from src.ui.cli.ext import download, ext

cli.add_command(ext)
cli.add_command(download, name="dl")


if __name__ == "__main__":
    cli()
