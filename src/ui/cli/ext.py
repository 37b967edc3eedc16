"""
CLI commands for extensions — download, enable, list.

Thin wrappers over ``src.core.use_cases.download`` and
``src.core.use_cases.catalog``.
"""

from __future__ import annotations

import json
import sys

import click

from src.adapters.base import ExtensionBackend


def _make_backend(ctx: click.Context, feed_url: str | None, dev: bool) -> ExtensionBackend:
    """Load settings and build the backend, exiting on config errors."""
    from src.adapters.factory import create_backend
    from src.core.config.loader import ConfigError, load_settings

    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    return create_backend(
        settings,
        feed_url=feed_url,
        dev=dev,
        mock_mode=ctx.obj.get("mock", False),
    )


def prompt_choice(message: str, options: dict[str, str], default: str) -> str | None:
    """Ask a multiple-choice question on the terminal."""
    click.echo()
    click.secho(message, fg="yellow", bold=True)
    for code, label in options.items():
        click.echo(f"  [{code}] {label}")
    try:
        return click.prompt(
            "Choice",
            type=click.Choice(list(options), case_sensitive=False),
            default=default,
            show_choices=False,
        )
    except click.Abort:
        return None


def _emitter(quiet: bool):
    styles = {
        "info": {"fg": "green"},
        "error": {"fg": "red", "err": True},
        "comment": {"fg": "yellow", "err": True},
    }

    def emit(level: str, message: str) -> None:
        if quiet and level == "info":
            return
        click.secho(message, **styles.get(level, {}))

    return emit


@click.group()
def ext() -> None:
    """Extensions — download, enable, and browse the catalog."""


# ── Download ────────────────────────────────────────────────────


@ext.command("download")
@click.argument("keys", nargs=-1, metavar="KEY-OR-NAME...")
@click.option(
    "--refresh", "-r", is_flag=True,
    help="Refresh the remote list of extensions (default: only refresh on cache-miss).",
)
@click.option("--no-install", is_flag=True, help="Only download. Skip the installation.")
@click.option("--force", "-f", is_flag=True, help="If an extension already exists, download it anyway.")
@click.option("--keep", "-k", is_flag=True, help="If an extension already exists, keep it.")
@click.option("--feed", "feed_url", default=None, help="Use this extension feed URL.")
@click.option("--dev", is_flag=True, help="Use the development feed.")
@click.pass_context
def download(
    ctx: click.Context,
    keys: tuple[str, ...],
    refresh: bool,
    no_install: bool,
    force: bool,
    keep: bool,
    feed_url: str | None,
    dev: bool,
) -> None:
    """Download and enable one or more extensions.

    Identify each extension by full key ("org.example.foobar") or short
    name ("foobar"). Optionally append "@URL" to download from an
    explicit location.

    Examples:

    \b
        extdl ext download org.example.foobar
        extdl dl foobar
        extdl dl --dev foobar
        extdl dl "org.example.foobar@http://example.org/files/foobar.zip"

    Short names are recommended to be unique, but this is not enforced;
    an ambiguous short name is reported with the matching keys.
    """
    from src.core.use_cases.download import DownloadOptions, RefreshMode, run_download

    backend = _make_backend(ctx, feed_url, dev)
    options = DownloadOptions(
        refresh=RefreshMode.YES if refresh else RefreshMode.AUTO,
        no_install=no_install,
        force=force,
        keep=keep,
    )

    result = run_download(
        list(keys),
        backend,
        options=options,
        prompt=prompt_choice,
        emit=_emitter(ctx.obj.get("quiet", False)),
        command_name="dl" if ctx.info_name == "dl" else "ext download",
    )

    if result.exit_code:
        sys.exit(result.exit_code)


# ── List ────────────────────────────────────────────────────────


@ext.command("list")
@click.option("--remote", "-R", is_flag=True, help="List extensions available in the feed.")
@click.option("--local", "-L", is_flag=True, help="List extensions installed locally.")
@click.option("--refresh", "-r", is_flag=True, help="Refresh before listing.")
@click.option("--feed", "feed_url", default=None, help="Use this extension feed URL.")
@click.option("--dev", is_flag=True, help="Use the development feed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_extensions(
    ctx: click.Context,
    remote: bool,
    local: bool,
    refresh: bool,
    feed_url: str | None,
    dev: bool,
    as_json: bool,
) -> None:
    """List extensions (both remote and local unless one is chosen)."""
    from src.core.use_cases.catalog import list_catalog

    if not remote and not local:
        remote = local = True

    backend = _make_backend(ctx, feed_url, dev)
    listing = list_catalog(backend, remote=remote, local=local, refresh=refresh)

    if as_json:
        click.echo(json.dumps(listing.to_dict(), indent=2))
        if listing.error:
            sys.exit(1)
        return

    if listing.error:
        click.secho(f"❌ {listing.error}", fg="red")
        sys.exit(1)

    if not listing.rows:
        click.secho("⚠️  No extensions found", fg="yellow")
        return

    click.secho(f"📦 Extensions ({len(listing.rows)}):", fg="cyan", bold=True)
    for row in listing.rows:
        marker = "✓" if row.installed else " "
        click.echo(f"   {marker} {row.key:<40} {row.short_name:<20} {row.version}")
    click.echo()
