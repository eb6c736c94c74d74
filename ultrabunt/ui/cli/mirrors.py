"""
CLI commands for APT mirror selection.

Thin wrappers over ``ultrabunt.core.services.mirror_ops``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from ultrabunt.ui.cli.output import report


@click.group()
def mirrors() -> None:
    """Mirrors — show, rank, switch and restore the APT mirror."""


@mirrors.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def current(as_json: bool) -> None:
    """Show the mirror currently in use."""
    from ultrabunt.core.services.mirror_ops import find_sources_file, read_current_mirror

    path = find_sources_file()
    url = read_current_mirror(path) if path else None
    if as_json:
        click.echo(json.dumps({"url": url, "path": str(path) if path else None}, indent=2))
        return
    if url is None:
        click.secho("⚠️  No APT archive mirror found", fg="yellow")
        sys.exit(1)
    click.secho(f"🌐 {url}", fg="cyan", bold=True)
    click.echo(f"   from {path}")


@mirrors.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def rank(as_json: bool) -> None:
    """Measure every configured mirror, fastest first."""
    from ultrabunt.core.services.mirror_ops import rank_mirrors

    if not as_json:
        click.secho("⏱️  Testing mirror speeds...", fg="cyan")
    ranked = rank_mirrors()
    if as_json:
        click.echo(json.dumps(ranked, indent=2))
        return
    for i, m in enumerate(ranked, start=1):
        if m["latency_ms"] is None:
            click.secho(f"   {i}. {m['url']:<50} unreachable", fg="red")
        else:
            click.echo(f"   {i}. {m['url']:<50} {m['latency_ms']} ms")
    click.echo()


@mirrors.command()
@click.argument("url", required=False)
@click.option("--fastest", is_flag=True, help="Pick the fastest reachable mirror.")
@click.option("--no-update", is_flag=True, help="Skip apt-get update afterwards.")
def select(url: str | None, fastest: bool, no_update: bool) -> None:
    """Switch the archive mirror to URL (or the fastest one)."""
    from ultrabunt.core.services.mirror_ops import rank_mirrors, select_mirror

    if url is None:
        if not fastest:
            click.secho("❌ Give a mirror URL or --fastest", fg="red")
            sys.exit(1)
        reachable = [m for m in rank_mirrors() if m["latency_ms"] is not None]
        if not reachable:
            click.secho("❌ No mirror is reachable", fg="red")
            sys.exit(1)
        url = reachable[0]["url"]
        click.echo(f"   Fastest: {url} ({reachable[0]['latency_ms']} ms)")

    result = select_mirror(url, update=not no_update)
    if not report(result):
        sys.exit(1)
    if result.get("backup"):
        click.echo(f"   Backup: {result['backup']}")


@mirrors.command()
@click.argument("backup", required=False, type=click.Path(dir_okay=False))
@click.option("--list", "list_only", is_flag=True, help="List available backups.")
@click.option("--no-update", is_flag=True, help="Skip apt-get update afterwards.")
def restore(backup: str | None, list_only: bool, no_update: bool) -> None:
    """Restore the newest (or the given) sources backup."""
    from ultrabunt.core.services.mirror_ops import list_backups, restore_mirror

    if list_only:
        backups = list_backups()
        if not backups:
            click.secho("⚠️  No mirror backups found", fg="yellow")
            return
        for path in backups:
            click.echo(f"   {path}")
        return

    result = restore_mirror(Path(backup) if backup else None, update=not no_update)
    if not report(result):
        sys.exit(1)
