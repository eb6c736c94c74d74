"""
CLI commands for session logs and the audit history.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


@click.group()
def logs() -> None:
    """Logs — session log files and operation history."""


@logs.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_logs(as_json: bool) -> None:
    """List session log files, newest first."""
    from ultrabunt.core.services.log_ops import list_log_files

    files = list_log_files()
    if as_json:
        click.echo(json.dumps([str(p) for p in files], indent=2))
        return
    if not files:
        click.secho("⚠️  No log files found", fg="yellow")
        return
    for path in files:
        click.echo(f"   {path}  ({path.stat().st_size} bytes)")


@logs.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@click.option("--lines", "-n", default=50, show_default=True, help="Number of lines.")
def show(path: str | None, lines: int) -> None:
    """Show the end of the newest (or the given) log file."""
    from ultrabunt.core.services.log_ops import tail_log

    result = tail_log(Path(path) if path else None, lines=lines)
    if not result["ok"]:
        click.secho(f"❌ {result['error']}", fg="red")
        sys.exit(1)
    click.secho(f"📄 {result['path']}", fg="cyan", bold=True)
    for line in result["lines"]:
        click.echo(line)


@logs.command()
@click.option("--limit", "-n", default=20, show_default=True, help="Number of entries.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def history(limit: int, as_json: bool) -> None:
    """Show recent install/remove/update operations."""
    from ultrabunt.core.services.log_ops import audit_history

    entries = audit_history(limit)
    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return
    if not entries:
        click.secho("⚠️  No operations recorded yet", fg="yellow")
        return
    colors = {"ok": "green", "failed": "red", "dry-run": "yellow"}
    for e in entries:
        stamp = e.timestamp[:19].replace("T", " ")
        click.echo(f"   {stamp}  {e.operation:<16} {e.target:<24} ", nl=False)
        click.secho(e.status, fg=colors.get(e.status, "white"))
        if e.error:
            click.echo(f"      {e.error}")
