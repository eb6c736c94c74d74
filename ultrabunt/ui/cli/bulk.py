"""
CLI commands for bulk operations.

Thin wrappers over ``ultrabunt.core.services.buntage_install.orchestration``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from ultrabunt.ui.cli.output import report, report_steps


def _progress(name: str, index: int, total: int) -> None:
    click.secho(f"[{index}/{total}] {name}", fg="cyan")


def _summary(result: dict) -> None:
    for name, error in result.get("failed", {}).items():
        click.secho(f"   ✗ {name}: {error}", fg="red")
    if result["ok"]:
        click.secho(f"✅ {result['message']}", fg="green")
    else:
        click.secho(f"⚠️  {result['message']}", fg="yellow")


@click.group()
def bulk() -> None:
    """Bulk — category-wide install/remove, update everything, cleanup, export."""


@bulk.command("install-category")
@click.argument("category")
@click.option("--with-deps", is_flag=True, help="Install missing dependencies first.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def install_category(category: str, with_deps: bool, as_json: bool) -> None:
    """Install every buntage of CATEGORY that is not installed yet."""
    from ultrabunt.core.services.buntage_install import bulk_install_category

    result = bulk_install_category(category, with_deps=with_deps,
                                   progress=None if as_json else _progress)
    if as_json:
        click.echo(json.dumps(result, indent=2))
    elif "error" in result:
        report(result)
    else:
        _summary(result)
    if not result["ok"]:
        sys.exit(1)


@bulk.command("remove-category")
@click.argument("category")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def remove_category(category: str, yes: bool, as_json: bool) -> None:
    """Remove every installed buntage of CATEGORY."""
    from ultrabunt.core.services.buntage_install import bulk_remove_category

    if not yes:
        click.confirm(f"Remove ALL installed buntages in {category}?", abort=True)
        click.confirm("This cannot be undone. Really continue?", abort=True)

    result = bulk_remove_category(category, progress=None if as_json else _progress)
    if as_json:
        click.echo(json.dumps(result, indent=2))
    elif "error" in result:
        report(result)
    else:
        _summary(result)
    if not result["ok"]:
        sys.exit(1)


@bulk.command("install")
@click.argument("names", nargs=-1, required=True)
@click.option("--with-deps", is_flag=True, help="Install missing dependencies first.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def install_many(names: tuple[str, ...], with_deps: bool, as_json: bool) -> None:
    """Install the selected buntages, reporting a summary."""
    from ultrabunt.core.services.buntage_install import install_selected

    result = install_selected(list(names), with_deps=with_deps,
                              progress=None if as_json else _progress)
    if as_json:
        click.echo(json.dumps(result, indent=2))
    else:
        _summary(result)
    if not result["ok"]:
        sys.exit(1)


@bulk.command("remove")
@click.argument("names", nargs=-1, required=True)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def remove_many(names: tuple[str, ...], yes: bool, as_json: bool) -> None:
    """Remove the selected buntages, reporting a summary."""
    from ultrabunt.core.services.buntage_install import remove_selected

    if not yes:
        click.confirm(f"Remove {len(names)} buntage(s)?", abort=True)

    result = remove_selected(list(names), progress=None if as_json else _progress)
    if as_json:
        click.echo(json.dumps(result, indent=2))
    else:
        _summary(result)
    if not result["ok"]:
        sys.exit(1)


@bulk.command("update-all")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def update_all_cmd(as_json: bool) -> None:
    """Update apt packages, snaps and flatpaks."""
    from ultrabunt.core.services.buntage_install import update_all

    if not as_json:
        click.secho("⬆️  Updating all packages...", fg="cyan")
    result = update_all()
    if as_json:
        click.echo(json.dumps(result, indent=2))
    else:
        report_steps(result)
    if not result["ok"]:
        sys.exit(1)


@bulk.command("cleanup")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def cleanup_cmd(as_json: bool) -> None:
    """Remove unused packages, caches, old snap revisions and old journal entries."""
    from ultrabunt.core.services.buntage_install import cleanup

    if not as_json:
        click.secho("🧹 Cleaning up...", fg="cyan")
    result = cleanup()
    if as_json:
        click.echo(json.dumps(result, indent=2))
    else:
        report_steps(result)
    if not result["ok"]:
        sys.exit(1)


@bulk.command("export")
@click.option("--output", "-o", "output", type=click.Path(dir_okay=False), default=None,
              help="Destination file (default: timestamped file in /tmp).")
@click.option("--format", "fmt", type=click.Choice(["text", "json"]), default="text",
              show_default=True, help="Export format.")
def export(output: str | None, fmt: str) -> None:
    """Export the buntage list with installed state."""
    from ultrabunt.core.services.buntage_install import export_package_list

    result = export_package_list(Path(output) if output else None, fmt)
    if not report(result):
        sys.exit(1)
