"""
CLI commands for single buntages.

Thin wrappers over ``ultrabunt.core.services.buntage_install``.
"""

from __future__ import annotations

import json
import sys

import click

from ultrabunt.ui.cli.output import report


@click.group()
def buntages() -> None:
    """Buntages — list, inspect, install, remove, update."""


# ── Observe ─────────────────────────────────────────────────────


@buntages.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def categories(as_json: bool) -> None:
    """List categories with installed counts."""
    from ultrabunt.core.services.buntage_install import (
        buntages_in_category,
        get_cache,
        is_installed,
        list_categories,
    )

    cache = get_cache()
    rows = []
    for cat in list_categories():
        members = buntages_in_category(cat.id)
        installed = sum(1 for b in members if is_installed(b, cache))
        rows.append({"id": cat.id, "label": cat.label, "installed": installed, "total": len(members)})

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    click.secho("📂 Categories:", fg="cyan", bold=True)
    for row in rows:
        click.echo(f"   {row['id']:<15} {row['label']:<30} [{row['installed']}/{row['total']} installed]")
    click.echo()


@buntages.command("list")
@click.argument("category", required=False)
@click.option("--installed", "only_installed", is_flag=True, help="Only installed buntages.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_buntages(category: str | None, only_installed: bool, as_json: bool) -> None:
    """List buntages, optionally of one CATEGORY."""
    from ultrabunt.core.services.buntage_install import (
        buntages_in_category,
        get_cache,
        get_catalog,
        get_category,
        is_installed,
    )

    if category is not None:
        if get_category(category) is None:
            click.secho(f"❌ Unknown category: {category}", fg="red")
            sys.exit(1)
        members = buntages_in_category(category)
    else:
        members = sorted(get_catalog().values(), key=lambda b: b.name)

    cache = get_cache()
    rows = [
        {
            "name": b.name,
            "category": b.category,
            "method": b.method.value,
            "installed": is_installed(b, cache),
            "description": b.description,
        }
        for b in members
    ]
    if only_installed:
        rows = [r for r in rows if r["installed"]]

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.secho("⚠️  No buntages found", fg="yellow")
        return
    for r in rows:
        mark = click.style("✓", fg="green") if r["installed"] else click.style("✗", fg="red")
        click.echo(f"   {mark} {r['name']:<24} {r['method']:<8} {r['description']}")
    click.echo()


@buntages.command()
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def info(name: str, as_json: bool) -> None:
    """Show details of one buntage."""
    from ultrabunt.core.services.buntage_install import (
        UnknownBuntageError,
        get_buntage,
        get_package_details,
    )

    try:
        details = get_package_details(get_buntage(name))
    except UnknownBuntageError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(details, indent=2))
        return

    click.secho(f"📦 {details['name']}", fg="cyan", bold=True)
    click.echo(f"   {details['description']}")
    click.echo(f"   Package:  {details['package']}")
    click.echo(f"   Method:   {details['method']}")
    click.echo(f"   Category: {details['category']}")
    if details["deps"]:
        click.echo(f"   Requires: {', '.join(details['deps'])}")
    if details["installed"]:
        click.secho("   Status:   installed", fg="green")
        if details["version"]:
            click.echo(f"   Version:  {details['version']}")
        for line in details["extra"]:
            click.echo(f"   {line}")
    else:
        click.secho("   Status:   not installed", fg="yellow")
    click.echo()


@buntages.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def status(names: tuple[str, ...], as_json: bool) -> None:
    """Show whether each of NAMES is installed."""
    from ultrabunt.core.services.buntage_install import (
        UnknownBuntageError,
        get_buntage,
        get_cache,
        is_installed,
    )

    cache = get_cache()
    result: dict[str, bool | None] = {}
    for name in names:
        try:
            result[name] = is_installed(get_buntage(name), cache)
        except UnknownBuntageError:
            result[name] = None

    if as_json:
        click.echo(json.dumps(result, indent=2))
    else:
        for name, installed in result.items():
            if installed is None:
                click.secho(f"   ❔ {name}: unknown buntage", fg="red")
            elif installed:
                click.secho(f"   ✓ {name}: installed", fg="green")
            else:
                click.secho(f"   ✗ {name}: not installed", fg="yellow")

    if any(v is None for v in result.values()):
        sys.exit(1)


# ── Act ─────────────────────────────────────────────────────────


@buntages.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--with-deps", is_flag=True, help="Install missing dependencies first.")
def install(names: tuple[str, ...], with_deps: bool) -> None:
    """Install one or more buntages."""
    from ultrabunt.core.services.buntage_install import install_buntage

    ok = True
    for name in names:
        click.secho(f"📦 Installing {name}...", fg="cyan")
        result = install_buntage(name, with_deps=with_deps)
        if result.get("installed_deps"):
            click.echo(f"   Dependencies installed: {', '.join(result['installed_deps'])}")
        ok = report(result) and ok
        if result.get("missing_deps"):
            click.echo(f"   Re-run with --with-deps to install {', '.join(result['missing_deps'])}")
    if not ok:
        sys.exit(1)


@buntages.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--purge", is_flag=True, help="Also delete configuration and user data.")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
def remove(names: tuple[str, ...], purge: bool, yes: bool) -> None:
    """Remove one or more buntages."""
    from ultrabunt.core.services.buntage_install import remove_buntage

    if not yes:
        click.confirm(f"Remove {', '.join(names)}?", abort=True)

    ok = True
    for name in names:
        click.secho(f"🗑️  Removing {name}...", fg="cyan")
        result = remove_buntage(name, purge_data=purge)
        ok = report(result) and ok
        if result.get("dependents"):
            click.secho(f"   ⚠️  Still needed by: {', '.join(result['dependents'])}", fg="yellow")
    if not ok:
        sys.exit(1)


@buntages.command()
@click.argument("name")
def reinstall(name: str) -> None:
    """Remove and install NAME again."""
    from ultrabunt.core.services.buntage_install import reinstall_buntage

    click.secho(f"🔄 Reinstalling {name}...", fg="cyan")
    if not report(reinstall_buntage(name)):
        sys.exit(1)


@buntages.command()
@click.argument("names", nargs=-1, required=True)
def update(names: tuple[str, ...]) -> None:
    """Update installed buntages to their newest version."""
    from ultrabunt.core.services.buntage_install import update_buntage

    ok = True
    for name in names:
        click.secho(f"⬆️  Updating {name}...", fg="cyan")
        ok = report(update_buntage(name)) and ok
    if not ok:
        sys.exit(1)
