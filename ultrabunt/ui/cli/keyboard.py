"""
CLI commands for keyboard layouts.
"""

from __future__ import annotations

import json
import sys

import click

from ultrabunt.core.services.keyboard_ops import LAYOUTS
from ultrabunt.ui.cli.output import report


@click.group()
def keyboard() -> None:
    """Keyboard — laptop layouts and shortcuts."""


@keyboard.command()
@click.argument("layout", type=click.Choice(list(LAYOUTS)))
def apply(layout: str) -> None:
    """Apply a laptop keyboard LAYOUT."""
    from ultrabunt.core.services.keyboard_ops import apply_layout

    click.secho(f"⌨️  {LAYOUTS[layout]['label']} layout:", fg="cyan", bold=True)
    for line in LAYOUTS[layout]["summary"]:
        click.echo(f"   • {line}")
    result = apply_layout(layout)
    if not report(result):
        sys.exit(1)
    if result.get("warnings"):
        click.secho(f"   ⚠️  Not applied now: {', '.join(result['warnings'])}", fg="yellow")


@keyboard.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def status(as_json: bool) -> None:
    """Show the current keyboard configuration."""
    from ultrabunt.core.services.keyboard_ops import keyboard_status

    result = keyboard_status()
    if as_json:
        click.echo(json.dumps(result, indent=2))
        return
    click.secho("⌨️  Keyboard configuration:", fg="cyan", bold=True)
    click.echo(f"   XKB options:         {result['xkb_options']}")
    click.echo(f"   Switch applications: {result['switch_applications']}")
    click.echo(f"   Switch windows:      {result['switch_windows']}")
    mapping = "active" if result["autostart_mapping"] else "not configured"
    click.echo(f"   Autostart mapping:   {mapping}")


@keyboard.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
def reset(yes: bool) -> None:
    """Reset keyboard settings to the Ubuntu defaults."""
    from ultrabunt.core.services.keyboard_ops import reset_keyboard

    if not yes:
        click.confirm("Reset keyboard settings to defaults?", abort=True)
    if not report(reset_keyboard()):
        sys.exit(1)
