"""
CLI commands for system information.
"""

from __future__ import annotations

import json

import click


@click.group()
def system() -> None:
    """System — OS, hardware, package managers, network."""


@system.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def info(as_json: bool) -> None:
    """Show the system information report."""
    from ultrabunt.core.services.system_info import collect_system_info, render_system_info

    result = collect_system_info()
    if as_json:
        click.echo(json.dumps(result, indent=2))
        return
    click.echo(render_system_info(result))
