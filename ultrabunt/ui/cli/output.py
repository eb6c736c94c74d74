"""
Shared console output for the CLI groups and the menu.
"""

from __future__ import annotations

import click


def report(result: dict) -> bool:
    """Print a service result dict.  Returns its ``ok`` flag."""
    if result["ok"]:
        if result.get("already_installed"):
            click.secho(f"ℹ️  {result['message']}", fg="cyan")
        else:
            click.secho(f"✅ {result.get('message', 'Done')}", fg="green")
        return True
    click.secho(f"❌ {result.get('error') or result.get('message', 'Failed')}", fg="red")
    if result.get("detail"):
        click.echo(f"   {result['detail']}")
    return False


def report_steps(result: dict) -> bool:
    """Print the per-step outcome of update-all / cleanup style results."""
    for step in result.get("steps", []):
        if step["ok"]:
            click.secho(f"   ✓ {step['label']}", fg="green")
        else:
            click.secho(f"   ✗ {step['label']}: {step['error']}", fg="red")
    return report(result)
