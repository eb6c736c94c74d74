"""
CLI commands for shell customization.
"""

from __future__ import annotations

import sys

import click

from ultrabunt.ui.cli.output import report


@click.group()
def shell() -> None:
    """Shell — Oh My Zsh and themes."""


@shell.command("oh-my-zsh")
def oh_my_zsh() -> None:
    """Install zsh, Oh My Zsh and the Powerlevel10k theme."""
    from ultrabunt.core.services.shell_ops import install_oh_my_zsh

    click.secho("🐚 Installing Oh My Zsh...", fg="cyan")
    if not report(install_oh_my_zsh()):
        sys.exit(1)
