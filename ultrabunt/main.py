"""
Ultrabunt — CLI entrypoint.

Usage:
    ultrabunt                      # interactive menu
    ultrabunt buntages list dev
    ultrabunt --dry-run bulk install-category core
    python -m ultrabunt.main --help
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from ultrabunt import __version__
from ultrabunt.core.observability.logging_config import (
    debug_enabled,
    session_log_path,
    setup_logging,
)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="ultrabunt")
@click.option("--verbose", "-v", is_flag=True, help="Show progress on the console.")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors on the console.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to ultrabunt.yml (default: auto-detect).",
)
@click.option("--dry-run", is_flag=True, help="Print what would run without changing anything.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    dry_run: bool,
) -> None:
    """Ultrabunt — Ubuntu buntage manager.

    Without a command the interactive menu starts.
    """
    from ultrabunt.core import context
    from ultrabunt.core.config.loader import ConfigError, load_settings

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    from ultrabunt.core.services.buntage_install import get_catalog

    try:
        settings = load_settings(ctx.obj["config_path"])
        context.set_settings(settings)
        # extra_buntages are only validated when the catalog is built
        get_catalog()
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    context.set_dry_run(dry_run)

    # ── Logging setup (once, at process start) ──────────────────
    debug = debug or debug_enabled()
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("ULTRABUNT_LOG_LEVEL", "WARNING")

    log_file = os.environ.get("ULTRABUNT_LOG_FILE") or session_log_path(settings.log_path)
    opened = setup_logging(
        level=level,
        log_file=log_file,
        quiet_third_party=not debug,
    )
    context.set_log_file(opened)
    ctx.obj["debug"] = debug

    if dry_run and not quiet:
        click.secho("🧪 Dry run: nothing will be changed", fg="yellow", err=True)

    if ctx.invoked_subcommand is None:
        from ultrabunt.ui.cli.menu import run_menu

        run_menu()


# ── Register sub-command groups from ultrabunt/ui/cli/ ──────────

from ultrabunt.ui.cli.buntages import buntages  # noqa: E402
from ultrabunt.ui.cli.bulk import bulk  # noqa: E402
from ultrabunt.ui.cli.system import system  # noqa: E402
from ultrabunt.ui.cli.mirrors import mirrors  # noqa: E402
from ultrabunt.ui.cli.keyboard import keyboard  # noqa: E402
from ultrabunt.ui.cli.wordpress import wordpress  # noqa: E402
from ultrabunt.ui.cli.logs import logs  # noqa: E402
from ultrabunt.ui.cli.shell import shell  # noqa: E402

cli.add_command(buntages)
cli.add_command(bulk)
cli.add_command(system)
cli.add_command(mirrors)
cli.add_command(keyboard)
cli.add_command(wordpress)
cli.add_command(logs)
cli.add_command(shell)


if __name__ == "__main__":
    cli()
