"""
CLI commands for WordPress sites.

Thin wrappers over ``ultrabunt.core.services.wordpress``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from ultrabunt.core.services.wordpress import HARDENING_OPTIONS, WEB_SERVERS
from ultrabunt.ui.cli.output import report


def _yes_no(flag: bool) -> str:
    return click.style("yes", fg="green") if flag else click.style("no", fg="red")


@click.group()
def wordpress() -> None:
    """WordPress — set up, secure and manage sites."""


# ── Setup ───────────────────────────────────────────────────────


@wordpress.command()
@click.argument("domain", default="localhost")
@click.option("--server", "web_server", type=click.Choice(list(WEB_SERVERS)), default="nginx",
              show_default=True, help="Web server.")
@click.option("--site-dir", type=click.Path(file_okay=False), default=None,
              help="Install directory (default: <www root>/<domain>).")
@click.option("--db-name", default=None, help="Database name.")
@click.option("--db-user", default=None, help="Database user.")
@click.option("--db-password", default=None, help="Database password (default: generated).")
def setup(domain: str, web_server: str, site_dir: str | None, db_name: str | None,
          db_user: str | None, db_password: str | None) -> None:
    """Install the web stack and a WordPress site for DOMAIN.

    Without any of the site/database options this is the quick setup
    with generated names; with them it is the custom setup.
    """
    from ultrabunt.core.services.wordpress import custom_setup, quick_setup

    click.secho(f"🌐 Setting up WordPress for {domain} ({web_server})...", fg="cyan")
    if site_dir or db_name or db_user or db_password:
        result = custom_setup(
            web_server, domain,
            site_dir=Path(site_dir) if site_dir else None,
            db_name=db_name, db_user=db_user, db_password=db_password,
        )
    else:
        result = quick_setup(web_server, domain)

    if not report(result):
        sys.exit(1)
    click.echo(f"   Site directory: {result['site_dir']}")
    click.echo(f"   Database:       {result['db_name']} (user {result['db_user']})")
    click.secho(f"   🔑 Credentials saved to {result['credentials_file']}", fg="yellow")


@wordpress.command()
@click.argument("domain")
@click.option("--email", prompt="Email for Let's Encrypt", help="Contact email for the certificate.")
def ssl(domain: str, email: str) -> None:
    """Obtain a Let's Encrypt certificate for DOMAIN."""
    from ultrabunt.core.services.wordpress import setup_ssl

    click.secho(f"🔒 Requesting certificate for {domain}...", fg="cyan")
    if not report(setup_ssl(domain, email)):
        sys.exit(1)


@wordpress.command()
@click.argument("site")
@click.option("--option", "options", multiple=True, type=click.Choice(list(HARDENING_OPTIONS)),
              help="Hardening option (repeatable, default: all).")
def harden(site: str, options: tuple[str, ...]) -> None:
    """Apply security hardening to SITE."""
    from ultrabunt.core.services.wordpress import apply_hardening

    result = apply_hardening(site, list(options) or None)
    for option, outcome in result.get("results", {}).items():
        color = "green" if outcome in ("changed", "unchanged", "skipped") else "red"
        click.secho(f"   {option:<22} {outcome}", fg=color)
    if not report(result):
        sys.exit(1)


# ── Observe ─────────────────────────────────────────────────────


@wordpress.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def status(as_json: bool) -> None:
    """Show WordPress sites and service states."""
    from ultrabunt.core.services.wordpress import wordpress_status

    result = wordpress_status()
    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    click.secho("🔧 Services:", fg="cyan", bold=True)
    for name, active in result["services"].items():
        state = click.style("active", fg="green") if active else click.style("inactive", fg="red")
        click.echo(f"   {name:<10} {state}")
    click.echo()

    if not result["sites"]:
        click.secho("⚠️  No WordPress sites found", fg="yellow")
        return
    click.secho("🌐 Sites:", fg="cyan", bold=True)
    for s in result["sites"]:
        click.secho(f"   {s['site']}", bold=True)
        click.echo(f"      Path: {s['path']}")
        click.echo(f"      Configured: {_yes_no(s['configured'])}  Enabled: {_yes_no(s['enabled'])}"
                   f"  SSL: {_yes_no(s['ssl'])}  Accessible: {_yes_no(s['accessible'])}")
    click.echo()


@wordpress.command()
@click.argument("site")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def site(site: str, as_json: bool) -> None:
    """Show details of SITE."""
    from ultrabunt.core.services.wordpress import site_detail

    result = site_detail(site)
    if as_json:
        click.echo(json.dumps(result, indent=2))
        if not result["ok"]:
            sys.exit(1)
        return
    if not result["ok"]:
        report(result)
        sys.exit(1)

    click.secho(f"🌐 {result['site']}", fg="cyan", bold=True)
    click.echo(f"   Path:       {result['path']}")
    click.echo(f"   WordPress:  {result['version'] or 'unknown version'}")
    click.echo(f"   Web server: {result['web_server'] or 'not configured'}")
    click.echo(f"   Enabled:    {_yes_no(result['enabled'])}")
    if result.get("ssl_expires"):
        click.echo(f"   SSL:        expires {result['ssl_expires']} ({result['ssl_days_left']} days)")
    else:
        click.echo(f"   SSL:        {_yes_no(result['ssl'])}")
    click.echo(f"   Database:   {result['database'] or 'unknown'} "
               f"(connection {'ok' if result['database_ok'] else 'failed'})")
    if result["config_file"]:
        click.echo(f"   Config:     {result['config_file']}")
        for line in result["config_preview"]:
            click.echo(f"      {line}")
    click.echo()


@wordpress.command("test")
@click.argument("site")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def test_cmd(site: str, as_json: bool) -> None:
    """Check that SITE answers over HTTP/HTTPS and resolves in DNS."""
    from ultrabunt.core.services.wordpress import check_site

    result = check_site(site)
    if as_json:
        click.echo(json.dumps(result, indent=2))
    else:
        for key in ("http", "https"):
            check = result[key]
            if check["code"] is None:
                click.secho(f"   {key.upper():<6} unreachable", fg="red")
            else:
                click.echo(f"   {key.upper():<6} {check['code']} in {check['time_ms']} ms")
        click.echo(f"   DNS    {', '.join(result['dns']) or 'does not resolve'}")
    if not result["ok"]:
        sys.exit(1)


# ── Manage ──────────────────────────────────────────────────────


@wordpress.command()
@click.argument("site")
def enable(site: str) -> None:
    """Enable SITE in its web server."""
    from ultrabunt.core.services.wordpress import enable_site

    if not report(enable_site(site)):
        sys.exit(1)


@wordpress.command()
@click.argument("site")
def disable(site: str) -> None:
    """Disable SITE in its web server."""
    from ultrabunt.core.services.wordpress import disable_site

    if not report(disable_site(site)):
        sys.exit(1)


@wordpress.command()
@click.argument("site")
@click.option("--confirm", "confirmation", default=None,
              help="Confirmation text, exactly 'DELETE <site>'.")
def delete(site: str, confirmation: str | None) -> None:
    """Delete SITE: vhost, certificate and files (the database is kept)."""
    from ultrabunt.core.services.wordpress import delete_site

    if confirmation is None:
        click.secho(f"⚠️  This permanently deletes {site}.", fg="red", bold=True)
        confirmation = click.prompt(f"Type 'DELETE {site}' to confirm", default="",
                                    show_default=False)
    if not report(delete_site(site, confirmation)):
        sys.exit(1)
