"""
WordPress hardening and Let's Encrypt certificates.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ultrabunt.core.context import get_settings
from ultrabunt.core.persistence.audit import record
from ultrabunt.core.services.buntage_install.detection.installed_cache import (
    InstalledCache,
    run_query,
)
from ultrabunt.core.services.buntage_install.execution.buntage_ops import install_buntage
from ultrabunt.core.services.buntage_install.execution.subprocess_runner import (
    run_command,
    run_steps,
)
from ultrabunt.core.services.buntage_install.execution.system_files import (
    read_system_file,
    write_system_file,
)
from ultrabunt.core.services.wordpress.bootstrap import valid_domain
from ultrabunt.core.services.wordpress.templates import insert_before_marker

logger = logging.getLogger(__name__)

DISALLOW_FILE_EDIT = "define('DISALLOW_FILE_EDIT', true);"
DISABLE_XMLRPC = "add_filter('xmlrpc_enabled', '__return_false');"
HIDE_GENERATOR = "remove_action('wp_head', 'wp_generator');"

MU_PLUGIN = "ultrabunt-hardening.php"
MU_PLUGIN_HEADER = "<?php\n/*\n * Plugin Name: Ultrabunt hardening\n */\n"

# Outcomes that count as success
_DONE = ("changed", "unchanged", "skipped")

HARDENING_OPTIONS = {
    "file-permissions": "Set secure file permissions (wp-config.php 600)",
    "disable-file-editing": "Disable the theme and plugin editors",
    "hide-wp-version": "Hide the WordPress version from page headers",
    "security-headers": "Security headers (already set by the vhost)",
    "disable-xmlrpc": "Disable XML-RPC",
}


# ── SSL ─────────────────────────────────────────────────────────

def service_active(name: str) -> bool:
    r = run_query(["systemctl", "is-active", "--quiet", name])
    return bool(r) and r.returncode == 0


def active_web_server() -> str | None:
    """"nginx" or "apache" when that server is running, nginx preferred."""
    if service_active("nginx"):
        return "nginx"
    if service_active("apache2"):
        return "apache"
    return None


def setup_ssl(domain: str, email: str, *, cache: InstalledCache | None = None) -> dict[str, Any]:
    """Obtain and install a Let's Encrypt certificate for *domain* and www.*domain*."""
    if not domain or domain == "localhost":
        return {"ok": False, "error": "SSL needs a real domain name, not localhost"}
    if not valid_domain(domain):
        return {"ok": False, "error": f"Invalid domain: {domain!r}"}
    if not email or "@" not in email:
        return {"ok": False, "error": "An email address is required for Let's Encrypt"}

    server = active_web_server()
    if server is None:
        return {"ok": False, "error": "No active web server (nginx or apache2) found"}

    plugin = "python3-certbot-nginx" if server == "nginx" else "python3-certbot-apache"
    r = install_buntage(plugin, cache=cache, with_deps=True)
    if not r["ok"]:
        return {"ok": False, "error": f"Cannot install certbot: {r['error']}"}

    r = run_command(
        ["certbot", f"--{server}", "-d", domain, "-d", f"www.{domain}",
         "--email", email, "--agree-tos", "--non-interactive"],
        needs_sudo=True,
    )
    if not r["ok"]:
        record("wordpress-ssl", domain, status="failed", error=r["error"], web_server=server)
        detail = r.get("stderr", "").strip().splitlines()
        return {"ok": False, "error": f"certbot failed: {r['error']}",
                "detail": detail[-1] if detail else ""}

    record("wordpress-ssl", domain, status="ok", web_server=server)
    return {"ok": True, "message": f"SSL certificate installed for {domain}", "web_server": server}


# ── Hardening ───────────────────────────────────────────────────

def _site_dir(site: str) -> Path:
    return get_settings().www_path / site


def _edit_file(path: Path, edit) -> str:
    """Apply *edit* to the file text.  Returns "changed", "unchanged" or an error."""
    text = read_system_file(path)
    if text is None:
        return f"cannot read {path}"
    new = edit(text)
    if new == text:
        return "unchanged"
    r = write_system_file(path, new)
    return "changed" if r["ok"] else r["error"]


def _file_permissions(site_dir: Path) -> str:
    target = str(site_dir)
    r = run_steps([
        {"label": "Ownership", "cmd": ["chown", "-R", "www-data:www-data", target], "needs_sudo": True},
        {"label": "Directories", "cmd": ["find", target, "-type", "d", "-exec", "chmod", "755", "{}", "+"],
         "needs_sudo": True},
        {"label": "Files", "cmd": ["find", target, "-type", "f", "-exec", "chmod", "644", "{}", "+"],
         "needs_sudo": True},
        {"label": "wp-config.php", "cmd": ["chmod", "600", str(site_dir / "wp-config.php")],
         "needs_sudo": True},
    ])
    return "changed" if r["ok"] else r["error"]


def append_snippet(php: str, snippet: str) -> str:
    """Append *snippet* to PHP source unless already there."""
    if snippet in php:
        return php
    return php.rstrip("\n") + "\n" + snippet + "\n"


def _disable_xmlrpc(site_dir: Path, config: Path) -> str:
    """Install the XML-RPC filter as a must-use plugin.

    wp-config.php runs before the plugin API is loaded, so a filter
    left there by older versions is removed.
    """
    plugin = site_dir / "wp-content" / "mu-plugins" / MU_PLUGIN
    if read_system_file(plugin) is None:
        r = write_system_file(plugin, MU_PLUGIN_HEADER + DISABLE_XMLRPC + "\n", mode=0o644)
        outcome = "changed" if r["ok"] else r["error"]
    else:
        outcome = _edit_file(plugin, lambda t: append_snippet(t, DISABLE_XMLRPC))
    if outcome not in _DONE:
        return outcome

    cleaned = _edit_file(config, lambda t: "".join(
        line for line in t.splitlines(keepends=True) if line.strip() != DISABLE_XMLRPC
    ))
    if cleaned not in _DONE:
        return cleaned
    return "changed" if "changed" in (outcome, cleaned) else "unchanged"


def _hide_wp_version(site_dir: Path) -> str:
    themes = site_dir / "wp-content" / "themes"
    files = sorted(themes.glob("*/functions.php")) if themes.is_dir() else []
    if not files:
        logger.info("No theme functions.php under %s", themes)
        return "skipped"
    outcomes = [_edit_file(f, lambda t: append_snippet(t, HIDE_GENERATOR)) for f in files]
    bad = [o for o in outcomes if o not in _DONE]
    if bad:
        return bad[0]
    return "changed" if "changed" in outcomes else "unchanged"


def apply_hardening(site: str, options: list[str] | None = None) -> dict[str, Any]:
    """Apply the chosen hardening *options* (default: all) to *site*.

    Returns per-option outcomes; ``ok`` is False when any option failed.
    """
    site_dir = _site_dir(site)
    config = site_dir / "wp-config.php"
    if not config.exists():
        return {"ok": False, "error": f"No WordPress site at {site_dir}"}

    options = options or list(HARDENING_OPTIONS)
    unknown = [o for o in options if o not in HARDENING_OPTIONS]
    if unknown:
        return {"ok": False, "error": f"Unknown hardening option(s): {', '.join(unknown)}"}

    results = {}
    for option in options:
        if option == "file-permissions":
            results[option] = _file_permissions(site_dir)
        elif option == "disable-file-editing":
            results[option] = _edit_file(config, lambda t: insert_before_marker(t, DISALLOW_FILE_EDIT))
        elif option == "hide-wp-version":
            results[option] = _hide_wp_version(site_dir)
        elif option == "security-headers":
            logger.info("Security headers are configured in the %s vhost", site)
            results[option] = "unchanged"
        elif option == "disable-xmlrpc":
            results[option] = _disable_xmlrpc(site_dir, config)
        logger.info("%s: %s", option, results[option])

    failed = {k: v for k, v in results.items() if v not in _DONE}
    record("wordpress-harden", site, status="failed" if failed else "ok",
           error="; ".join(f"{k}: {v}" for k, v in failed.items()), options=options)
    if failed:
        return {"ok": False, "error": f"Hardening failed for: {', '.join(failed)}", "results": results}
    return {"ok": True, "message": f"Hardening applied to {site}", "results": results}
