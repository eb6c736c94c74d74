"""
WordPress site management — status, details, enable/disable, tests, delete.

A site is a directory under the www root that contains ``wp-config.php``;
its name doubles as the domain used for vhosts and certificates.
"""

from __future__ import annotations

import logging
import os
import re
import socket
import time
import urllib.error
import urllib.request
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from cryptography import x509

from ultrabunt import __version__
from ultrabunt.core.context import get_settings
from ultrabunt.core.persistence.audit import record
from ultrabunt.core.services.buntage_install.detection.installed_cache import run_query
from ultrabunt.core.services.buntage_install.execution.subprocess_runner import (
    run_command,
    run_steps,
)
from ultrabunt.core.services.buntage_install.execution.system_files import (
    read_system_file,
    remove_system_path,
)
from ultrabunt.core.services.wordpress.hardening import service_active

logger = logging.getLogger(__name__)

SERVICES = ("nginx", "apache2", "mariadb")
ACCESSIBLE_CODES = (200, 301, 302)
PREVIEW_LINES = 20

_WP_VERSION = re.compile(r"\$wp_version\s*=\s*'([^']+)'")
_DEFINE = re.compile(r"define\(\s*'(DB_NAME|DB_USER|DB_PASSWORD|DB_HOST)'\s*,\s*'([^']*)'\s*\)")


# ── Paths ───────────────────────────────────────────────────────

def _nginx_available(site: str) -> Path:
    return get_settings().nginx_path / "sites-available" / site


def _nginx_enabled(site: str) -> Path:
    return get_settings().nginx_path / "sites-enabled" / site


def _apache_available(site: str) -> Path:
    return get_settings().apache_path / "sites-available" / f"{site}.conf"


def _apache_enabled(site: str) -> Path:
    return get_settings().apache_path / "sites-enabled" / f"{site}.conf"


def _cert_path(site: str) -> Path:
    return get_settings().letsencrypt_path / site / "fullchain.pem"


def list_sites() -> list[str]:
    """Site names under the www root, sorted."""
    root = get_settings().www_path
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir() and (p / "wp-config.php").exists())


def _known_site(site: str) -> dict[str, Any] | None:
    if site in list_sites():
        return None
    return {"ok": False, "error": f"No WordPress site named {site!r}"}


def site_web_server(site: str) -> str | None:
    """Which server has a config for *site*."""
    if _nginx_available(site).exists():
        return "nginx"
    if _apache_available(site).exists():
        return "apache"
    return None


def site_enabled(site: str) -> bool:
    nginx = _nginx_enabled(site)
    return nginx.is_symlink() or nginx.exists() or _apache_enabled(site).exists()


def has_ssl(site: str) -> bool:
    path = _cert_path(site)
    if os.access(path.parent.parent, os.X_OK):
        return path.exists()
    # letsencrypt/live is root-only; ask sudo without prompting
    r = run_query(["sudo", "-n", "test", "-f", str(path)])
    return bool(r) and r.returncode == 0


# ── HTTP / DNS ──────────────────────────────────────────────────

class _NoRedirect(urllib.request.HTTPRedirectHandler):
    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


def http_check(url: str, timeout: float = 10.0) -> dict[str, Any]:
    """Status code and response time of *url*, without following redirects."""
    opener = urllib.request.build_opener(_NoRedirect)
    req = urllib.request.Request(url, headers={"User-Agent": f"ultrabunt/{__version__}"})
    start = time.monotonic()
    try:
        with opener.open(req, timeout=timeout) as resp:
            code = resp.status
    except urllib.error.HTTPError as e:
        code = e.code
    except OSError as e:
        logger.debug("%s unreachable: %s", url, e)
        return {"url": url, "code": None, "time_ms": None, "error": str(e)}
    return {"url": url, "code": code, "time_ms": round((time.monotonic() - start) * 1000, 1)}


def resolve_host(host: str) -> list[str]:
    try:
        infos = socket.getaddrinfo(host, None)
    except OSError:
        return []
    return sorted({info[4][0] for info in infos})


# ── Status ──────────────────────────────────────────────────────

def site_status(site: str) -> dict[str, Any]:
    server = site_web_server(site)
    check = http_check(f"http://{site}", timeout=5.0)
    return {
        "site": site,
        "path": str(get_settings().www_path / site),
        "web_server": server,
        "configured": server is not None,
        "enabled": site_enabled(site),
        "ssl": has_ssl(site),
        "accessible": check["code"] in ACCESSIBLE_CODES,
    }


def wordpress_status() -> dict[str, Any]:
    """Every site's flags plus the state of the web and database services."""
    return {
        "sites": [site_status(s) for s in list_sites()],
        "services": {name: service_active(name) for name in SERVICES},
    }


def parse_wp_version(version_php: str) -> str | None:
    m = _WP_VERSION.search(version_php)
    return m.group(1) if m else None


def parse_db_settings(wp_config: str) -> dict[str, str]:
    """``DB_NAME``/``DB_USER``/``DB_PASSWORD``/``DB_HOST`` from wp-config.php."""
    return {key: value for key, value in _DEFINE.findall(wp_config)}


def cert_expiry(pem: bytes) -> datetime:
    cert = x509.load_pem_x509_certificate(pem)
    return cert.not_valid_after_utc


def _ssl_detail(site: str) -> dict[str, Any]:
    pem = read_system_file(_cert_path(site))
    if not pem:
        return {"ssl": False}
    try:
        expires = cert_expiry(pem.encode("utf-8"))
    except ValueError as e:
        return {"ssl": True, "ssl_error": f"Cannot parse certificate: {e}"}
    days = (expires - datetime.now(timezone.utc)).days
    return {"ssl": True, "ssl_expires": expires.isoformat(), "ssl_days_left": days}


def check_database(db: dict[str, str]) -> bool:
    if not db.get("DB_NAME") or not db.get("DB_USER"):
        return False
    r = run_command(
        ["mysql", "-u", db["DB_USER"], "-h", db.get("DB_HOST") or "localhost",
         "-e", f"USE `{db['DB_NAME']}`;"],
        env_overrides={"MYSQL_PWD": db.get("DB_PASSWORD", "")},
        timeout=15,
    )
    return r["ok"]


def site_detail(site: str) -> dict[str, Any]:
    """Version, config preview, SSL expiry and a database connection test."""
    bad = _known_site(site)
    if bad:
        return bad
    site_dir = get_settings().www_path / site

    version = None
    version_file = site_dir / "wp-includes" / "version.php"
    text = read_system_file(version_file)
    if text:
        version = parse_wp_version(text)

    server = site_web_server(site)
    config_file = None
    if server == "nginx":
        config_file = _nginx_available(site)
    elif server == "apache":
        config_file = _apache_available(site)
    preview = []
    if config_file is not None:
        conf_text = read_system_file(config_file) or ""
        preview = conf_text.splitlines()[:PREVIEW_LINES]

    db = parse_db_settings(read_system_file(site_dir / "wp-config.php") or "")

    return {
        "ok": True,
        **site_status(site),
        "version": version,
        "config_file": str(config_file) if config_file else None,
        "config_preview": preview,
        **_ssl_detail(site),
        "database": db.get("DB_NAME"),
        "database_ok": check_database(db),
    }


# ── Enable / disable ────────────────────────────────────────────

def _reload_steps(server: str) -> list[dict]:
    if server == "nginx":
        return [
            {"label": "Test nginx configuration", "cmd": ["nginx", "-t"], "needs_sudo": True},
            {"label": "Reload nginx", "cmd": ["systemctl", "reload", "nginx"], "needs_sudo": True},
        ]
    return [
        {"label": "Test apache configuration", "cmd": ["apache2ctl", "configtest"], "needs_sudo": True},
        {"label": "Reload apache", "cmd": ["systemctl", "reload", "apache2"], "needs_sudo": True},
    ]


def enable_site(site: str) -> dict[str, Any]:
    bad = _known_site(site)
    if bad:
        return bad
    server = site_web_server(site)
    if server is None:
        return {"ok": False, "error": f"{site} has no web server configuration"}
    if server == "nginx":
        step = {"label": "Link site", "needs_sudo": True,
                "cmd": ["ln", "-sf", str(_nginx_available(site)), str(_nginx_enabled(site))]}
    else:
        step = {"label": "Enable site", "needs_sudo": True, "cmd": ["a2ensite", f"{site}.conf"]}
    r = run_steps([step] + _reload_steps(server))
    record("wordpress-enable", site, status="ok" if r["ok"] else "failed", error=r.get("error", ""))
    if not r["ok"]:
        return r
    return {"ok": True, "message": f"{site} enabled"}


def disable_site(site: str) -> dict[str, Any]:
    bad = _known_site(site)
    if bad:
        return bad
    server = site_web_server(site)
    if server is None:
        return {"ok": False, "error": f"{site} has no web server configuration"}
    if server == "nginx":
        r = remove_system_path(_nginx_enabled(site))
        if not r["ok"]:
            return r
        steps = _reload_steps(server)
    else:
        steps = [{"label": "Disable site", "needs_sudo": True, "cmd": ["a2dissite", f"{site}.conf"]}]
        steps += _reload_steps(server)
    r = run_steps(steps)
    record("wordpress-disable", site, status="ok" if r["ok"] else "failed", error=r.get("error", ""))
    if not r["ok"]:
        return r
    return {"ok": True, "message": f"{site} disabled"}


def check_site(site: str) -> dict[str, Any]:
    """HTTP and HTTPS reachability plus DNS resolution of *site*."""
    http = http_check(f"http://{site}")
    https = http_check(f"https://{site}")
    addresses = resolve_host(site)
    return {
        "ok": http["code"] in ACCESSIBLE_CODES or https["code"] in ACCESSIBLE_CODES,
        "site": site,
        "http": http,
        "https": https,
        "dns": addresses,
    }


# ── Delete ──────────────────────────────────────────────────────

def delete_site(site: str, confirmation: str) -> dict[str, Any]:
    """Remove a site's vhost, certificate and files.

    Nothing happens unless *confirmation* is exactly ``DELETE <site>``.
    The database is kept.
    """
    if confirmation != f"DELETE {site}":
        return {"ok": False, "cancelled": True,
                "error": f"Confirmation did not match 'DELETE {site}'; nothing was removed"}
    bad = _known_site(site)
    if bad:
        return bad

    removed = []
    server = site_web_server(site)
    for path in (_nginx_enabled(site), _nginx_available(site),
                 _apache_enabled(site), _apache_available(site)):
        if path.exists() or path.is_symlink():
            r = remove_system_path(path)
            if not r["ok"]:
                return r
            removed.append(str(path))
    if server is not None:
        reload = run_command(["systemctl", "reload", "nginx" if server == "nginx" else "apache2"],
                             needs_sudo=True)
        if not reload["ok"]:
            logger.warning("Reload after removing %s failed: %s", site, reload["error"])

    if has_ssl(site):
        r = run_command(["certbot", "delete", "--cert-name", site, "--non-interactive"],
                        needs_sudo=True)
        if not r["ok"]:
            logger.warning("Removing the certificate for %s failed: %s", site, r["error"])

    site_dir = get_settings().www_path / site
    r = remove_system_path(site_dir)
    if not r["ok"]:
        record("wordpress-delete", site, status="failed", error=r["error"])
        return r
    removed.append(str(site_dir))

    record("wordpress-delete", site, status="ok", removed=removed)
    return {"ok": True, "message": f"{site} deleted", "removed": removed}
