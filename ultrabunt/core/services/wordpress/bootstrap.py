"""
WordPress bootstrap — LEMP/LAMP prerequisites, database, files, vhost.

Quick setup uses generated names everywhere; custom setup lets the
caller choose the site directory and database credentials.  Both end
with a credentials file (mode 600) in the backup directory.
"""

from __future__ import annotations

import logging
import re
import tarfile
import tempfile
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from ultrabunt.core.context import get_settings, is_dry_run
from ultrabunt.core.persistence.audit import record
from ultrabunt.core.services.buntage_install.data.catalog import get_buntage
from ultrabunt.core.services.buntage_install.detection.installed_cache import (
    InstalledCache,
    get_cache,
    is_installed,
)
from ultrabunt.core.services.buntage_install.execution.buntage_ops import install_buntage
from ultrabunt.core.services.buntage_install.execution.download import download_file
from ultrabunt.core.services.buntage_install.execution.subprocess_runner import (
    run_command,
    run_steps,
)
from ultrabunt.core.services.buntage_install.execution.system_files import (
    remove_system_path,
    write_system_file,
)
from ultrabunt.core.services.wordpress.templates import (
    fetch_salts,
    generate_password,
    render_apache_vhost,
    render_credentials,
    render_nginx_vhost,
    render_wp_config,
    sanitize_identifier,
    valid_identifier,
)

logger = logging.getLogger(__name__)

WORDPRESS_TARBALL = "https://wordpress.org/latest.tar.gz"
MYSQL_ROOT_PASSWORD_FILE = Path("/root/.mysql_root_password")

WEB_SERVERS = ("nginx", "apache")

COMMON_PREREQUISITES = [
    "mariadb", "php-mysql", "php-curl", "php-gd", "php-xml", "php-mbstring", "php-zip",
]
SERVER_PREREQUISITES = {
    "nginx": ["nginx", "php-fpm"],
    "apache": ["apache2", "libapache2-mod-php"],
}
# The minimum a site needs to run; the rest is installed but not checked
REQUIRED_PREREQUISITES = ["mariadb", "php-mysql", "php-curl", "php-gd"]

_DOMAIN = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9.-]*[A-Za-z0-9])?$")


def _step(label: str, cmd: list[str]) -> dict:
    return {"label": label, "cmd": cmd, "needs_sudo": True}


def valid_domain(domain: str) -> bool:
    return bool(domain) and len(domain) <= 253 and bool(_DOMAIN.match(domain))


def _check_server(web_server: str) -> dict[str, Any] | None:
    if web_server not in WEB_SERVERS:
        return {"ok": False, "error": f"Unknown web server: {web_server} (choose nginx or apache)"}
    return None


# ── Prerequisites ───────────────────────────────────────────────

def prerequisites(web_server: str) -> list[str]:
    """Buntage names a WordPress site on *web_server* needs."""
    return SERVER_PREREQUISITES[web_server] + COMMON_PREREQUISITES


def check_prerequisites(web_server: str, cache: InstalledCache | None = None) -> list[str]:
    """Required buntages that are not installed yet."""
    if cache is None:
        cache = get_cache()
    needed = SERVER_PREREQUISITES[web_server] + REQUIRED_PREREQUISITES
    return [name for name in needed if not is_installed(get_buntage(name), cache)]


def start_services(web_server: str) -> dict[str, Any]:
    """Enable and start the web server, PHP and MariaDB."""
    php = get_settings().php_version
    if web_server == "nginx":
        steps = [_step("Start services", ["systemctl", "enable", "--now",
                                          "nginx", f"php{php}-fpm", "mariadb"])]
    else:
        steps = [
            _step("Start services", ["systemctl", "enable", "--now", "apache2", "mariadb"]),
            _step("Enable mod_rewrite", ["a2enmod", "rewrite"]),
        ]
    return run_steps(steps)


def secure_mariadb() -> dict[str, Any]:
    """Set a random root password and drop the test leftovers, once.

    Root keeps socket authentication so ``sudo mysql`` continues to work.
    The password is stored in ``/root/.mysql_root_password``.
    """
    exists = run_command(["test", "-f", str(MYSQL_ROOT_PASSWORD_FILE)], needs_sudo=True)
    if exists["ok"] and not exists.get("dry_run"):
        logger.info("MariaDB already secured (%s exists)", MYSQL_ROOT_PASSWORD_FILE)
        return {"ok": True, "already_secured": True}

    password = generate_password()
    sql = (
        "ALTER USER 'root'@'localhost' IDENTIFIED VIA unix_socket "
        f"OR mysql_native_password USING PASSWORD('{password}');\n"
        "DELETE FROM mysql.user WHERE User='';\n"
        "DELETE FROM mysql.user WHERE User='root' "
        "AND Host NOT IN ('localhost', '127.0.0.1', '::1');\n"
        "DROP DATABASE IF EXISTS test;\n"
        "DELETE FROM mysql.db WHERE Db='test' OR Db='test\\_%';\n"
        "FLUSH PRIVILEGES;\n"
    )
    r = run_command(["mysql"], needs_sudo=True, input_text=sql)
    if not r["ok"]:
        return {"ok": False, "error": f"Securing MariaDB failed: {r['error']}"}
    w = write_system_file(MYSQL_ROOT_PASSWORD_FILE, password + "\n", mode=0o600)
    if not w["ok"]:
        return w
    logger.info("MariaDB root password saved to %s", MYSQL_ROOT_PASSWORD_FILE)
    return {"ok": True}


def install_prerequisites(web_server: str, cache: InstalledCache | None = None) -> dict[str, Any]:
    """Install the stack for *web_server*, start it and secure MariaDB."""
    bad = _check_server(web_server)
    if bad:
        return bad
    if cache is None:
        cache = get_cache()

    failed = {}
    for name in prerequisites(web_server):
        r = install_buntage(name, cache=cache, with_deps=True)
        if not r["ok"]:
            failed[name] = r["error"]
    if failed:
        return {"ok": False, "error": f"Could not install: {', '.join(failed)}", "failed": failed}

    r = start_services(web_server)
    if not r["ok"]:
        return r
    return secure_mariadb()


# ── Database ────────────────────────────────────────────────────

def create_database(db_name: str, db_user: str, db_password: str) -> dict[str, Any]:
    """Create a utf8mb4 database and a local user owning it."""
    for label, value in (("database name", db_name), ("database user", db_user)):
        if not valid_identifier(value):
            return {"ok": False, "error": f"Invalid {label}: {value!r} (use letters, digits, _)"}
    if not db_password or "'" in db_password or "\\" in db_password:
        return {"ok": False, "error": "Database password must be non-empty without ' or \\"}

    sql = (
        f"CREATE DATABASE {db_name} DEFAULT CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;\n"
        f"CREATE USER '{db_user}'@'localhost' IDENTIFIED BY '{db_password}';\n"
        f"GRANT ALL PRIVILEGES ON {db_name}.* TO '{db_user}'@'localhost';\n"
        "FLUSH PRIVILEGES;\n"
    )
    r = run_command(["mysql"], needs_sudo=True, input_text=sql)
    if not r["ok"]:
        detail = r.get("stderr", "").strip()
        return {"ok": False, "error": f"Creating database {db_name} failed: {detail or r['error']}"}
    logger.info("Database %s created for %s", db_name, db_user)
    return {"ok": True, "db_name": db_name, "db_user": db_user}


# ── Files ───────────────────────────────────────────────────────

def _file_steps(src: Path, site_dir: Path) -> list[dict]:
    target = str(site_dir)
    return [
        _step("Create site directory", ["mkdir", "-p", target]),
        _step("Copy WordPress files", ["cp", "-a", f"{src}/.", target]),
        _step("Set ownership", ["chown", "-R", "www-data:www-data", target]),
        _step("Directory permissions", ["find", target, "-type", "d", "-exec", "chmod", "755", "{}", "+"]),
        _step("File permissions", ["find", target, "-type", "f", "-exec", "chmod", "644", "{}", "+"]),
    ]


def install_wordpress_files(site_dir: Path, *, db_name: str, db_user: str,
                            db_password: str) -> dict[str, Any]:
    """Download the latest WordPress into *site_dir* with a ready wp-config.php."""
    if is_dry_run():
        logger.info("[dry-run] download %s and extract into %s", WORDPRESS_TARBALL, site_dir)
        return run_steps(_file_steps(Path("/tmp/wordpress"), site_dir))

    with tempfile.TemporaryDirectory(prefix="ultrabunt-wp-") as tmp:
        tarball = Path(tmp) / "latest.tar.gz"
        dl = download_file(WORDPRESS_TARBALL, tarball)
        if not dl["ok"]:
            return dl
        try:
            with tarfile.open(tarball) as tar:
                tar.extractall(tmp, filter="data")
        except (tarfile.TarError, OSError) as e:
            return {"ok": False, "error": f"Cannot extract WordPress: {e}"}

        src = Path(tmp) / "wordpress"
        sample = src / "wp-config-sample.php"
        if not sample.is_file():
            return {"ok": False, "error": "wp-config-sample.php missing from the WordPress archive"}
        config = render_wp_config(
            sample.read_text(encoding="utf-8"),
            db_name=db_name, db_user=db_user, db_password=db_password,
            salts=fetch_salts(),
        )
        (src / "wp-config.php").write_text(config, encoding="utf-8")
        return run_steps(_file_steps(src, site_dir))


# ── Web server ──────────────────────────────────────────────────

def _only_default_enabled(enabled_dir: Path) -> bool:
    if not enabled_dir.is_dir():
        return False
    return [p.name for p in enabled_dir.iterdir()] == ["default"]


def configure_nginx(domain: str, site_dir: Path) -> dict[str, Any]:
    """Write, enable and load the nginx server block for *domain*."""
    settings = get_settings()
    available = settings.nginx_path / "sites-available" / domain
    enabled_dir = settings.nginx_path / "sites-enabled"
    enabled = enabled_dir / domain

    r = write_system_file(available, render_nginx_vhost(domain, str(site_dir), settings.php_version),
                          mode=0o644)
    if not r["ok"]:
        return r
    if _only_default_enabled(enabled_dir):
        remove_system_path(enabled_dir / "default")

    r = run_command(["ln", "-sf", str(available), str(enabled)], needs_sudo=True)
    if not r["ok"]:
        return {"ok": False, "error": f"Cannot enable {domain}: {r['error']}"}

    test = run_command(["nginx", "-t"], needs_sudo=True)
    if not test["ok"]:
        remove_system_path(enabled)
        return {"ok": False, "error": "nginx configuration test failed; site disabled again",
                "detail": test.get("stderr", "").strip()}

    r = run_command(["systemctl", "reload", "nginx"], needs_sudo=True)
    if not r["ok"]:
        return {"ok": False, "error": f"Reloading nginx failed: {r['error']}"}
    r = run_command(["systemctl", "is-active", "--quiet", "nginx"])
    if not r["ok"]:
        return {"ok": False, "error": "nginx is not running after reload"}
    return {"ok": True, "config": str(available)}


def configure_apache(domain: str, site_dir: Path) -> dict[str, Any]:
    """Write, enable and load the apache virtual host for *domain*."""
    settings = get_settings()
    conf = settings.apache_path / "sites-available" / f"{domain}.conf"
    r = write_system_file(conf, render_apache_vhost(domain, str(site_dir)), mode=0o644)
    if not r["ok"]:
        return r
    r = run_steps([
        _step("Enable modules", ["a2enmod", "rewrite", "headers"]),
        _step("Enable site", ["a2ensite", f"{domain}.conf"]),
        _step("Test configuration", ["apache2ctl", "configtest"]),
        _step("Reload apache", ["systemctl", "reload", "apache2"]),
    ])
    if not r["ok"]:
        return r
    return {"ok": True, "config": str(conf)}


# ── Setup ───────────────────────────────────────────────────────

def save_credentials(domain: str, **details: str) -> dict[str, Any]:
    """Write the credentials file for *domain* into the backup dir."""
    now = datetime.now()
    path = get_settings().backup_path / f"wordpress-{domain}-{now:%Y%m%d-%H%M%S}.txt"
    text = render_credentials(domain=domain, created=now.strftime("%Y-%m-%d %H:%M:%S"), **details)
    r = write_system_file(path, text, mode=0o600)
    if not r["ok"]:
        return r
    return {"ok": True, "path": str(path)}


def setup_site(
    web_server: str,
    domain: str,
    *,
    site_dir: Path,
    db_name: str,
    db_user: str,
    db_password: str,
    cache: InstalledCache | None = None,
) -> dict[str, Any]:
    """Full bootstrap: stack, database, files, vhost, credentials."""
    bad = _check_server(web_server)
    if bad:
        return bad
    if not valid_domain(domain):
        return {"ok": False, "error": f"Invalid domain: {domain!r}"}
    if not site_dir.is_absolute():
        return {"ok": False, "error": f"Site directory must be an absolute path: {site_dir}"}
    if (site_dir / "wp-config.php").exists():
        return {"ok": False, "error": f"WordPress is already installed in {site_dir}"}

    start = time.monotonic()
    logger.info("Setting up WordPress for %s on %s in %s", domain, web_server, site_dir)

    def fail(stage: str, r: dict) -> dict[str, Any]:
        error = f"{stage}: {r['error']}"
        record("wordpress-setup", domain, status="failed", error=error, web_server=web_server,
               duration_ms=int((time.monotonic() - start) * 1000))
        return {**r, "ok": False, "error": error}

    r = install_prerequisites(web_server, cache=cache)
    if not r["ok"]:
        return fail("Prerequisites", r)
    r = create_database(db_name, db_user, db_password)
    if not r["ok"]:
        return fail("Database", r)
    r = install_wordpress_files(site_dir, db_name=db_name, db_user=db_user, db_password=db_password)
    if not r["ok"]:
        return fail("WordPress files", r)
    configure = configure_nginx if web_server == "nginx" else configure_apache
    r = configure(domain, site_dir)
    if not r["ok"]:
        return fail("Web server", r)

    creds = save_credentials(domain, site_dir=str(site_dir), web_server=web_server,
                             db_name=db_name, db_user=db_user, db_password=db_password)
    if not creds["ok"]:
        return fail("Credentials", creds)

    record("wordpress-setup", domain, status="ok", web_server=web_server, site_dir=str(site_dir),
           duration_ms=int((time.monotonic() - start) * 1000))
    return {
        "ok": True,
        "message": f"WordPress ready at http://{domain}",
        "domain": domain,
        "site_dir": str(site_dir),
        "web_server": web_server,
        "db_name": db_name,
        "db_user": db_user,
        "credentials_file": creds["path"],
    }


def quick_setup(web_server: str = "nginx", domain: str = "localhost", *,
                cache: InstalledCache | None = None) -> dict[str, Any]:
    """Set up a site with generated database names and password."""
    stamp = int(time.time())
    return setup_site(
        web_server, domain,
        site_dir=get_settings().www_path / domain,
        db_name=f"wp_{sanitize_identifier(domain)}_{stamp}",
        db_user=f"wpuser_{stamp}",
        db_password=generate_password(),
        cache=cache,
    )


def custom_setup(
    web_server: str,
    domain: str,
    *,
    site_dir: Path | None = None,
    db_name: str | None = None,
    db_user: str | None = None,
    db_password: str | None = None,
    cache: InstalledCache | None = None,
) -> dict[str, Any]:
    """Set up a site, taking any of the choices the caller provides."""
    return setup_site(
        web_server, domain,
        site_dir=site_dir or get_settings().www_path / domain,
        db_name=db_name or f"wp_{sanitize_identifier(domain)}",
        db_user=db_user or "wp_user",
        db_password=db_password or generate_password(),
        cache=cache,
    )
