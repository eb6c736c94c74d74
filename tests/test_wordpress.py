"""
Tests for WordPress — config rendering, bootstrap, hardening, SSL
and site management.

Every system command is mocked; sites, vhosts and certificates live
under tmp_path through the settings fixture.
"""

import os
import re
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID

from ultrabunt.core import context
from ultrabunt.core.persistence.audit import AuditWriter
from ultrabunt.core.services.wordpress import bootstrap, hardening, sites
from ultrabunt.core.services.wordpress.templates import (
    SALT_KEYS,
    fetch_salts,
    generate_password,
    generate_salts,
    insert_before_marker,
    render_apache_vhost,
    render_credentials,
    render_nginx_vhost,
    render_wp_config,
    sanitize_identifier,
    valid_identifier,
)

_BOOT = "ultrabunt.core.services.wordpress.bootstrap"
_HARDEN = "ultrabunt.core.services.wordpress.hardening"
_SITES = "ultrabunt.core.services.wordpress.sites"

_OK = {"ok": True, "stdout": ""}

SAMPLE_CONFIG = """\
<?php
define( 'DB_NAME', 'database_name_here' );
define( 'DB_USER', 'username_here' );
define( 'DB_PASSWORD', 'password_here' );
define( 'DB_HOST', 'localhost' );

define( 'AUTH_KEY',         'put your unique phrase here' );
define( 'SECURE_AUTH_KEY',  'put your unique phrase here' );
define( 'LOGGED_IN_KEY',    'put your unique phrase here' );
define( 'NONCE_KEY',        'put your unique phrase here' );
define( 'AUTH_SALT',        'put your unique phrase here' );
define( 'SECURE_AUTH_SALT', 'put your unique phrase here' );
define( 'LOGGED_IN_SALT',   'put your unique phrase here' );
define( 'NONCE_SALT',       'put your unique phrase here' );

$table_prefix = 'wp_';

/* That's all, stop editing! Happy publishing. */

require_once ABSPATH . 'wp-settings.php';
"""

SITE_CONFIG = render_wp_config(SAMPLE_CONFIG, db_name="wp_example", db_user="wp_user",
                               db_password="s3cret", salts=generate_salts())


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════


def _self_signed(expires: datetime) -> bytes:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "example.com")])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(expires - timedelta(days=90))
        .not_valid_after(expires)
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(Encoding.PEM)


@pytest.fixture
def site(settings) -> Path:
    """An installed site "example.com" with an nginx vhost."""
    site_dir = settings.www_path / "example.com"
    site_dir.mkdir(parents=True)
    (site_dir / "wp-config.php").write_text(SITE_CONFIG, encoding="utf-8")
    settings.letsencrypt_path.mkdir(parents=True)

    available = settings.nginx_path / "sites-available" / "example.com"
    available.parent.mkdir(parents=True)
    available.write_text(render_nginx_vhost("example.com", str(site_dir), "8.3"))
    enabled = settings.nginx_path / "sites-enabled" / "example.com"
    enabled.parent.mkdir(parents=True)
    enabled.symlink_to(available)
    return site_dir


def _http(code):
    return lambda url, **kwargs: {"url": url, "code": code, "time_ms": 10.0 if code else None}


# ═══════════════════════════════════════════════════════════════════
#  Templates
# ═══════════════════════════════════════════════════════════════════


class TestTemplates:
    def test_password(self):
        pw = generate_password()
        assert len(pw) == 20
        assert pw.isalnum()
        assert generate_password() != pw

    def test_identifiers(self):
        assert sanitize_identifier("my-site.example.com") == "my_site_example_com"
        assert valid_identifier("wp_example_1")
        assert not valid_identifier("wp-example")
        assert not valid_identifier("x" * 65)
        assert not valid_identifier("")

    def test_salts(self):
        lines = generate_salts().splitlines()
        assert [re.match(r"define\('(\w+)'", line).group(1) for line in lines] == list(SALT_KEYS)
        assert all(len(line) == len("define('', '');") + len(key) + 64
                   for line, key in zip(lines, SALT_KEYS))

    def test_salts_offline_fallback(self):
        with patch("ultrabunt.core.services.wordpress.templates.urllib.request.urlopen",
                   side_effect=OSError("no network")):
            salts = fetch_salts()
        assert salts.count("define(") == 8

    def test_wp_config(self):
        assert "define( 'DB_NAME', 'wp_example' );" in SITE_CONFIG
        assert "define( 'DB_PASSWORD', 's3cret' );" in SITE_CONFIG
        assert "put your unique phrase here" not in SITE_CONFIG
        assert SITE_CONFIG.count("define('") == 8
        assert "$table_prefix = 'wp_';" in SITE_CONFIG

    def test_insert_before_marker(self):
        out = insert_before_marker(SITE_CONFIG, "define('DISALLOW_FILE_EDIT', true);")
        lines = out.splitlines()
        marker = next(i for i, line in enumerate(lines) if "That's all, stop editing" in line)
        assert lines[marker - 1] == "define('DISALLOW_FILE_EDIT', true);"
        assert insert_before_marker(out, "define('DISALLOW_FILE_EDIT', true);") == out

    def test_insert_without_marker_appends(self):
        assert insert_before_marker("<?php\n", "x();") == "<?php\nx();\n"

    def test_nginx_vhost(self):
        conf = render_nginx_vhost("example.com", "/var/www/example.com", "8.1")
        assert "server_name example.com www.example.com;" in conf
        assert "root /var/www/example.com;" in conf
        assert "fastcgi_pass unix:/var/run/php/php8.1-fpm.sock;" in conf
        assert 'add_header X-Frame-Options "SAMEORIGIN" always;' in conf
        assert "location = /xmlrpc.php" in conf

    def test_apache_vhost(self):
        conf = render_apache_vhost("example.com", "/var/www/example.com")
        assert "ServerAlias www.example.com" in conf
        assert "<Files wp-config.php>" in conf
        assert "${APACHE_LOG_DIR}/example.com_error.log" in conf

    def test_credentials(self):
        text = render_credentials(domain="example.com", site_dir="/var/www/example.com",
                                  web_server="nginx", db_name="wp_example", db_user="wp_user",
                                  db_password="s3cret", created="2024-05-01 12:00:00")
        assert text.startswith("WordPress installation: example.com\n")
        assert "Database password: s3cret" in text
        assert "Next steps:" in text


# ═══════════════════════════════════════════════════════════════════
#  Bootstrap
# ═══════════════════════════════════════════════════════════════════


class TestPrerequisites:
    def test_valid_domain(self):
        assert bootstrap.valid_domain("example.com")
        assert bootstrap.valid_domain("localhost")
        assert not bootstrap.valid_domain("bad domain")
        assert not bootstrap.valid_domain("-x.com")
        assert not bootstrap.valid_domain("")

    def test_missing_prerequisites(self, cache):
        cache.apt.update({"nginx", "mariadb-server"})
        assert bootstrap.check_prerequisites("nginx", cache) == [
            "php-fpm", "php-mysql", "php-curl", "php-gd",
        ]

    def test_apache_prerequisites(self):
        assert bootstrap.prerequisites("apache")[:2] == ["apache2", "libapache2-mod-php"]

    def test_install_reports_failures(self, cache):
        def fake_install(name, **kwargs):
            return {"ok": False, "error": "boom"} if name == "php-gd" else {"ok": True}

        with patch(f"{_BOOT}.install_buntage", side_effect=fake_install), \
             patch(f"{_BOOT}.start_services") as mock_start:
            r = bootstrap.install_prerequisites("nginx", cache)
        mock_start.assert_not_called()
        assert r["ok"] is False
        assert r["failed"] == {"php-gd": "boom"}

    def test_unknown_server(self):
        assert bootstrap.install_prerequisites("lighttpd")["ok"] is False


class TestDatabase:
    def test_create(self):
        with patch(f"{_BOOT}.run_command", return_value=_OK) as mock_run:
            r = bootstrap.create_database("wp_example", "wp_user", "s3cret")
        assert r["ok"] is True
        assert mock_run.call_args.args[0] == ["mysql"]
        sql = mock_run.call_args.kwargs["input_text"]
        assert "CREATE DATABASE wp_example DEFAULT CHARACTER SET utf8mb4" in sql
        assert "CREATE USER 'wp_user'@'localhost' IDENTIFIED BY 's3cret';" in sql
        assert "GRANT ALL PRIVILEGES ON wp_example.* TO 'wp_user'@'localhost';" in sql

    @pytest.mark.parametrize("name,user,password", [
        ("wp-example", "wp_user", "pw"),
        ("wp_example", "wp user", "pw"),
        ("wp_example", "wp_user", "it's"),
        ("wp_example", "wp_user", ""),
    ])
    def test_rejects_unsafe_values(self, name, user, password):
        with patch(f"{_BOOT}.run_command") as mock_run:
            r = bootstrap.create_database(name, user, password)
        mock_run.assert_not_called()
        assert r["ok"] is False

    def test_secure_mariadb_once(self):
        with patch(f"{_BOOT}.run_command", return_value=_OK) as mock_run:
            r = bootstrap.secure_mariadb()
        assert r == {"ok": True, "already_secured": True}
        assert mock_run.call_count == 1

    def test_secure_mariadb_dry_run(self):
        context.set_dry_run(True)
        with patch("ultrabunt.core.services.buntage_install.execution"
                   ".subprocess_runner.subprocess.run") as mock_run:
            r = bootstrap.secure_mariadb()
        mock_run.assert_not_called()
        assert r == {"ok": True}


class TestWebServerConfig:
    def test_configure_nginx(self, settings):
        default = settings.nginx_path / "sites-enabled" / "default"
        default.parent.mkdir(parents=True)
        default.write_text("server {}")
        with patch(f"{_BOOT}.run_command", return_value=_OK) as mock_run:
            r = bootstrap.configure_nginx("example.com", Path("/var/www/example.com"))
        assert r["ok"] is True
        conf = settings.nginx_path / "sites-available" / "example.com"
        assert "server_name example.com www.example.com;" in conf.read_text()
        assert not default.exists()
        cmds = [c.args[0] for c in mock_run.call_args_list]
        assert ["nginx", "-t"] in cmds
        assert cmds[-1] == ["systemctl", "is-active", "--quiet", "nginx"]

    def test_nginx_test_failure(self):
        def fake_run(cmd, **kwargs):
            if cmd[0] == "nginx":
                return {"ok": False, "error": "Command failed (exit 1)",
                        "stderr": "nginx: [emerg] unknown directive"}
            return _OK

        with patch(f"{_BOOT}.run_command", side_effect=fake_run):
            r = bootstrap.configure_nginx("example.com", Path("/var/www/example.com"))
        assert r["ok"] is False
        assert r["detail"] == "nginx: [emerg] unknown directive"

    def test_configure_apache(self, settings):
        with patch(f"{_BOOT}.run_steps", return_value={"ok": True, "steps_run": 4}) as mock_steps:
            r = bootstrap.configure_apache("example.com", Path("/var/www/example.com"))
        assert r["ok"] is True
        assert (settings.apache_path / "sites-available" / "example.com.conf").is_file()
        cmds = [s["cmd"] for s in mock_steps.call_args.args[0]]
        assert ["a2ensite", "example.com.conf"] in cmds


class TestSetup:
    def test_validation(self, settings, site):
        assert bootstrap.setup_site("iis", "example.com", site_dir=site, db_name="a",
                                    db_user="b", db_password="c")["ok"] is False
        assert bootstrap.setup_site("nginx", "bad domain", site_dir=site, db_name="a",
                                    db_user="b", db_password="c")["error"].startswith("Invalid domain")
        assert "absolute" in bootstrap.setup_site("nginx", "example.com", site_dir=Path("rel"),
                                                  db_name="a", db_user="b", db_password="c")["error"]
        r = bootstrap.setup_site("nginx", "example.com", site_dir=site, db_name="a",
                                 db_user="b", db_password="c")
        assert r["error"] == f"WordPress is already installed in {site}"

    def test_stage_failure(self, settings):
        with patch(f"{_BOOT}.install_prerequisites",
                   return_value={"ok": False, "error": "Could not install: nginx"}), \
             patch(f"{_BOOT}.create_database") as mock_db:
            r = bootstrap.setup_site("nginx", "example.com", site_dir=settings.www_path / "example.com",
                                     db_name="wp_example", db_user="wp_user", db_password="pw")
        mock_db.assert_not_called()
        assert r == {"ok": False, "error": "Prerequisites: Could not install: nginx"}
        entry = AuditWriter().read_all()[-1]
        assert (entry.operation, entry.status) == ("wordpress-setup", "failed")

    def test_full_setup(self, settings):
        site_dir = settings.www_path / "example.com"
        with patch(f"{_BOOT}.install_prerequisites", return_value={"ok": True}), \
             patch(f"{_BOOT}.create_database", return_value={"ok": True}), \
             patch(f"{_BOOT}.install_wordpress_files", return_value={"ok": True}), \
             patch(f"{_BOOT}.configure_nginx", return_value={"ok": True}) as mock_nginx:
            r = bootstrap.setup_site("nginx", "example.com", site_dir=site_dir,
                                     db_name="wp_example", db_user="wp_user", db_password="s3cret")
        assert r["ok"] is True
        mock_nginx.assert_called_once_with("example.com", site_dir)
        creds = Path(r["credentials_file"])
        assert creds.parent == settings.backup_path
        assert creds.name.startswith("wordpress-example.com-")
        assert "Database password: s3cret" in creds.read_text()
        assert oct(os.stat(creds).st_mode & 0o777) == "0o600"

    def test_quick_setup_generates_names(self, settings):
        with patch(f"{_BOOT}.setup_site", return_value={"ok": True}) as mock_setup:
            bootstrap.quick_setup("apache", "my-site.com")
        args, kwargs = mock_setup.call_args
        assert args == ("apache", "my-site.com")
        assert kwargs["site_dir"] == settings.www_path / "my-site.com"
        assert kwargs["db_name"].startswith("wp_my_site_com_")
        assert kwargs["db_user"].startswith("wpuser_")
        assert len(kwargs["db_password"]) == 20

    def test_custom_setup_keeps_choices(self, tmp_path):
        with patch(f"{_BOOT}.setup_site", return_value={"ok": True}) as mock_setup:
            bootstrap.custom_setup("nginx", "example.com", site_dir=tmp_path / "blog",
                                   db_user="blogger")
        kwargs = mock_setup.call_args.kwargs
        assert kwargs["site_dir"] == tmp_path / "blog"
        assert kwargs["db_name"] == "wp_example_com"
        assert kwargs["db_user"] == "blogger"


# ═══════════════════════════════════════════════════════════════════
#  SSL / hardening
# ═══════════════════════════════════════════════════════════════════


class TestSSL:
    def test_localhost_refused(self):
        assert hardening.setup_ssl("localhost", "me@example.com")["error"] == (
            "SSL needs a real domain name, not localhost"
        )

    def test_email_required(self):
        assert hardening.setup_ssl("example.com", "nope")["ok"] is False

    def test_needs_running_server(self):
        with patch(f"{_HARDEN}.active_web_server", return_value=None):
            r = hardening.setup_ssl("example.com", "me@example.com")
        assert r["error"] == "No active web server (nginx or apache2) found"

    def test_certbot(self):
        with patch(f"{_HARDEN}.active_web_server", return_value="nginx"), \
             patch(f"{_HARDEN}.install_buntage", return_value={"ok": True}) as mock_install, \
             patch(f"{_HARDEN}.run_command", return_value=_OK) as mock_run:
            r = hardening.setup_ssl("example.com", "me@example.com")
        assert r["ok"] is True
        assert mock_install.call_args.args[0] == "python3-certbot-nginx"
        assert mock_run.call_args.args[0] == [
            "certbot", "--nginx", "-d", "example.com", "-d", "www.example.com",
            "--email", "me@example.com", "--agree-tos", "--non-interactive",
        ]


class TestHardening:
    def test_missing_site(self):
        assert hardening.apply_hardening("nope.com")["ok"] is False

    def test_unknown_option(self, site):
        r = hardening.apply_hardening("example.com", ["make-it-safe"])
        assert r["error"] == "Unknown hardening option(s): make-it-safe"

    def test_config_edits_idempotent(self, site):
        options = ["disable-file-editing", "disable-xmlrpc"]
        first = hardening.apply_hardening("example.com", options)
        assert first["results"] == {"disable-file-editing": "changed", "disable-xmlrpc": "changed"}
        text = (site / "wp-config.php").read_text()
        assert text.count(hardening.DISALLOW_FILE_EDIT) == 1

        second = hardening.apply_hardening("example.com", options)
        assert second["ok"] is True
        assert set(second["results"].values()) == {"unchanged"}
        assert (site / "wp-config.php").read_text() == text

    def test_xmlrpc_filter_in_mu_plugin(self, site):
        r = hardening.apply_hardening("example.com", ["disable-xmlrpc"])
        assert r["results"] == {"disable-xmlrpc": "changed"}
        plugin = site / "wp-content" / "mu-plugins" / "ultrabunt-hardening.php"
        text = plugin.read_text()
        assert text.startswith("<?php\n")
        assert text.count(hardening.DISABLE_XMLRPC) == 1
        assert "add_filter" not in (site / "wp-config.php").read_text()

    def test_xmlrpc_filter_moved_out_of_config(self, site):
        config = site / "wp-config.php"
        config.write_text(config.read_text().replace(
            "/* That's all", hardening.DISABLE_XMLRPC + "\n/* That's all"))
        r = hardening.apply_hardening("example.com", ["disable-xmlrpc"])
        assert r["ok"] is True
        assert hardening.DISABLE_XMLRPC not in config.read_text()
        assert "/* That's all" in config.read_text()

    def test_hide_version_without_theme(self, site):
        r = hardening.apply_hardening("example.com", ["hide-wp-version"])
        assert r["results"] == {"hide-wp-version": "skipped"}

    def test_hide_version_in_theme(self, site):
        functions = site / "wp-content" / "themes" / "twentytwentyfour" / "functions.php"
        functions.parent.mkdir(parents=True)
        functions.write_text("<?php\n")
        hardening.apply_hardening("example.com", ["hide-wp-version"])
        assert hardening.HIDE_GENERATOR in functions.read_text()

    def test_file_permissions(self, site):
        with patch(f"{_HARDEN}.run_steps", return_value={"ok": True, "steps_run": 4}) as mock_steps:
            r = hardening.apply_hardening("example.com", ["file-permissions"])
        assert r["ok"] is True
        assert mock_steps.call_args.args[0][-1]["cmd"] == ["chmod", "600", str(site / "wp-config.php")]

    def test_failure_reported(self, site):
        with patch(f"{_HARDEN}.run_steps",
                   return_value={"ok": False, "error": "Ownership: Command failed (exit 1)"}):
            r = hardening.apply_hardening("example.com", ["file-permissions", "security-headers"])
        assert r["ok"] is False
        assert r["results"]["security-headers"] == "unchanged"
        assert r["error"] == "Hardening failed for: file-permissions"


# ═══════════════════════════════════════════════════════════════════
#  Site management
# ═══════════════════════════════════════════════════════════════════


class TestSiteInfo:
    def test_list_sites(self, settings, site):
        (settings.www_path / "html").mkdir()
        assert sites.list_sites() == ["example.com"]

    def test_parsers(self):
        assert sites.parse_wp_version("<?php\n$wp_version = '6.5.2';\n") == "6.5.2"
        assert sites.parse_wp_version("") is None
        assert sites.parse_db_settings(SITE_CONFIG) == {
            "DB_NAME": "wp_example", "DB_USER": "wp_user",
            "DB_PASSWORD": "s3cret", "DB_HOST": "localhost",
        }

    def test_cert_expiry(self):
        expires = datetime(2030, 1, 1, tzinfo=timezone.utc)
        assert sites.cert_expiry(_self_signed(expires)) == expires

    def test_status(self, site):
        with patch(f"{_SITES}.http_check", side_effect=_http(200)), \
             patch(f"{_SITES}.service_active", side_effect=lambda name: name == "nginx"):
            status = sites.wordpress_status()
        assert status["services"] == {"nginx": True, "apache2": False, "mariadb": False}
        s = status["sites"][0]
        assert s["site"] == "example.com"
        assert s["web_server"] == "nginx"
        assert s["configured"] and s["enabled"] and s["accessible"]
        assert s["ssl"] is False

    def test_detail(self, settings, site):
        (site / "wp-includes").mkdir()
        (site / "wp-includes" / "version.php").write_text("<?php\n$wp_version = '6.5.2';\n")
        cert = settings.letsencrypt_path / "example.com" / "fullchain.pem"
        cert.parent.mkdir()
        cert.write_bytes(_self_signed(datetime.now(timezone.utc) + timedelta(days=60, hours=1)))

        with patch(f"{_SITES}.http_check", side_effect=_http(None)), \
             patch(f"{_SITES}.run_command", return_value=_OK) as mock_run:
            d = sites.site_detail("example.com")

        assert d["ok"] is True
        assert d["version"] == "6.5.2"
        assert d["config_preview"][0] == "server {"
        assert d["ssl"] is True
        assert d["ssl_days_left"] == 60
        assert d["database"] == "wp_example"
        assert d["database_ok"] is True
        assert d["accessible"] is False
        assert mock_run.call_args.kwargs["env_overrides"] == {"MYSQL_PWD": "s3cret"}

    def test_detail_unknown_site(self):
        assert sites.site_detail("ghost.com") == {"ok": False, "error": "No WordPress site named 'ghost.com'"}

    def test_database_password_with_dollar(self, monkeypatch):
        monkeypatch.setenv("HOME", "/home/someone")
        done = subprocess.CompletedProcess(args=["mysql"], returncode=0, stdout="", stderr="")
        with patch("ultrabunt.core.services.buntage_install.execution"
                   ".subprocess_runner.subprocess.run", return_value=done) as mock_run:
            ok = sites.check_database({"DB_NAME": "wp", "DB_USER": "u", "DB_PASSWORD": "pa$HOMEx$HOME"})
        assert ok is True
        assert mock_run.call_args.kwargs["env"]["MYSQL_PWD"] == "pa$HOMEx$HOME"

    def test_check_site(self):
        def fake_check(url, **kwargs):
            return {"url": url, "code": 301 if url.startswith("http:") else None, "time_ms": None}

        with patch(f"{_SITES}.http_check", side_effect=fake_check), \
             patch(f"{_SITES}.resolve_host", return_value=["93.184.216.34"]):
            r = sites.check_site("example.com")
        assert r["ok"] is True
        assert r["http"]["code"] == 301
        assert r["https"]["code"] is None
        assert r["dns"] == ["93.184.216.34"]


class TestSiteManagement:
    def test_enable(self, site):
        with patch(f"{_SITES}.run_steps", return_value={"ok": True, "steps_run": 3}) as mock_steps:
            r = sites.enable_site("example.com")
        assert r == {"ok": True, "message": "example.com enabled"}
        steps = mock_steps.call_args.args[0]
        assert steps[0]["cmd"][:2] == ["ln", "-sf"]
        assert steps[1]["cmd"] == ["nginx", "-t"]

    def test_disable(self, settings, site):
        enabled = settings.nginx_path / "sites-enabled" / "example.com"
        with patch(f"{_SITES}.run_steps", return_value={"ok": True, "steps_run": 2}):
            r = sites.disable_site("example.com")
        assert r["ok"] is True
        assert not enabled.is_symlink()
        assert sites.site_enabled("example.com") is False

    def test_unknown_site(self):
        assert sites.enable_site("ghost.com")["ok"] is False
        assert sites.disable_site("ghost.com")["ok"] is False

    def test_delete_requires_exact_confirmation(self, site):
        with patch(f"{_SITES}.run_command") as mock_run:
            r = sites.delete_site("example.com", "delete example.com")
        mock_run.assert_not_called()
        assert r["cancelled"] is True
        assert site.is_dir()

    def test_delete(self, settings, site):
        with patch(f"{_SITES}.run_command", return_value=_OK) as mock_run:
            r = sites.delete_site("example.com", "DELETE example.com")
        assert r["ok"] is True
        assert not site.exists()
        assert not (settings.nginx_path / "sites-available" / "example.com").exists()
        assert not (settings.nginx_path / "sites-enabled" / "example.com").is_symlink()
        assert mock_run.call_args_list[0].args[0] == ["systemctl", "reload", "nginx"]
        assert AuditWriter().read_all()[-1].operation == "wordpress-delete"
