"""
WordPress text rendering — vhosts, wp-config, salts, credentials.

Everything here is a pure function of its arguments except
``fetch_salts``, which asks the WordPress API.
"""

from __future__ import annotations

import re
import secrets
import string
import urllib.request

from ultrabunt import __version__

SALT_API = "https://api.wordpress.org/secret-key/1.1/salt/"

SALT_KEYS = (
    "AUTH_KEY", "SECURE_AUTH_KEY", "LOGGED_IN_KEY", "NONCE_KEY",
    "AUTH_SALT", "SECURE_AUTH_SALT", "LOGGED_IN_SALT", "NONCE_SALT",
)

STOP_EDITING_MARKER = "/* That's all, stop editing"

_ALNUM = string.ascii_letters + string.digits
# Characters safe inside a single-quoted PHP string
_SALT_CHARS = _ALNUM + "!@#$%^&*()-_ []{}<>~`+=,.;:/?|"
_IDENTIFIER = re.compile(r"^[A-Za-z0-9_]+$")


def generate_password(length: int = 20) -> str:
    """Random alphanumeric password."""
    return "".join(secrets.choice(_ALNUM) for _ in range(length))


def sanitize_identifier(text: str) -> str:
    """*text* with every character outside ``[A-Za-z0-9_]`` replaced by ``_``."""
    return re.sub(r"[^A-Za-z0-9_]", "_", text)


def valid_identifier(text: str) -> bool:
    """Whether *text* may be used unquoted as a database or user name."""
    return bool(_IDENTIFIER.match(text)) and len(text) <= 64


def generate_salts() -> str:
    """The eight ``define()`` salt lines, generated locally."""
    lines = []
    for key in SALT_KEYS:
        value = "".join(secrets.choice(_SALT_CHARS) for _ in range(64))
        lines.append(f"define('{key}', '{value}');")
    return "\n".join(lines) + "\n"


def fetch_salts(timeout: int = 10) -> str:
    """Salts from the WordPress API, or locally generated ones when offline."""
    req = urllib.request.Request(SALT_API, headers={"User-Agent": f"ultrabunt/{__version__}"})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read().decode("utf-8")
    except OSError:
        return generate_salts()
    if all(key in body for key in SALT_KEYS):
        return body if body.endswith("\n") else body + "\n"
    return generate_salts()


def render_wp_config(sample: str, *, db_name: str, db_user: str, db_password: str,
                     salts: str) -> str:
    """Fill ``wp-config-sample.php`` with credentials and salts.

    The sample's ``put your unique phrase here`` block (``AUTH_KEY`` through
    ``NONCE_SALT``) is replaced by *salts*.
    """
    text = (sample.replace("database_name_here", db_name)
                  .replace("username_here", db_user)
                  .replace("password_here", db_password))

    lines = text.splitlines(keepends=True)
    start = end = None
    for i, line in enumerate(lines):
        if start is None and "'AUTH_KEY'" in line:
            start = i
        if "'NONCE_SALT'" in line:
            end = i
    if start is None or end is None or end < start:
        return text
    return "".join(lines[:start]) + salts + "".join(lines[end + 1:])


def insert_before_marker(config: str, snippet: str) -> str:
    """Add *snippet* before the "stop editing" comment, once.

    Falls back to appending when the marker is missing.
    """
    if snippet in config:
        return config
    lines = config.splitlines(keepends=True)
    for i, line in enumerate(lines):
        if STOP_EDITING_MARKER in line:
            return "".join(lines[:i]) + snippet + "\n" + "".join(lines[i:])
    return config.rstrip("\n") + "\n" + snippet + "\n"


_SECURITY_HEADERS = (
    ("X-Frame-Options", '"SAMEORIGIN"'),
    ("X-XSS-Protection", '"1; mode=block"'),
    ("X-Content-Type-Options", '"nosniff"'),
    ("Referrer-Policy", '"no-referrer-when-downgrade"'),
)


def render_nginx_vhost(domain: str, site_dir: str, php_version: str) -> str:
    headers = "\n".join(
        f"    add_header {name} {value} always;" for name, value in _SECURITY_HEADERS
    )
    return f"""server {{
    listen 80;
    listen [::]:80;
    server_name {domain} www.{domain};
    root {site_dir};
    index index.php index.html index.htm;

{headers}

    client_max_body_size 100M;

    location / {{
        try_files $uri $uri/ /index.php?$args;
    }}

    location ~ \\.php$ {{
        include snippets/fastcgi-php.conf;
        fastcgi_pass unix:/var/run/php/php{php_version}-fpm.sock;
        fastcgi_param SCRIPT_FILENAME $document_root$fastcgi_script_name;
        include fastcgi_params;
    }}

    location ~ /\\.ht {{
        deny all;
    }}

    location ~ /\\.user\\.ini {{
        deny all;
    }}

    location ~ /wp-config\\.php {{
        deny all;
    }}

    location = /xmlrpc.php {{
        deny all;
        access_log off;
        log_not_found off;
    }}

    location ~* \\.(css|gif|ico|jpeg|jpg|js|png)$ {{
        expires 1y;
        add_header Cache-Control "public, immutable";
    }}
}}
"""


def render_apache_vhost(domain: str, site_dir: str) -> str:
    headers = "\n".join(
        f"    Header always set {name} {value}" for name, value in _SECURITY_HEADERS
    )
    denied = "\n\n".join(
        f"    <Files {name}>\n        Require all denied\n    </Files>"
        for name in ("wp-config.php", ".htaccess", ".user.ini", "xmlrpc.php")
    )
    return f"""<VirtualHost *:80>
    ServerName {domain}
    ServerAlias www.{domain}
    DocumentRoot {site_dir}

{headers}

    <Directory {site_dir}>
        Options -Indexes +FollowSymLinks
        AllowOverride All
        Require all granted
    </Directory>

{denied}

    ErrorLog ${{APACHE_LOG_DIR}}/{domain}_error.log
    CustomLog ${{APACHE_LOG_DIR}}/{domain}_access.log combined
</VirtualHost>
"""


def render_credentials(*, domain: str, site_dir: str, web_server: str, db_name: str,
                       db_user: str, db_password: str, created: str) -> str:
    return f"""WordPress installation: {domain}
Created: {created}

Site directory: {site_dir}
Web server: {web_server}

Database name: {db_name}
Database user: {db_user}
Database password: {db_password}

Next steps:
  1. Open http://{domain} and finish the WordPress installer.
  2. Run 'ultrabunt wordpress ssl {domain} --email you@example.com' for HTTPS.
  3. Run 'ultrabunt wordpress harden {domain}' to apply security hardening.
"""
