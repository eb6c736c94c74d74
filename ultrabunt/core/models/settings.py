"""
Settings model — validated contents of ultrabunt.yml.

Every key has a default, so a missing config file is a valid
configuration.  Paths are kept as strings in the model and expanded
through the ``*_path`` helpers.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_MIRRORS = [
    "http://archive.ubuntu.com/ubuntu/",
    "http://mirrors.kernel.org/ubuntu/",
    "http://mirror.math.princeton.edu/pub/ubuntu/",
    "http://ftp.halifax.rwth-aachen.de/ubuntu/",
    "http://mirror.aarnet.edu.au/pub/ubuntu/archive/",
    "http://ubuntu.mirrors.ovh.net/ubuntu/",
]


class ExtraBuntage(BaseModel):
    """A user-defined catalog entry declared in ultrabunt.yml."""

    package: str
    description: str = ""
    method: str = "apt"
    category: str = "system"
    deps: list[str] = Field(default_factory=list)
    snap_classic: bool = False
    check_binary: str | None = None


class Settings(BaseModel):
    """Process-wide configuration."""

    php_version: str = "8.3"
    node_lts: str = "20"

    log_dir: str = "/tmp"
    backup_dir: str = "/var/backups/ultrabunt"
    state_dir: str = "~/.local/state/ultrabunt"

    www_root: str = "/var/www"
    nginx_dir: str = "/etc/nginx"
    apache_dir: str = "/etc/apache2"
    letsencrypt_dir: str = "/etc/letsencrypt/live"

    apt_sources: str = "/etc/apt/sources.list"
    mirrors: list[str] = Field(default_factory=lambda: list(DEFAULT_MIRRORS))

    command_timeout: int = 1800

    extra_buntages: dict[str, ExtraBuntage] = Field(default_factory=dict)

    @field_validator("php_version", "node_lts", mode="before")
    @classmethod
    def _stringify_version(cls, v: object) -> str:
        # YAML reads ``php_version: 8.3`` as a float
        return str(v)

    @field_validator("command_timeout")
    @classmethod
    def _positive_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("command_timeout must be positive")
        return v

    def _path(self, value: str) -> Path:
        return Path(value).expanduser()

    @property
    def log_path(self) -> Path:
        return self._path(self.log_dir)

    @property
    def backup_path(self) -> Path:
        return self._path(self.backup_dir)

    @property
    def state_path(self) -> Path:
        return self._path(self.state_dir)

    @property
    def www_path(self) -> Path:
        return self._path(self.www_root)

    @property
    def nginx_path(self) -> Path:
        return self._path(self.nginx_dir)

    @property
    def apache_path(self) -> Path:
        return self._path(self.apache_dir)

    @property
    def letsencrypt_path(self) -> Path:
        return self._path(self.letsencrypt_dir)

    @property
    def sources_path(self) -> Path:
        return self._path(self.apt_sources)
