"""
Shared test fixtures and configuration.

Every test runs against temporary directories and an empty,
pre-built installed cache, so nothing queries or touches the host.
"""

from pathlib import Path

import pytest

from ultrabunt.core import context
from ultrabunt.core.models.settings import Settings
from ultrabunt.core.services.buntage_install.data import catalog
from ultrabunt.core.services.buntage_install.detection import installed_cache
from ultrabunt.core.services.buntage_install.detection.installed_cache import InstalledCache


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings whose every path points into tmp_path."""
    return Settings(
        log_dir=str(tmp_path / "logs"),
        backup_dir=str(tmp_path / "backups"),
        state_dir=str(tmp_path / "state"),
        www_root=str(tmp_path / "www"),
        nginx_dir=str(tmp_path / "nginx"),
        apache_dir=str(tmp_path / "apache2"),
        letsencrypt_dir=str(tmp_path / "letsencrypt" / "live"),
        apt_sources=str(tmp_path / "apt" / "sources.list"),
    )


@pytest.fixture
def cache() -> InstalledCache:
    """An empty installed cache that never queries the package managers."""
    c = InstalledCache()
    c.built = True
    return c


@pytest.fixture(autouse=True)
def isolated(settings, cache, tmp_path, monkeypatch):
    """Fresh process context for every test."""
    context.reset()
    catalog.reset_catalog()
    context.set_settings(settings)
    monkeypatch.setattr(installed_cache, "_default_cache", cache)
    # binaries and pip packages on the host must not count as installed
    monkeypatch.setattr(installed_cache, "binary_present", lambda name: False)
    monkeypatch.setattr(installed_cache, "_pip_installed", lambda package: False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("ULTRABUNT_LOG_FILE", str(tmp_path / "logs" / "session.log"))
    for var in ("ULTRABUNT_CONFIG", "ULTRABUNT_LOG_LEVEL", "DEBUG"):
        monkeypatch.delenv(var, raising=False)
    yield
    context.reset()
    catalog.reset_catalog()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """An ultrabunt.yml pointing at tmp_path, for CLI tests."""
    path = tmp_path / "ultrabunt.yml"
    path.write_text(
        "ultrabunt:\n"
        f"  log_dir: {tmp_path / 'logs'}\n"
        f"  backup_dir: {tmp_path / 'backups'}\n"
        f"  state_dir: {tmp_path / 'state'}\n"
        f"  www_root: {tmp_path / 'www'}\n"
        f"  nginx_dir: {tmp_path / 'nginx'}\n"
        f"  apache_dir: {tmp_path / 'apache2'}\n"
        f"  letsencrypt_dir: {tmp_path / 'letsencrypt' / 'live'}\n"
        f"  apt_sources: {tmp_path / 'apt' / 'sources.list'}\n",
        encoding="utf-8",
    )
    return path
