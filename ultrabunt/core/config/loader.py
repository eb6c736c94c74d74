"""
Configuration loader — reads ultrabunt.yml into the Settings model.

Search order:
    --config flag  >  $ULTRABUNT_CONFIG  >  ./ultrabunt.yml (walking up)
    >  ~/.config/ultrabunt/ultrabunt.yml

No file at all is not an error: the defaults describe a stock
Ubuntu/Mint machine.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from ultrabunt.core.models.settings import Settings

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "ultrabunt.yml"
CONFIG_ENV = "ULTRABUNT_CONFIG"


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""


def user_config_path() -> Path:
    """Per-user config location (XDG)."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "ultrabunt" / CONFIG_FILE


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Locate ultrabunt.yml.

    Args:
        start_dir: Directory to start the upward search from (default: cwd).

    Returns:
        Path to the config file, or None if none exists.
    """
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)

    current = (start_dir or Path.cwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    user_path = user_config_path()
    if user_path.is_file():
        return user_path

    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit config path. If None, searches the default locations.

    Returns:
        Validated Settings model (defaults when no file is found).

    Raises:
        ConfigError: If an explicit or discovered file is missing or invalid.
    """
    explicit = path is not None
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return Settings()

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        raise ConfigError(f"{CONFIG_ENV} points to a missing file: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under an "ultrabunt" key or be flat
    if "ultrabunt" in data and isinstance(data["ultrabunt"], dict):
        data = data["ultrabunt"]

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info(
        "Loaded settings from %s (%d extra buntages)",
        path, len(settings.extra_buntages),
    )
    return settings
