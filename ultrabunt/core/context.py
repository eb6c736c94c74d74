"""
Process context — settings and run mode for the current process.

Set ONCE at startup by the CLI root group (tests set it from fixtures):

    - Settings:  context.set_settings(load_settings(...))
    - Dry run:   context.set_dry_run(True)

Module-level singleton.  ``get_settings()`` falls back to defaults
when nothing was registered, so library callers never need to
bootstrap anything.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ultrabunt.core.models.settings import Settings

_settings: Optional[Settings] = None
_dry_run: bool = False
_log_file: Optional[Path] = None


def set_settings(settings: Settings) -> None:
    """Register the settings for the current process."""
    global _settings
    _settings = settings


def get_settings() -> Settings:
    """Return the registered settings, or defaults if unset."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_dry_run(enabled: bool) -> None:
    global _dry_run
    _dry_run = enabled


def is_dry_run() -> bool:
    return _dry_run


def set_log_file(path: Optional[Path]) -> None:
    """Remember the session log file (shown in system info and farewell)."""
    global _log_file
    _log_file = path


def get_log_file() -> Optional[Path]:
    return _log_file


def reset() -> None:
    """Forget everything (tests)."""
    global _settings, _dry_run, _log_file
    _settings = None
    _dry_run = False
    _log_file = None
