"""
Logging configuration — central setup for the CLI and the menu.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Console levels are resolved in precedence order:
    CLI flag  >  DEBUG env var  >  ULTRABUNT_LOG_LEVEL env var  >  WARNING

Every session also writes a full-detail log file,
``<log_dir>/ultrabunt_<YYYYmmdd_HHMMSS>.log`` unless ULTRABUNT_LOG_FILE
names another path.  Package-manager output is logged at DEBUG, so the
file is where it ends up.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

# ── Format strings ──────────────────────────────────────────────

# WARNING level: minimal, no noise
_FMT_MINIMAL = "%(message)s"

# INFO level: timestamped with module context
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# DEBUG level: full diagnostic with file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

# File output: always full detail
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

LOG_FILE_PREFIX = "ultrabunt_"
LOG_FILE_SUFFIX = ".log"

# Third-party loggers that are noisy at INFO/DEBUG
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def debug_enabled(environ: dict[str, str] | None = None) -> bool:
    """Is the ``DEBUG`` environment variable switched on?"""
    env = os.environ if environ is None else environ
    value = env.get("DEBUG", "").strip().lower()
    return value not in ("", "0", "false", "no", "off")


def session_log_path(log_dir: Path, now: datetime | None = None) -> Path:
    """Build the per-session log file path."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return log_dir / f"{LOG_FILE_PREFIX}{stamp}{LOG_FILE_SUFFIX}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    log_file_level: str | None = "DEBUG",
    quiet_third_party: bool = True,
) -> Path | None:
    """Configure Python logging for the entire process.

    Args:
        level: Console log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to the session log file.
        log_file_level: Level for the log file (default: DEBUG).
        quiet_third_party: If True, keep noisy third-party loggers at WARNING
            unless we're at DEBUG level.

    Returns:
        The log file path actually opened, or None.
    """
    numeric_level = _parse_level(level)

    # ── Console handler (stderr) ────────────────────────────────
    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console)

    # Effective root level = minimum of console and file levels
    effective_level = numeric_level
    opened: Path | None = None

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, encoding="utf-8")
        except OSError as e:
            # Unwritable log dir must not stop the installer
            console.handle(logging.makeLogRecord({
                "msg": f"Cannot open log file {path}: {e}",
                "levelno": logging.WARNING,
                "levelname": "WARNING",
            }))
        else:
            effective_level = min(effective_level, file_level)
            fh.setLevel(file_level)
            fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
            root.addHandler(fh)
            opened = path

    root.setLevel(effective_level)

    # ── Third-party noise control ───────────────────────────────
    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False
    return opened


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
