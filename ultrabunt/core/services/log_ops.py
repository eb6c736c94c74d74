"""
Log viewing — session log files and the audit history.
"""

from __future__ import annotations

import logging
from collections import deque
from pathlib import Path
from typing import Any

from ultrabunt.core.context import get_settings
from ultrabunt.core.observability.logging_config import LOG_FILE_PREFIX, LOG_FILE_SUFFIX
from ultrabunt.core.persistence.audit import AuditEntry, AuditWriter

logger = logging.getLogger(__name__)

DEFAULT_TAIL = 50


def list_log_files(log_dir: Path | None = None) -> list[Path]:
    """Session logs in *log_dir* (default: configured), newest first."""
    log_dir = log_dir or get_settings().log_path
    if not log_dir.is_dir():
        return []
    files = [p for p in log_dir.glob(f"{LOG_FILE_PREFIX}*{LOG_FILE_SUFFIX}") if p.is_file()]
    # The timestamp in the name sorts chronologically
    return sorted(files, key=lambda p: p.name, reverse=True)


def tail_log(path: Path | None = None, lines: int = DEFAULT_TAIL) -> dict[str, Any]:
    """Last *lines* lines of *path*, or of the newest session log."""
    if path is None:
        logs = list_log_files()
        if not logs:
            return {"ok": False, "error": f"No log files in {get_settings().log_path}"}
        path = logs[0]
    if not path.is_file():
        return {"ok": False, "error": f"Log file not found: {path}"}
    try:
        with path.open("r", encoding="utf-8", errors="replace") as f:
            tail = [line.rstrip("\n") for line in deque(f, maxlen=max(lines, 0))]
    except OSError as e:
        return {"ok": False, "error": f"Cannot read {path}: {e}"}
    return {"ok": True, "path": str(path), "lines": tail}


def audit_history(n: int = 20) -> list[AuditEntry]:
    """The *n* most recent audit entries, oldest first."""
    return AuditWriter().read_recent(n)
