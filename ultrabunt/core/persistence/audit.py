"""
Audit ledger — append-only operation history.

Every install, removal, update and bulk run appends an entry to an
NDJSON (newline-delimited JSON) file in the state directory.  The
``logs history`` command and the menu's log viewer read it back.

The ledger is append-only: entries are never modified or deleted.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_FILE = "history.ndjson"


class AuditEntry(BaseModel):
    """A single audit log entry."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    operation: str = ""            # install, remove, update, bulk-install, ...
    target: str = ""               # buntage name, category or "system"
    method: str = ""

    status: str = ""               # ok, failed, dry-run
    duration_ms: int = 0
    error: str = ""

    # Extensible context
    context: dict[str, Any] = Field(default_factory=dict)


class AuditWriter:
    """Append-only audit ledger writer.

    Each call to write() appends a single JSON line to the ledger file.
    The file is created if it doesn't exist.
    """

    def __init__(self, path: Path | None = None, state_dir: Path | None = None):
        if path is not None:
            self._path = path
        elif state_dir is not None:
            self._path = state_dir / DEFAULT_AUDIT_FILE
        else:
            from ultrabunt.core.context import get_settings

            self._path = get_settings().state_path / DEFAULT_AUDIT_FILE

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: AuditEntry) -> None:
        """Append an audit entry to the ledger."""
        data = entry.model_dump(mode="json")
        line = json.dumps(data, ensure_ascii=False) + "\n"

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)
            logger.debug("Audit entry written: %s/%s", entry.operation, entry.target)
        except OSError as e:
            logger.error("Failed to write audit entry: %s", e)

    def read_all(self) -> list[AuditEntry]:
        """Read all entries from the ledger, oldest first."""
        if not self._path.is_file():
            return []

        entries = []
        try:
            with self._path.open("r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                        entries.append(AuditEntry.model_validate(data))
                    except (json.JSONDecodeError, Exception) as e:
                        logger.warning("Skipping corrupt audit entry at line %d: %s", line_num, e)
        except OSError as e:
            logger.error("Failed to read audit ledger: %s", e)

        return entries

    def read_recent(self, n: int = 20) -> list[AuditEntry]:
        """Read the most recent N entries."""
        all_entries = self.read_all()
        return all_entries[-n:] if n > 0 else []

    def entry_count(self) -> int:
        """Count entries without loading them all into memory."""
        if not self._path.is_file():
            return 0
        try:
            with self._path.open("r", encoding="utf-8") as f:
                return sum(1 for line in f if line.strip())
        except OSError:
            return 0


def record(
    operation: str,
    target: str,
    *,
    status: str,
    method: str = "",
    error: str = "",
    duration_ms: int = 0,
    **context: Any,
) -> None:
    """Append one entry to the default ledger."""
    from ultrabunt.core.context import is_dry_run

    AuditWriter().write(AuditEntry(
        operation=operation,
        target=target,
        method=method,
        status="dry-run" if is_dry_run() and status == "ok" else status,
        error=error,
        duration_ms=duration_ms,
        context=context,
    ))
