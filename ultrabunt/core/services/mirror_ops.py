"""
APT mirror selection — measure, rank and switch the archive mirror.

Handles both source formats:

    one-line   deb http://archive.ubuntu.com/ubuntu/ noble main restricted
    deb822     Types: deb
               URIs: http://archive.ubuntu.com/ubuntu/
               Suites: noble noble-updates

Only the archive mirror is switched; entries for the ``-security``
pocket are left untouched.  The previous file is backed up first and
can be restored.
"""

from __future__ import annotations

import logging
import time
import urllib.request
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from ultrabunt import __version__
from ultrabunt.core.context import get_settings
from ultrabunt.core.persistence.audit import record
from ultrabunt.core.services.buntage_install.execution.subprocess_runner import run_command
from ultrabunt.core.services.buntage_install.execution.system_files import (
    copy_system_file,
    write_system_file,
)

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"

# Well-known files under sources.list.d that carry the main archive
_DROPIN_CANDIDATES = ("ubuntu.sources", "official-package-repositories.list")


def _norm(uri: str) -> str:
    return uri.rstrip("/")


def _is_deb822(text: str) -> bool:
    return any(line.strip().startswith("URIs:") for line in text.splitlines())


def _oneline_fields(line: str) -> tuple[str, str] | None:
    """(uri, suite) of an active one-line ``deb`` entry."""
    stripped = line.strip()
    if not stripped.startswith(("deb ", "deb-src ")):
        return None
    tokens = stripped.split()[1:]
    if tokens and tokens[0].startswith("["):
        # skip "[arch=amd64 signed-by=...]" options
        while tokens and not tokens[0].endswith("]"):
            tokens.pop(0)
        tokens = tokens[1:]
    if len(tokens) < 2:
        return None
    return tokens[0], tokens[1]


def _stanzas(text: str) -> list[list[str]]:
    stanzas, current = [], []
    for line in text.splitlines():
        if line.strip():
            current.append(line)
        elif current:
            stanzas.append(current)
            current = []
    if current:
        stanzas.append(current)
    return stanzas


def _field(stanza: list[str], name: str) -> list[str]:
    for line in stanza:
        key, sep, value = line.partition(":")
        if sep and key.strip() == name and not line.lstrip().startswith("#"):
            return value.split()
    return []


def _security_only(suites: list[str]) -> bool:
    return bool(suites) and all(s.endswith("-security") for s in suites)


def parse_current_mirror(text: str) -> str | None:
    """First archive (non-security) URI in a sources file's text."""
    if _is_deb822(text):
        for stanza in _stanzas(text):
            if _field(stanza, "Enabled") == ["no"]:
                continue
            uris = _field(stanza, "URIs")
            if uris and not _security_only(_field(stanza, "Suites")):
                return uris[0]
        return None
    for line in text.splitlines():
        fields = _oneline_fields(line)
        if fields and not fields[1].endswith("-security"):
            return fields[0]
    return None


def read_current_mirror(path: Path) -> str | None:
    try:
        return parse_current_mirror(path.read_text(encoding="utf-8"))
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None


def rewrite_mirror(text: str, old: str, new: str) -> str:
    """Replace archive URI *old* with *new*, leaving security entries alone."""
    new = new if new.endswith("/") else new + "/"
    if _is_deb822(text):
        result = []
        for block in _split_keep(text):
            suites = _field(block.splitlines(), "Suites")
            if _security_only(suites):
                result.append(block)
                continue
            lines = []
            for line in block.splitlines(keepends=True):
                key, sep, value = line.partition(":")
                if sep and key.strip() == "URIs":
                    uris = [new if _norm(u) == _norm(old) else u for u in value.split()]
                    ending = "\n" if line.endswith("\n") else ""
                    line = f"{key}: {' '.join(uris)}{ending}"
                lines.append(line)
            result.append("".join(lines))
        return "".join(result)

    out = []
    for line in text.splitlines(keepends=True):
        fields = _oneline_fields(line)
        if fields and _norm(fields[0]) == _norm(old) and not fields[1].endswith("-security"):
            line = line.replace(fields[0], new, 1)
        out.append(line)
    return "".join(out)


def _split_keep(text: str) -> list[str]:
    """Split into stanza blocks, blank separators kept with the block before."""
    blocks, current = [], []
    for line in text.splitlines(keepends=True):
        current.append(line)
        if not line.strip():
            blocks.append("".join(current))
            current = []
    if current:
        blocks.append("".join(current))
    return blocks


def find_sources_file() -> Path | None:
    """The file that holds the main archive entry."""
    settings = get_settings()
    primary = settings.sources_path
    if primary.is_file() and read_current_mirror(primary):
        return primary
    dropins = primary.parent / "sources.list.d"
    for name in _DROPIN_CANDIDATES:
        candidate = dropins / name
        if candidate.is_file() and read_current_mirror(candidate):
            return candidate
    return None


# ── Latency ─────────────────────────────────────────────────────

def measure_latency(url: str, timeout: float = 5.0) -> float | None:
    """HTTP round-trip to *url* in milliseconds, None when unreachable."""
    req = urllib.request.Request(
        url, method="HEAD", headers={"User-Agent": f"ultrabunt/{__version__}"},
    )
    start = time.monotonic()
    try:
        with urllib.request.urlopen(req, timeout=timeout):
            pass
    except OSError as e:
        logger.debug("Mirror %s unreachable: %s", url, e)
        return None
    return round((time.monotonic() - start) * 1000, 1)


def rank_mirrors(
    mirrors: list[str] | None = None,
    measure: Callable[[str], float | None] = measure_latency,
) -> list[dict[str, Any]]:
    """Mirrors with their latency, fastest first, unreachable last."""
    if mirrors is None:
        mirrors = get_settings().mirrors
    ranked = [{"url": url, "latency_ms": measure(url)} for url in mirrors]
    ranked.sort(key=lambda m: (m["latency_ms"] is None, m["latency_ms"] or 0.0))
    for m in ranked:
        logger.info("%-50s %s", m["url"],
                    f"{m['latency_ms']} ms" if m["latency_ms"] is not None else "unreachable")
    return ranked


# ── Switch / restore ────────────────────────────────────────────

def _backup_dir() -> Path:
    return get_settings().backup_path / "mirrors"


def list_backups() -> list[Path]:
    """Sources backups, newest first."""
    d = _backup_dir()
    if not d.is_dir():
        return []
    return sorted(d.glob(f"*{BACKUP_SUFFIX}"), key=lambda p: p.name.rsplit(".", 2)[-2], reverse=True)


def _backup_target(backup: Path) -> Path:
    settings = get_settings()
    original = backup.name.rsplit(".", 2)[0]
    if original == settings.sources_path.name:
        return settings.sources_path
    return settings.sources_path.parent / "sources.list.d" / original


def select_mirror(url: str, *, update: bool = True) -> dict[str, Any]:
    """Point the archive entry at *url*, then refresh package lists."""
    if not url.startswith(("http://", "https://")):
        return {"ok": False, "error": f"Not an http(s) mirror URL: {url}"}

    path = find_sources_file()
    if path is None:
        return {"ok": False, "error": "No APT sources file with an archive entry found"}
    current = read_current_mirror(path)
    if current and _norm(current) == _norm(url):
        return {"ok": True, "message": f"Already using {url}", "unchanged": True}

    stamp = datetime.now().strftime("%Y%m%d%H%M%S")
    backup = _backup_dir() / f"{path.name}.{stamp}{BACKUP_SUFFIX}"
    r = copy_system_file(path, backup)
    if not r["ok"]:
        return r

    text = path.read_text(encoding="utf-8")
    r = write_system_file(path, rewrite_mirror(text, current or "", url), mode=0o644)
    if not r["ok"]:
        return r
    logger.info("Mirror switched: %s → %s (backup %s)", current, url, backup)

    if update:
        r = run_command(["apt-get", "update"], needs_sudo=True)
        if not r["ok"]:
            record("mirror-select", url, status="failed", error=r["error"], previous=current)
            return {"ok": False, "error": f"apt-get update failed: {r['error']}",
                    "backup": str(backup)}

    record("mirror-select", url, status="ok", previous=current, backup=str(backup))
    return {"ok": True, "message": f"Mirror set to {url}", "previous": current,
            "backup": str(backup), "path": str(path)}


def restore_mirror(backup: Path | None = None, *, update: bool = True) -> dict[str, Any]:
    """Put back the newest (or the given) sources backup."""
    if backup is None:
        backups = list_backups()
        if not backups:
            return {"ok": False, "error": "No mirror backups found"}
        backup = backups[0]
    if not backup.is_file():
        return {"ok": False, "error": f"Backup not found: {backup}"}

    target = _backup_target(backup)
    r = copy_system_file(backup, target)
    if not r["ok"]:
        return r
    if update:
        r = run_command(["apt-get", "update"], needs_sudo=True)
        if not r["ok"]:
            return {"ok": False, "error": f"apt-get update failed: {r['error']}"}

    record("mirror-restore", str(target), status="ok", backup=str(backup))
    return {"ok": True, "message": f"Restored {target} from {backup.name}", "path": str(target)}
