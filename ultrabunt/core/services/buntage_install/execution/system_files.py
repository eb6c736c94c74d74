"""
L4 Execution — Writing files that may belong to root.

Writes directly when the process may, otherwise goes through
``sudo dd`` / ``sudo rm`` via the subprocess runner.  Honours dry run.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Any

from ultrabunt.core.services.buntage_install.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)


def write_system_file(path: Path, content: str, *, mode: int | None = None) -> dict[str, Any]:
    """Write *content* to *path*, escalating to sudo on permission errors."""
    from ultrabunt.core.context import is_dry_run

    if is_dry_run():
        logger.info("[dry-run] write %s (%d bytes)", path, len(content))
        return {"ok": True, "path": str(path)}

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if mode is not None:
            os.chmod(path, mode)
        logger.debug("Wrote %s", path)
        return {"ok": True, "path": str(path)}
    except PermissionError:
        logger.debug("No write access to %s, using sudo", path)

    r = run_command(["mkdir", "-p", str(path.parent)], needs_sudo=True)
    if not r["ok"]:
        return r
    # dd does not echo stdin, so secrets never reach the log
    r = run_command(["dd", f"of={path}", "status=none"], needs_sudo=True, input_text=content)
    if not r["ok"]:
        return {"ok": False, "error": f"Cannot write {path}: {r['error']}"}
    if mode is not None:
        r = run_command(["chmod", format(mode, "o"), str(path)], needs_sudo=True)
        if not r["ok"]:
            return r
    return {"ok": True, "path": str(path)}


def copy_system_file(src: Path, dest: Path) -> dict[str, Any]:
    """Copy *src* to *dest* preserving metadata."""
    from ultrabunt.core.context import is_dry_run

    if is_dry_run():
        logger.info("[dry-run] copy %s → %s", src, dest)
        return {"ok": True, "path": str(dest)}
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dest)
        return {"ok": True, "path": str(dest)}
    except PermissionError:
        pass
    r = run_command(["mkdir", "-p", str(dest.parent)], needs_sudo=True)
    if not r["ok"]:
        return r
    r = run_command(["cp", "-p", str(src), str(dest)], needs_sudo=True)
    if not r["ok"]:
        return {"ok": False, "error": f"Cannot copy {src} to {dest}: {r['error']}"}
    return {"ok": True, "path": str(dest)}


def remove_system_path(path: Path) -> dict[str, Any]:
    """Delete a file, symlink or directory tree.  Missing paths are fine."""
    from ultrabunt.core.context import is_dry_run

    if not path.exists() and not path.is_symlink():
        return {"ok": True, "path": str(path)}
    if is_dry_run():
        logger.info("[dry-run] remove %s", path)
        return {"ok": True, "path": str(path)}
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
        return {"ok": True, "path": str(path)}
    except PermissionError:
        pass
    r = run_command(["rm", "-rf", str(path)], needs_sudo=True)
    if not r["ok"]:
        return {"ok": False, "error": f"Cannot remove {path}: {r['error']}"}
    return {"ok": True, "path": str(path)}


def read_system_file(path: Path) -> str | None:
    """Text of *path*, read through ``sudo cat`` when it is root-only.

    Returns None when the file does not exist or cannot be read.
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except PermissionError:
        logger.debug("No read access to %s, using sudo", path)
    r = run_command(["cat", str(path)], needs_sudo=True, full_output=True)
    if not r["ok"]:
        return None
    return r["stdout"]
