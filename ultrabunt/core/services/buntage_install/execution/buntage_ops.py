"""
L4 Execution — Buntage install, removal, reinstall and update.

High-level operations on a single buntage.  Every function returns a
result dict and never raises for package-manager failures:

    {"ok": True, "message": "..."}      on success
    {"ok": False, "error": "..."}       on failure

Each run is recorded in the audit ledger and refreshes the installed
cache for the buntage it touched.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from ultrabunt.core.context import is_dry_run
from ultrabunt.core.models.buntage import Buntage
from ultrabunt.core.persistence.audit import record
from ultrabunt.core.services.buntage_install.data.catalog import (
    UnknownBuntageError,
    get_buntage,
    get_catalog,
)
from ultrabunt.core.services.buntage_install.detection.installed_cache import (
    InstalledCache,
    get_cache,
    is_installed,
)
from ultrabunt.core.services.buntage_install.execution.subprocess_runner import run_steps
from ultrabunt.core.services.buntage_install.resolver.method_selection import (
    build_install_steps,
    build_remove_steps,
    build_update_steps,
)

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _settle(buntage: Buntage, cache: InstalledCache, expected: bool) -> None:
    """Refresh the cache after a change and warn if it didn't stick."""
    if is_dry_run():
        return
    state = cache.refresh(buntage)
    if state != expected:
        logger.warning(
            "%s reported success but is %s installed",
            buntage.name, "still" if state else "not",
        )


def missing_deps(buntage: Buntage, cache: InstalledCache) -> list[str]:
    """Dependencies of *buntage* that are not installed, in declared order."""
    return [d for d in buntage.deps if not is_installed(get_buntage(d), cache)]


def installed_dependents(name: str, cache: InstalledCache) -> list[str]:
    """Installed buntages that declare *name* as a dependency."""
    return sorted(
        b.name for b in get_catalog().values()
        if name in b.deps and is_installed(b, cache)
    )


def install_buntage(
    name: str,
    *,
    cache: InstalledCache | None = None,
    with_deps: bool = False,
    _chain: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Install one buntage.

    Args:
        name: Catalog name.
        cache: Installed cache (default: process cache).
        with_deps: Install missing dependencies first instead of refusing.

    Returns:
        ``{"ok": True, "message": "...", "installed_deps": [...]}`` or
        error dict.  A missing dependency without ``with_deps`` gives
        ``{"ok": False, "error": "...", "missing_deps": [...]}``.
    """
    try:
        buntage = get_buntage(name)
    except UnknownBuntageError as e:
        return {"ok": False, "error": str(e)}
    if cache is None:
        cache = get_cache()

    if is_installed(buntage, cache):
        return {"ok": True, "message": f"{name} is already installed", "already_installed": True}

    missing = missing_deps(buntage, cache)
    installed_deps: list[str] = []
    if missing and not with_deps:
        dep = missing[0]
        logger.warning("%s requires %s", name, dep)
        return {
            "ok": False,
            "error": f"{name} requires {dep}. Install {dep} first.",
            "missing_deps": missing,
        }
    for dep in missing:
        if dep in _chain:
            return {"ok": False, "error": f"Dependency cycle: {' → '.join(_chain + (name, dep))}"}
        logger.info("Installing dependency %s for %s", dep, name)
        dep_result = install_buntage(dep, cache=cache, with_deps=True, _chain=_chain + (name,))
        if not dep_result["ok"]:
            return {
                "ok": False,
                "error": f"Dependency {dep} failed: {dep_result['error']}",
                "missing_deps": missing,
            }
        installed_deps.append(dep)
        installed_deps.extend(dep_result.get("installed_deps", []))

    logger.info("Installing %s via %s", name, buntage.method.value)
    start = time.monotonic()
    result = run_steps(build_install_steps(buntage, cache))
    duration = _elapsed_ms(start)

    if not result["ok"]:
        record("install", name, status="failed", method=buntage.method.value,
               error=result["error"], duration_ms=duration)
        logger.error("Failed to install %s: %s", name, result["error"])
        return {**result, "installed_deps": installed_deps}

    _settle(buntage, cache, expected=True)
    record("install", name, status="ok", method=buntage.method.value,
           duration_ms=duration, deps=installed_deps)
    return {
        "ok": True,
        "message": f"{name} installed",
        "installed_deps": installed_deps,
        "steps_run": result["steps_run"],
    }


def remove_buntage(
    name: str,
    *,
    cache: InstalledCache | None = None,
    purge_data: bool = False,
) -> dict[str, Any]:
    """Remove one installed buntage.

    Installed dependents are reported in the result but do not block
    the removal.
    """
    try:
        buntage = get_buntage(name)
    except UnknownBuntageError as e:
        return {"ok": False, "error": str(e)}
    if cache is None:
        cache = get_cache()

    if not is_installed(buntage, cache):
        return {"ok": False, "error": f"{name} is not installed"}

    dependents = installed_dependents(name, cache)
    if dependents:
        logger.warning("%s is needed by: %s", name, ", ".join(dependents))

    logger.info("Removing %s%s", name, " (purging data)" if purge_data else "")
    start = time.monotonic()
    result = run_steps(build_remove_steps(buntage, purge_data=purge_data))
    duration = _elapsed_ms(start)

    if not result["ok"]:
        record("remove", name, status="failed", method=buntage.method.value,
               error=result["error"], duration_ms=duration)
        logger.error("Failed to remove %s: %s", name, result["error"])
        return result

    _settle(buntage, cache, expected=False)
    record("remove", name, status="ok", method=buntage.method.value,
           duration_ms=duration, purge_data=purge_data)
    return {
        "ok": True,
        "message": f"{name} removed",
        "dependents": dependents,
        "steps_run": result["steps_run"],
    }


def reinstall_buntage(name: str, *, cache: InstalledCache | None = None) -> dict[str, Any]:
    """Remove (when installed) then install again."""
    try:
        buntage = get_buntage(name)
    except UnknownBuntageError as e:
        return {"ok": False, "error": str(e)}
    if cache is None:
        cache = get_cache()

    if is_installed(buntage, cache):
        removed = remove_buntage(name, cache=cache)
        if not removed["ok"]:
            return removed
        if is_dry_run():
            # Nothing was removed, so the install would short-circuit
            result = run_steps(build_install_steps(buntage, cache))
            return {**result, "message": f"{name} reinstalled"} if result["ok"] else result

    result = install_buntage(name, cache=cache)
    if result["ok"]:
        result["message"] = f"{name} reinstalled"
    return result


def update_buntage(name: str, *, cache: InstalledCache | None = None) -> dict[str, Any]:
    """Update one installed buntage to the newest available version."""
    try:
        buntage = get_buntage(name)
    except UnknownBuntageError as e:
        return {"ok": False, "error": str(e)}
    if cache is None:
        cache = get_cache()

    if not is_installed(buntage, cache):
        return {"ok": False, "error": f"{name} is not installed. Install it first."}

    start = time.monotonic()
    result = run_steps(build_update_steps(buntage))
    duration = _elapsed_ms(start)

    if not result["ok"]:
        record("update", name, status="failed", method=buntage.method.value,
               error=result["error"], duration_ms=duration)
        return result

    record("update", name, status="ok", method=buntage.method.value, duration_ms=duration)
    return {"ok": True, "message": f"{name} updated", "steps_run": result["steps_run"]}
