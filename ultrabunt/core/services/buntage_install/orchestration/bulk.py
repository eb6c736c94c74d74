"""
L5 Orchestration — Bulk operations.

Category-wide and multi-select install/removal, whole-system update
and cleanup, and the package-list export.  Single-buntage work is
delegated to the execution layer; this module only sequences it and
tallies the results.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from ultrabunt.core.persistence.audit import record
from ultrabunt.core.services.buntage_install.data.catalog import (
    UnknownBuntageError,
    buntages_in_category,
    get_buntage,
    get_category,
    list_categories,
)
from ultrabunt.core.services.buntage_install.detection.installed_cache import (
    InstalledCache,
    binary_present,
    get_cache,
    is_installed,
    run_query,
)
from ultrabunt.core.services.buntage_install.execution.buntage_ops import (
    install_buntage,
    remove_buntage,
)
from ultrabunt.core.services.buntage_install.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

EXPORT_RULE = "═" * 59
EXPORT_SUBRULE = "─" * 57

Progress = Callable[[str, int, int], None]


def _tally(
    operation: str,
    target: str,
    names: list[str],
    action: Callable[[str], dict[str, Any]],
    progress: Progress | None,
) -> dict[str, Any]:
    done: list[str] = []
    failed: dict[str, str] = {}
    start = time.monotonic()
    for i, name in enumerate(names, start=1):
        if progress:
            progress(name, i, len(names))
        result = action(name)
        if result["ok"]:
            done.append(name)
        else:
            failed[name] = result["error"]
            logger.error("%s failed for %s: %s", operation, name, result["error"])

    record(
        operation, target,
        status="ok" if not failed else "failed",
        duration_ms=int((time.monotonic() - start) * 1000),
        done=done, failed=sorted(failed),
    )
    return {"ok": not failed, "done": done, "failed": failed}


def bulk_install_category(
    category: str,
    *,
    cache: InstalledCache | None = None,
    with_deps: bool = False,
    progress: Progress | None = None,
) -> dict[str, Any]:
    """Install every not-yet-installed buntage of *category*.

    Dependencies within the category are installed before their
    dependents.

    Returns:
        ``{"ok": bool, "installed": [...], "failed": {name: error},
        "skipped": [...], "message": "..."}``
    """
    if get_category(category) is None:
        return {"ok": False, "error": f"Unknown category: {category}"}
    if cache is None:
        cache = get_cache()

    members = buntages_in_category(category)
    skipped = [b.name for b in members if is_installed(b, cache)]
    todo = [b.name for b in _deps_first([b for b in members if b.name not in skipped])]
    logger.info("Bulk install %s: %d to install, %d already installed",
                category, len(todo), len(skipped))

    result = _tally(
        "bulk-install", category, todo,
        lambda n: install_buntage(n, cache=cache, with_deps=with_deps),
        progress,
    )
    return {
        "ok": result["ok"],
        "installed": result["done"],
        "failed": result["failed"],
        "skipped": skipped,
        "message": f"Installed: {len(result['done'])}  Failed: {len(result['failed'])}"
                   f"  Skipped: {len(skipped)}",
    }


def bulk_remove_category(
    category: str,
    *,
    cache: InstalledCache | None = None,
    progress: Progress | None = None,
) -> dict[str, Any]:
    """Remove every installed buntage of *category*.

    Dependents are removed before the buntages they depend on.
    """
    if get_category(category) is None:
        return {"ok": False, "error": f"Unknown category: {category}"}
    if cache is None:
        cache = get_cache()

    installed = [b for b in buntages_in_category(category) if is_installed(b, cache)]
    todo = [b.name for b in _dependents_first(installed)]
    logger.info("Bulk remove %s: %d installed", category, len(todo))

    result = _tally(
        "bulk-remove", category, todo,
        lambda n: remove_buntage(n, cache=cache),
        progress,
    )
    return {
        "ok": result["ok"],
        "removed": result["done"],
        "failed": result["failed"],
        "message": f"Removed: {len(result['done'])}  Failed: {len(result['failed'])}",
    }


def _topological(buntages: list, *, deps_first: bool) -> list:
    """*buntages* ordered by the deps between them, otherwise as given.

    ``deps_first`` puts dependencies before their dependents (install
    order); without it dependents come first (removal order).
    """
    by_name = {b.name: b for b in buntages}
    before: dict[str, list[str]] = {b.name: [] for b in buntages}
    for b in buntages:
        for dep in b.deps:
            if dep not in by_name:
                continue
            if deps_first:
                before[b.name].append(dep)
            else:
                before[dep].append(b.name)

    ordered: list = []
    seen: set[str] = set()

    def visit(name: str) -> None:
        if name in seen:
            return
        seen.add(name)
        for other in before[name]:
            visit(other)
        ordered.append(by_name[name])

    for b in buntages:
        visit(b.name)
    return ordered


def _deps_first(buntages: list) -> list:
    return _topological(buntages, deps_first=True)


def _dependents_first(buntages: list) -> list:
    return _topological(buntages, deps_first=False)


def install_selected(
    names: list[str],
    *,
    cache: InstalledCache | None = None,
    with_deps: bool = False,
    progress: Progress | None = None,
) -> dict[str, Any]:
    """Install the named buntages in the given order."""
    if cache is None:
        cache = get_cache()
    skipped = []
    todo = []
    for name in names:
        try:
            b = get_buntage(name)
        except UnknownBuntageError:
            todo.append(name)  # reported as failed by install_buntage
            continue
        (skipped if is_installed(b, cache) else todo).append(name)

    result = _tally(
        "bulk-install", ",".join(names), todo,
        lambda n: install_buntage(n, cache=cache, with_deps=with_deps),
        progress,
    )
    return {
        "ok": result["ok"],
        "installed": result["done"],
        "failed": result["failed"],
        "skipped": skipped,
        "message": f"Installed: {len(result['done'])}  Failed: {len(result['failed'])}"
                   f"  Skipped: {len(skipped)}",
    }


def remove_selected(
    names: list[str],
    *,
    cache: InstalledCache | None = None,
    progress: Progress | None = None,
) -> dict[str, Any]:
    """Remove the named buntages in the given order."""
    if cache is None:
        cache = get_cache()
    result = _tally(
        "bulk-remove", ",".join(names), list(names),
        lambda n: remove_buntage(n, cache=cache),
        progress,
    )
    return {
        "ok": result["ok"],
        "removed": result["done"],
        "failed": result["failed"],
        "message": f"Removed: {len(result['done'])}  Failed: {len(result['failed'])}",
    }


# ── System-wide maintenance ─────────────────────────────────────

def _run_all(operation: str, steps: list[tuple[str, list[str], bool]]) -> dict[str, Any]:
    """Run every step even when earlier ones fail; report each."""
    results = []
    start = time.monotonic()
    for label, cmd, needs_sudo in steps:
        logger.info("→ %s", label)
        r = run_command(cmd, needs_sudo=needs_sudo)
        results.append({"label": label, "ok": r["ok"], "error": r.get("error", "")})
    failed = [r["label"] for r in results if not r["ok"]]
    record(operation, "system", status="ok" if not failed else "failed",
           duration_ms=int((time.monotonic() - start) * 1000), failed=failed)
    return {
        "ok": not failed,
        "steps": results,
        "message": f"{len(results) - len(failed)}/{len(results)} steps succeeded",
    }


def update_all() -> dict[str, Any]:
    """Refresh package lists and upgrade everything apt, snap and flatpak manage."""
    steps = [
        ("Update APT package lists", ["apt-get", "update"], True),
        ("Upgrade APT packages", ["apt-get", "upgrade", "-y"], True),
    ]
    if binary_present("snap"):
        steps.append(("Refresh snaps", ["snap", "refresh"], True))
    if binary_present("flatpak"):
        steps.append(("Update flatpak apps", ["flatpak", "update", "-y"], False))
    return _run_all("update-all", steps)


def parse_disabled_snaps(stdout: str) -> list[tuple[str, str]]:
    """(name, revision) of disabled revisions in ``snap list --all`` output."""
    revisions = []
    for line in stdout.splitlines()[1:]:
        cols = line.split()
        if len(cols) >= 3 and "disabled" in cols[-1]:
            revisions.append((cols[0], cols[2]))
    return revisions


def cleanup() -> dict[str, Any]:
    """Free disk space: apt caches, old snap revisions, unused flatpak runtimes, journal."""
    steps = [
        ("Remove unused packages", ["apt-get", "autoremove", "-y"], True),
        ("Clean obsolete package files", ["apt-get", "autoclean", "-y"], True),
        ("Clean package cache", ["apt-get", "clean"], True),
    ]
    if binary_present("snap"):
        r = run_query(["snap", "list", "--all"])
        if r and r.returncode == 0:
            for name, rev in parse_disabled_snaps(r.stdout):
                steps.append((f"Remove {name} revision {rev}",
                              ["snap", "remove", name, f"--revision={rev}"], True))
    if binary_present("flatpak"):
        steps.append(("Remove unused flatpak runtimes", ["flatpak", "uninstall", "--unused", "-y"], False))
    steps.append(("Vacuum system journal", ["journalctl", "--vacuum-time=7d"], True))
    return _run_all("cleanup", steps)


# ── Export ──────────────────────────────────────────────────────

def default_export_path(fmt: str = "text", now: datetime | None = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    suffix = "json" if fmt == "json" else "txt"
    return Path("/tmp") / f"ultrabunt-packages-{stamp}.{suffix}"


def collect_package_list(cache: InstalledCache | None = None) -> list[dict[str, Any]]:
    """Per-category buntage listing with installed state."""
    if cache is None:
        cache = get_cache()
    listing = []
    for cat in list_categories():
        listing.append({
            "id": cat.id,
            "label": cat.label,
            "buntages": [
                {
                    "name": b.name,
                    "installed": is_installed(b, cache),
                    "method": b.method.value,
                    "description": b.description,
                }
                for b in buntages_in_category(cat.id)
            ],
        })
    return listing


def render_package_list(listing: list[dict[str, Any]], now: datetime | None = None) -> str:
    now = now or datetime.now()
    stamp = now.strftime("%a %b %d %H:%M:%S %Y")
    lines = [f"ULTRABUNT BUNTAGE LIST - {stamp}", EXPORT_RULE, ""]
    for cat in listing:
        lines += ["", f"[{cat['label']}]", EXPORT_SUBRULE]
        for b in cat["buntages"]:
            status = "[INSTALLED]" if b["installed"] else "[NOT INSTALLED]"
            lines.append(f"{b['name']:<20} {status:<15} {b['description']}")
    lines += ["", EXPORT_RULE, f"Export completed: {stamp}"]
    return "\n".join(lines) + "\n"


def export_package_list(
    path: Path | None = None,
    fmt: str = "text",
    *,
    cache: InstalledCache | None = None,
) -> dict[str, Any]:
    """Write the package listing to *path* (default: timestamped file in /tmp).

    Args:
        fmt: ``"text"`` for the aligned report, ``"json"`` for machine use.
    """
    if fmt not in ("text", "json"):
        return {"ok": False, "error": f"Unknown export format: {fmt}"}
    now = datetime.now()
    path = path or default_export_path(fmt, now)
    listing = collect_package_list(cache)

    if fmt == "json":
        content = json.dumps(
            {"exported": now.isoformat(timespec="seconds"), "categories": listing},
            indent=2, ensure_ascii=False,
        ) + "\n"
    else:
        content = render_package_list(listing, now)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        return {"ok": False, "error": f"Cannot write {path}: {e}"}

    total = sum(len(c["buntages"]) for c in listing)
    installed = sum(1 for c in listing for b in c["buntages"] if b["installed"])
    logger.info("Exported %d buntages (%d installed) to %s", total, installed, path)
    return {"ok": True, "path": str(path), "total": total, "installed": installed,
            "message": f"Buntage list exported to {path}"}
