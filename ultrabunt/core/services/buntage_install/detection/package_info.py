"""
L3 Detection — Per-buntage details for the info screen.
"""

from __future__ import annotations

import logging
from typing import Any

from ultrabunt.core.models.buntage import Buntage, InstallMethod
from ultrabunt.core.services.buntage_install.data.custom_recipes import CUSTOM_RECIPES
from ultrabunt.core.services.buntage_install.detection.installed_cache import (
    InstalledCache,
    binary_present,
    is_installed,
    run_query,
)

logger = logging.getLogger(__name__)

_SNAP_KEYS = ("installed:", "tracking:")
_FLATPAK_KEYS = ("Version:", "Branch:", "Ref:")


def _apt_details(package: str) -> tuple[str, list[str]]:
    version = ""
    r = run_query(["dpkg-query", "-W", "-f=${Version}", package])
    if r and r.returncode == 0:
        version = r.stdout.strip()
    extra = []
    r = run_query(["dpkg", "-L", package])
    if r and r.returncode == 0:
        files = [line for line in r.stdout.splitlines() if line.strip()]
        extra.append(f"Installed files: {len(files)}")
    return version, extra


def _matching_lines(stdout: str, prefixes: tuple[str, ...]) -> list[str]:
    return [
        line.strip() for line in stdout.splitlines()
        if line.strip().startswith(prefixes)
    ]


def _snap_details(package: str) -> tuple[str, list[str]]:
    r = run_query(["snap", "info", package])
    if not r or r.returncode != 0:
        return "", []
    lines = _matching_lines(r.stdout, _SNAP_KEYS)
    version = ""
    for line in lines:
        if line.startswith("installed:"):
            parts = line.split(":", 1)[1].split()
            version = parts[0] if parts else ""
    return version, lines


def _flatpak_details(package: str) -> tuple[str, list[str]]:
    r = run_query(["flatpak", "info", package])
    if not r or r.returncode != 0:
        return "", []
    lines = _matching_lines(r.stdout, _FLATPAK_KEYS)
    version = ""
    for line in lines:
        if line.startswith("Version:"):
            version = line.split(":", 1)[1].strip()
    return version, lines


def _binary_version(binary: str) -> str:
    r = run_query([binary, "--version"])
    if not r or r.returncode != 0:
        return ""
    first = (r.stdout or r.stderr).strip().splitlines()
    return first[0] if first else ""


def get_package_details(buntage: Buntage, cache: InstalledCache | None = None) -> dict[str, Any]:
    """Everything the info screen shows about one buntage."""
    installed = is_installed(buntage, cache)
    details: dict[str, Any] = {
        "name": buntage.name,
        "package": buntage.package,
        "description": buntage.description,
        "method": buntage.method.value,
        "category": buntage.category,
        "deps": list(buntage.deps),
        "installed": installed,
        "version": "",
        "extra": [],
    }
    if not installed:
        return details

    method = buntage.method
    check = CUSTOM_RECIPES.get(buntage.name, {}).get("check", {})

    if method in (InstallMethod.APT, InstallMethod.DEB):
        details["version"], details["extra"] = _apt_details(buntage.package)
    elif method == InstallMethod.SNAP:
        details["version"], details["extra"] = _snap_details(buntage.package)
    elif method == InstallMethod.FLATPAK:
        details["version"], details["extra"] = _flatpak_details(buntage.package)
    elif "apt" in check:
        details["version"], details["extra"] = _apt_details(check["apt"])
    else:
        binary = check.get("binary") or buntage.check_binary
        if binary and binary_present(binary):
            details["version"] = _binary_version(binary)
    return details
