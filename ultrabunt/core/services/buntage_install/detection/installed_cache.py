"""
L3 Detection — Installed-package cache.

One pass over dpkg, snap and flatpak at startup, so the menu can mark
hundreds of buntages without one query per row.  After an install or
removal only the affected buntage is checked again.

Read-only.  Missing package managers contribute nothing.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from ultrabunt.core.models.buntage import Buntage, InstallMethod
from ultrabunt.core.services.buntage_install.data.custom_recipes import CUSTOM_RECIPES

logger = logging.getLogger(__name__)

INSTALLED_MARK = "✓"
MISSING_MARK = "✗"

_QUERY_TIMEOUT = 30


def run_query(cmd: list[str]) -> subprocess.CompletedProcess | None:
    """Run a read-only query; None when the tool is absent or hangs."""
    try:
        return subprocess.run(cmd, capture_output=True, text=True, timeout=_QUERY_TIMEOUT)
    except FileNotFoundError:
        return None
    except subprocess.TimeoutExpired:
        logger.warning("Timed out: %s", " ".join(cmd))
        return None


def _parse_dpkg(stdout: str) -> set[str]:
    """Installed package names from ``${Package}\\t${Status}`` lines."""
    names = set()
    for line in stdout.splitlines():
        pkg, _, status = line.partition("\t")
        if pkg and status.strip() == "install ok installed":
            names.add(pkg.split(":")[0])  # drop :amd64 multiarch suffix
    return names


def _parse_snap_list(stdout: str) -> set[str]:
    """Snap names from ``snap list`` (first column, header skipped)."""
    lines = stdout.splitlines()[1:]
    return {line.split()[0] for line in lines if line.strip()}


def _parse_flatpak_list(stdout: str) -> set[str]:
    return {line.strip() for line in stdout.splitlines() if line.strip()}


def binary_present(name: str) -> bool:
    """Is *name* on PATH or in a per-user bin directory?"""
    if shutil.which(name):
        return True
    home = Path.home()
    return any((d / name).is_file() for d in (home / ".local" / "bin", home / ".cargo" / "bin"))


class InstalledCache:
    """Names installed per package manager."""

    def __init__(self) -> None:
        self.apt: set[str] = set()
        self.snap: set[str] = set()
        self.flatpak: set[str] = set()
        self.built = False

    def build(self) -> int:
        """Populate from all package managers.  Returns the entry count."""
        r = run_query(["dpkg-query", "-W", "-f=${Package}\t${Status}\n"])
        self.apt = _parse_dpkg(r.stdout) if r and r.returncode == 0 else set()

        r = run_query(["snap", "list"])
        self.snap = _parse_snap_list(r.stdout) if r and r.returncode == 0 else set()

        r = run_query(["flatpak", "list", "--app", "--columns=application"])
        self.flatpak = _parse_flatpak_list(r.stdout) if r and r.returncode == 0 else set()

        self.built = True
        total = len(self.apt) + len(self.snap) + len(self.flatpak)
        logger.info(
            "Installed cache: %d apt, %d snap, %d flatpak",
            len(self.apt), len(self.snap), len(self.flatpak),
        )
        return total

    def ensure_built(self) -> None:
        if not self.built:
            self.build()

    def contains(self, method: InstallMethod, package: str) -> bool:
        self.ensure_built()
        if method == InstallMethod.SNAP:
            return package in self.snap
        if method == InstallMethod.FLATPAK:
            return package in self.flatpak
        return package in self.apt

    def _set(self, bucket: set[str], package: str, present: bool) -> bool:
        if present:
            bucket.add(package)
        else:
            bucket.discard(package)
        return present

    def refresh_apt(self, package: str) -> bool:
        r = run_query(["dpkg-query", "-W", "-f=${Status}", package])
        present = bool(r) and "install ok installed" in r.stdout
        return self._set(self.apt, package, present)

    def refresh(self, buntage: Buntage) -> bool:
        """Check one buntage again.  Returns its installed state."""
        self.ensure_built()
        method = buntage.method
        if method == InstallMethod.SNAP:
            r = run_query(["snap", "list", buntage.package])
            return self._set(self.snap, buntage.package, bool(r) and r.returncode == 0)
        if method == InstallMethod.FLATPAK:
            r = run_query(["flatpak", "info", buntage.package])
            return self._set(self.flatpak, buntage.package, bool(r) and r.returncode == 0)
        if method in (InstallMethod.APT, InstallMethod.DEB):
            return self.refresh_apt(buntage.package)
        check = CUSTOM_RECIPES.get(buntage.name, {}).get("check", {})
        if "apt" in check:
            return self.refresh_apt(check["apt"])
        return is_installed(buntage, self)


_default_cache: InstalledCache | None = None


def get_cache() -> InstalledCache:
    """Process-wide cache, built on first use."""
    global _default_cache
    if _default_cache is None:
        _default_cache = InstalledCache()
    _default_cache.ensure_built()
    return _default_cache


def _pip_installed(package: str) -> bool:
    r = run_query(["pip3", "show", package])
    return bool(r) and r.returncode == 0


def is_installed(buntage: Buntage, cache: InstalledCache | None = None) -> bool:
    """Whether *buntage* is currently installed."""
    if cache is None:
        cache = get_cache()
    method = buntage.method

    if buntage.is_tracked:
        return cache.contains(method, buntage.package)
    if method == InstallMethod.DEB:
        return cache.contains(InstallMethod.APT, buntage.package)
    if method == InstallMethod.PIP:
        if buntage.check_binary:
            return binary_present(buntage.check_binary)
        return _pip_installed(buntage.package)

    check = CUSTOM_RECIPES.get(buntage.name, {}).get("check", {})
    if "apt" in check:
        return cache.contains(InstallMethod.APT, check["apt"])
    if "binary" in check:
        return binary_present(check["binary"])
    if "path" in check:
        return Path(check["path"]).expanduser().exists()
    if buntage.check_binary:
        return binary_present(buntage.check_binary)
    return False


def get_status(buntage: Buntage, cache: InstalledCache | None = None) -> str:
    """``✓`` when installed, ``✗`` otherwise."""
    return INSTALLED_MARK if is_installed(buntage, cache) else MISSING_MARK
