"""
System information — OS, hardware, storage, package managers, network
and buntage statistics for the info screen and ``system info``.

Every query degrades to "Unknown" / 0 instead of failing: the report
is informational and must render on minimal systems.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
from pathlib import Path
from typing import Any

from ultrabunt.core.context import get_log_file, get_settings
from ultrabunt.core.services.buntage_install.data.catalog import get_catalog
from ultrabunt.core.services.buntage_install.detection.installed_cache import (
    InstalledCache,
    binary_present,
    get_cache,
    is_installed,
    run_query,
)

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


# ── Parsers (pure) ──────────────────────────────────────────────

def parse_os_release(text: str) -> dict[str, str]:
    """KEY=value pairs of /etc/os-release with quotes stripped."""
    values = {}
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() and not key.startswith("#"):
            values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def parse_meminfo(text: str) -> dict[str, int]:
    """/proc/meminfo values in kB."""
    values = {}
    for line in text.splitlines():
        key, sep, rest = line.partition(":")
        parts = rest.split()
        if sep and parts and parts[0].isdigit():
            values[key.strip()] = int(parts[0])
    return values


def parse_cpu_model(text: str) -> str:
    for line in text.splitlines():
        if line.startswith("model name"):
            return line.split(":", 1)[1].strip()
    return UNKNOWN


def parse_nameservers(text: str) -> list[str]:
    servers = []
    for line in text.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == "nameserver":
            servers.append(parts[1])
    return servers


def parse_active_interfaces(text: str) -> list[str]:
    """Interfaces that are UP in ``ip -o link show``, skipping lo/docker/bridges."""
    names = []
    for line in text.splitlines():
        fields = line.split(": ")
        if len(fields) < 3:
            continue
        name = fields[1].split("@")[0]
        if name == "lo" or name.startswith(("docker", "br-", "veth")):
            continue
        flags = fields[2].split(">")[0]
        if "UP" in flags.strip("<").split(","):
            names.append(name)
    return names


def parse_route_source(text: str) -> str:
    """The ``src`` address from ``ip route get``."""
    tokens = text.split()
    if "src" in tokens:
        idx = tokens.index("src")
        if idx + 1 < len(tokens):
            return tokens[idx + 1]
    return UNKNOWN


def format_uptime(seconds: float) -> str:
    minutes = int(seconds // 60)
    days, minutes = divmod(minutes, 24 * 60)
    hours, minutes = divmod(minutes, 60)
    parts = []
    if days:
        parts.append(f"{days} day{'s' if days != 1 else ''}")
    if hours:
        parts.append(f"{hours} hour{'s' if hours != 1 else ''}")
    parts.append(f"{minutes} minute{'s' if minutes != 1 else ''}")
    return ", ".join(parts)


def _human(n_bytes: int) -> str:
    size = float(n_bytes)
    for unit in ("B", "K", "M", "G", "T"):
        if size < 1024 or unit == "T":
            return f"{size:.0f}{unit}" if unit == "B" else f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}T"


# ── Collectors ──────────────────────────────────────────────────

def _read(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""


def _line_count(cmd: list[str], skip: int = 0, needle: str | None = None) -> int:
    r = run_query(cmd)
    if not r or r.returncode != 0:
        return 0
    lines = [line for line in r.stdout.splitlines()[skip:] if line.strip()]
    if needle is not None:
        lines = [line for line in lines if needle in line]
    return len(lines)


def _os_info() -> dict[str, str]:
    release = parse_os_release(_read("/etc/os-release"))
    return {
        "name": release.get("PRETTY_NAME", UNKNOWN),
        "version": release.get("VERSION", "N/A"),
        "kernel": platform.release() or UNKNOWN,
    }


def _hardware_info() -> dict[str, Any]:
    mem = parse_meminfo(_read("/proc/meminfo"))
    total_mb = mem.get("MemTotal", 0) // 1024
    avail_mb = mem.get("MemAvailable", 0) // 1024
    swap_total = mem.get("SwapTotal", 0) // 1024
    swap_used = swap_total - mem.get("SwapFree", 0) // 1024
    return {
        "cpu": parse_cpu_model(_read("/proc/cpuinfo")),
        "cores": os.cpu_count() or 0,
        "memory_total_mb": total_mb,
        "memory_used_mb": total_mb - avail_mb if total_mb else 0,
        "swap_total_mb": swap_total,
        "swap_used_mb": swap_used,
    }


def _storage_info() -> dict[str, Any]:
    try:
        usage = shutil.disk_usage("/")
    except OSError:
        return {"root": UNKNOWN}
    percent = round(usage.used * 100 / usage.total) if usage.total else 0
    return {
        "root": f"{_human(usage.used)} used / {_human(usage.total)} total ({percent}% full)",
        "root_used_bytes": usage.used,
        "root_total_bytes": usage.total,
    }


def _load_info() -> dict[str, Any]:
    uptime = UNKNOWN
    raw = _read("/proc/uptime").split()
    if raw:
        try:
            uptime = format_uptime(float(raw[0]))
        except ValueError:
            pass
    try:
        load = ", ".join(f"{x:.2f}" for x in os.getloadavg())
    except OSError:
        load = UNKNOWN
    try:
        processes = sum(1 for p in Path("/proc").iterdir() if p.name.isdigit())
    except OSError:
        processes = 0
    return {"uptime": uptime, "load_average": load, "processes": processes}


def _package_manager_info() -> dict[str, Any]:
    info: dict[str, Any] = {
        "apt_installed": _line_count(["dpkg", "-l"], needle="ii  "),
        "apt_upgradable": _line_count(["apt", "list", "--upgradable"], needle="upgradable"),
        "apt_autoremovable": _line_count(["apt-get", "autoremove", "--dry-run"], needle="Remv"),
        "snap": None,
        "flatpak": None,
        "pip_packages": None,
        "npm_global": None,
    }
    if binary_present("snap"):
        info["snap"] = {
            "installed": _line_count(["snap", "list"], skip=1),
            "refreshable": _line_count(["snap", "refresh", "--list"], skip=1),
        }
    if binary_present("flatpak"):
        info["flatpak"] = {
            "apps": _line_count(["flatpak", "list", "--app"]),
            "updates": _line_count(["flatpak", "remote-ls", "--updates"]),
            "remotes": _line_count(["flatpak", "remotes"]),
        }
    if binary_present("pip3"):
        info["pip_packages"] = _line_count(["pip3", "list"], skip=2)
    if binary_present("npm"):
        r = run_query(["npm", "list", "-g", "--depth=0"])
        if r and r.returncode == 0:
            info["npm_global"] = sum(1 for line in r.stdout.splitlines()
                                     if line.startswith(("├──", "└──")))
    return info


def _network_info() -> dict[str, Any]:
    r = run_query(["ip", "-o", "link", "show"])
    interfaces = parse_active_interfaces(r.stdout) if r and r.returncode == 0 else []
    r = run_query(["ip", "route", "get", "8.8.8.8"])
    primary_ip = parse_route_source(r.stdout) if r and r.returncode == 0 else UNKNOWN
    r = run_query(["ping", "-c", "1", "-W", "2", "8.8.8.8"])
    return {
        "interfaces": interfaces,
        "primary_ip": primary_ip,
        "internet": bool(r) and r.returncode == 0,
        "dns_servers": parse_nameservers(_read("/etc/resolv.conf")),
    }


def _buntage_stats(cache: InstalledCache) -> dict[str, int]:
    catalog = get_catalog()
    installed = sum(1 for b in catalog.values() if is_installed(b, cache))
    return {"tracked": len(catalog), "installed": installed, "available": len(catalog) - installed}


def collect_system_info(cache: InstalledCache | None = None) -> dict[str, Any]:
    """Gather the full report as a JSON-serialisable dict."""
    if cache is None:
        cache = get_cache()
    settings = get_settings()
    log_file = get_log_file()
    return {
        "os": _os_info(),
        "hardware": _hardware_info(),
        "storage": _storage_info(),
        "load": _load_info(),
        "package_managers": _package_manager_info(),
        "network": _network_info(),
        "buntages": _buntage_stats(cache),
        "log_file": str(log_file) if log_file else "",
        "backup_dir": str(settings.backup_path),
    }


_RULE = "─" * 37


def render_system_info(info: dict[str, Any]) -> str:
    """Plain-text report in the menu's layout."""
    hw = info["hardware"]
    pm = info["package_managers"]
    net = info["network"]
    stats = info["buntages"]

    lines = ["SYSTEM INFORMATION", "═" * 39, ""]
    lines += [
        f"OS: {info['os']['name']}",
        f"Version: {info['os']['version']}",
        f"Kernel: {info['os']['kernel']}",
        "",
        "HARDWARE INFORMATION", _RULE,
        f"CPU: {hw['cpu']} ({hw['cores']} cores)",
        f"Memory: {hw['memory_used_mb']}MB used / {hw['memory_total_mb']}MB total",
        "",
        "STORAGE INFORMATION", _RULE,
        f"Root (/): {info['storage']['root']}",
        f"Swap: {hw['swap_used_mb']}MB used / {hw['swap_total_mb']}MB total",
        f"Uptime: {info['load']['uptime']}",
        f"Load average: {info['load']['load_average']}",
        f"Running processes: {info['load']['processes']}",
        "",
        "BUNTAGE MANAGERS", _RULE,
    ]

    apt = f"APT: {pm['apt_installed']} installed"
    if pm["apt_upgradable"]:
        apt += f" ({pm['apt_upgradable']} upgradable)"
    if pm["apt_autoremovable"]:
        apt += f" ({pm['apt_autoremovable']} auto-removable)"
    lines.append(apt)

    if pm["snap"] is None:
        lines.append("Snap: Not available")
    else:
        snap = f"Snap: {pm['snap']['installed']} installed"
        if pm["snap"]["refreshable"]:
            snap += f" ({pm['snap']['refreshable']} refreshable)"
        lines.append(snap)

    if pm["flatpak"] is None:
        lines.append("Flatpak: Not available")
    else:
        fp = pm["flatpak"]
        flat = f"Flatpak: {fp['apps']} apps"
        if fp["updates"]:
            flat += f" ({fp['updates']} updates)"
        lines.append(flat + f" [{fp['remotes']} remotes]")

    if pm["pip_packages"] is not None:
        lines.append(f"Python (pip): {pm['pip_packages']} packages")
    if pm["npm_global"] is not None:
        lines.append(f"Node.js (npm global): {pm['npm_global']} packages")

    lines += [
        "",
        "NETWORK INFORMATION", _RULE,
        f"Active interfaces: {' '.join(net['interfaces']) or 'None detected'}",
        f"Primary IP: {net['primary_ip']}",
        f"Internet: {'Connected' if net['internet'] else 'Disconnected'}",
        f"DNS servers: {' '.join(net['dns_servers']) or 'Not configured'}",
        "",
        "ULTRABUNT STATISTICS", _RULE,
        f"Tracked buntages: {stats['tracked']}",
        f"Installed: {stats['installed']}",
        f"Available: {stats['available']}",
        "",
        f"Log file: {info['log_file'] or '(none)'}",
        f"Backup dir: {info['backup_dir']}",
    ]
    return "\n".join(lines)
