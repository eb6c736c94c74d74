"""
Keyboard layouts — laptop-specific XKB options and GNOME shortcuts.

A layout is an XKB option set (persisted through an autostart desktop
entry and applied immediately with ``setxkbmap``) plus a handful of
``gsettings`` keybindings.  A failing ``setxkbmap`` or ``gsettings``
call (no X session, not GNOME) only logs a warning.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ultrabunt.core.persistence.audit import record
from ultrabunt.core.services.buntage_install.detection.installed_cache import run_query
from ultrabunt.core.services.buntage_install.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

AUTOSTART_NAME = "keyboard-mapping.desktop"

WM_KEYS = "org.gnome.desktop.wm.keybindings"
SHELL_KEYS = "org.gnome.shell.keybindings"

_STANDARD_SWITCHING = [
    (WM_KEYS, "switch-applications", "['<Alt>Tab']"),
    (WM_KEYS, "switch-windows", "['<Alt>grave']"),
]

LAYOUTS: dict[str, dict] = {
    "macbook": {
        "label": "MacBook",
        "summary": [
            "Command key → Super key (for shortcuts)",
            "Cmd+Tab → Switch applications",
            "Cmd+` → Switch windows of same app",
            "Cmd+Space → Show applications",
            "Caps Lock → Additional Control key",
        ],
        "xkb_options": "caps:ctrl_modifier",
        "gsettings": _STANDARD_SWITCHING + [
            (SHELL_KEYS, "toggle-overview", "['<Super>space']"),
        ],
    },
    "thinkpad": {
        "label": "ThinkPad",
        "summary": [
            "Caps Lock → Additional Control key",
            "Alt+Tab → Switch applications",
            "Super key for launcher",
        ],
        "xkb_options": "caps:ctrl_modifier",
        "gsettings": list(_STANDARD_SWITCHING),
    },
    "generic": {
        "label": "Generic laptop",
        "summary": [
            "Standard PC keyboard layout",
            "Alt+Tab → Switch applications",
            "Super key for launcher",
        ],
        "xkb_options": None,
        "gsettings": list(_STANDARD_SWITCHING),
    },
}

# Keys restored by reset_keyboard()
_RESET_KEYS = [
    (WM_KEYS, "switch-applications"),
    (WM_KEYS, "switch-windows"),
    (SHELL_KEYS, "toggle-overview"),
]


def autostart_path(home: Path | None = None) -> Path:
    return (home or Path.home()) / ".config" / "autostart" / AUTOSTART_NAME


def render_autostart(xkb_options: str) -> str:
    return (
        "[Desktop Entry]\n"
        "Type=Application\n"
        "Name=Keyboard Mapping\n"
        f'Exec=/bin/bash -c "setxkbmap -option {xkb_options}"\n'
        "X-GNOME-Autostart-enabled=true\n"
    )


def _try(cmd: list[str], what: str) -> bool:
    r = run_command(cmd)
    if not r["ok"]:
        logger.warning("Could not %s: %s", what, r["error"])
    return r["ok"]


def apply_layout(name: str, *, home: Path | None = None) -> dict[str, Any]:
    """Apply keyboard layout *name* (macbook, thinkpad or generic)."""
    from ultrabunt.core.context import is_dry_run

    layout = LAYOUTS.get(name)
    if layout is None:
        return {"ok": False, "error": f"Unknown layout: {name} (choose from {', '.join(LAYOUTS)})"}

    path = autostart_path(home)
    options = layout["xkb_options"]
    warnings = []

    if is_dry_run():
        logger.info("[dry-run] %s %s", "write" if options else "remove", path)
    elif options:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(render_autostart(options), encoding="utf-8")
        except OSError as e:
            return {"ok": False, "error": f"Cannot write {path}: {e}"}
    else:
        path.unlink(missing_ok=True)

    # "-option" with no value clears existing options before adding ours
    xkb_cmd = ["setxkbmap", "-option"] + ([options] if options else [])
    if not _try(xkb_cmd, "apply setxkbmap options"):
        warnings.append("setxkbmap")

    for schema, key, value in layout["gsettings"]:
        if not _try(["gsettings", "set", schema, key, value], f"set {key}"):
            warnings.append(key)

    record("keyboard-apply", name, status="ok", warnings=warnings)
    return {
        "ok": True,
        "message": f"{layout['label']} keyboard layout applied. "
                   "Log out and back in for all changes to take effect.",
        "warnings": warnings,
    }


def reset_keyboard(*, home: Path | None = None) -> dict[str, Any]:
    """Remove the autostart mapping, clear XKB options, reset keybindings."""
    from ultrabunt.core.context import is_dry_run

    path = autostart_path(home)
    if is_dry_run():
        logger.info("[dry-run] remove %s", path)
    else:
        path.unlink(missing_ok=True)

    warnings = []
    if not _try(["setxkbmap", "-option"], "reset setxkbmap options"):
        warnings.append("setxkbmap")
    for schema, key in _RESET_KEYS:
        if not _try(["gsettings", "reset", schema, key], f"reset {key}"):
            warnings.append(key)

    record("keyboard-reset", "keyboard", status="ok", warnings=warnings)
    return {"ok": True, "message": "Keyboard layout reset to Ubuntu defaults.", "warnings": warnings}


def parse_xkb_options(query_output: str) -> str:
    """The ``options:`` value of ``setxkbmap -query``, or "(none)"."""
    for line in query_output.splitlines():
        if line.startswith("options:"):
            return line.split(":", 1)[1].strip() or "(none)"
    return "(none)"


def _gsetting(schema: str, key: str) -> str:
    r = run_query(["gsettings", "get", schema, key])
    if r and r.returncode == 0:
        return r.stdout.strip()
    return "Not set"


def keyboard_status(*, home: Path | None = None) -> dict[str, Any]:
    """Current XKB options, switching shortcuts and autostart state."""
    r = run_query(["setxkbmap", "-query"])
    xkb = parse_xkb_options(r.stdout) if r and r.returncode == 0 else "(unavailable)"
    return {
        "xkb_options": xkb,
        "switch_applications": _gsetting(WM_KEYS, "switch-applications"),
        "switch_windows": _gsetting(WM_KEYS, "switch-windows"),
        "autostart_mapping": autostart_path(home).is_file(),
    }
