"""
Shell customization — Oh My Zsh with the Powerlevel10k theme.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from ultrabunt.core.persistence.audit import record
from ultrabunt.core.services.buntage_install.detection.installed_cache import InstalledCache
from ultrabunt.core.services.buntage_install.execution.buntage_ops import install_buntage
from ultrabunt.core.services.buntage_install.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

OMZ_INSTALLER = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
P10K_REPO = "https://github.com/romkatv/powerlevel10k.git"
P10K_THEME = "powerlevel10k/powerlevel10k"

_THEME_LINE = re.compile(r"^ZSH_THEME=.*$", re.MULTILINE)


def set_zsh_theme(zshrc_text: str, theme: str) -> str:
    """Point ``ZSH_THEME`` at *theme*, adding the line when absent."""
    line = f'ZSH_THEME="{theme}"'
    if _THEME_LINE.search(zshrc_text):
        return _THEME_LINE.sub(line, zshrc_text, count=1)
    return zshrc_text.rstrip("\n") + ("\n" if zshrc_text else "") + line + "\n"


def install_oh_my_zsh(
    *,
    home: Path | None = None,
    cache: InstalledCache | None = None,
) -> dict[str, Any]:
    """Install zsh (if needed), Oh My Zsh and Powerlevel10k."""
    from ultrabunt.core.context import is_dry_run

    home = home or Path.home()
    omz = home / ".oh-my-zsh"
    if omz.is_dir():
        return {"ok": True, "message": f"Oh My Zsh is already installed in {omz}",
                "already_installed": True}

    zsh = install_buntage("zsh", cache=cache)
    if not zsh["ok"]:
        return {"ok": False, "error": f"zsh is required: {zsh['error']}"}

    r = run_command(
        ["sh", "-c", f'sh -c "$(curl -fsSL {OMZ_INSTALLER})" "" --unattended'],
        env_overrides={"HOME": str(home)},
    )
    if not r["ok"]:
        record("oh-my-zsh", str(home), status="failed", error=r["error"])
        return {"ok": False, "error": f"Oh My Zsh installer failed: {r['error']}"}

    theme_dir = omz / "custom" / "themes" / "powerlevel10k"
    r = run_command(["git", "clone", "--depth=1", P10K_REPO, str(theme_dir)])
    if not r["ok"]:
        record("oh-my-zsh", str(home), status="failed", error=r["error"])
        return {"ok": False, "error": f"Cloning Powerlevel10k failed: {r['error']}"}

    zshrc = home / ".zshrc"
    if is_dry_run():
        logger.info("[dry-run] set ZSH_THEME in %s", zshrc)
    else:
        text = zshrc.read_text(encoding="utf-8") if zshrc.is_file() else ""
        zshrc.write_text(set_zsh_theme(text, P10K_THEME), encoding="utf-8")

    record("oh-my-zsh", str(home), status="ok")
    return {"ok": True,
            "message": "Oh My Zsh with Powerlevel10k installed. Run 'zsh' to start configuration."}
