"""
L2 Resolver — Install method → command steps.

Turns a buntage into the ordered steps that install, remove or update
it.  Pure functions: nothing is executed here, the installed cache is
only consulted to decide whether flatpak needs bootstrapping.
"""

from __future__ import annotations

import logging

from ultrabunt.core.models.buntage import Buntage, InstallMethod
from ultrabunt.core.models.settings import Settings
from ultrabunt.core.services.buntage_install.data.custom_recipes import CUSTOM_RECIPES
from ultrabunt.core.services.buntage_install.detection.installed_cache import (
    InstalledCache,
    binary_present,
)

logger = logging.getLogger(__name__)

FLATHUB_URL = "https://flathub.org/repo/flathub.flatpakrepo"


def _step(label: str, cmd: list[str], *, needs_sudo: bool, allow_fail: bool = False) -> dict:
    step = {"label": label, "cmd": cmd, "needs_sudo": needs_sudo}
    if allow_fail:
        step["allow_fail"] = True
    return step


def _apt_update_step() -> dict:
    return _step("Update package lists", ["apt-get", "update", "-qq"], needs_sudo=True)


def _install_cmd(buntage: Buntage) -> list[str]:
    """The single install command of a package-manager buntage."""
    pkg = buntage.package
    method = buntage.method
    if method == InstallMethod.SNAP:
        cmd = ["snap", "install", pkg]
        if buntage.snap_classic:
            cmd.append("--classic")
        return cmd
    if method == InstallMethod.FLATPAK:
        return ["flatpak", "install", "-y", "flathub", pkg]
    if method == InstallMethod.PIP:
        return ["pip3", "install", "--user", pkg]
    return ["apt-get", "install", "-y", "--no-install-recommends", pkg]


# ── Update derivation ───────────────────────────────────────────

# method → (install verb, update verb, flags inserted after the verb)
_PM_UPDATE_RULES: dict[str, tuple[str, str, list[str]]] = {
    # apt-get install -y PKG  →  apt-get install --only-upgrade -y PKG
    "apt":     ("install", "install", ["--only-upgrade"]),
    # snap install PKG  →  snap refresh PKG
    "snap":    ("install", "refresh", []),
    # flatpak install -y flathub PKG  →  flatpak update -y PKG
    "flatpak": ("install", "update", []),
    # pip3 install --user PKG  →  pip3 install --upgrade --user PKG
    "pip":     ("install", "install", ["--upgrade"]),
}

# Flags that only make sense at install time
_INSTALL_ONLY_FLAGS = {"--classic", "--no-install-recommends", "flathub"}


def _derive_update_cmd(install_cmd: list[str], method: str) -> list[str] | None:
    """Derive an update command from an install command.

    Returns ``None`` if the method has no rule or the command doesn't
    contain the expected verb.
    """
    rule = _PM_UPDATE_RULES.get(method)
    if not rule:
        return None
    install_verb, update_verb, extra_flags = rule

    cmd = list(install_cmd)
    try:
        idx = cmd.index(install_verb)
    except ValueError:
        return None

    cmd[idx] = update_verb
    for i, flag in enumerate(extra_flags):
        cmd.insert(idx + 1 + i, flag)
    return [c for c in cmd if c not in _INSTALL_ONLY_FLAGS]


# ── Recipes ─────────────────────────────────────────────────────

def _fill(text: str, values: dict[str, str]) -> str:
    # str.format would trip over shell ${VAR} expansions
    for key, value in values.items():
        text = text.replace("{" + key + "}", value)
    return text


def _recipe_steps(name: str, key: str, settings: Settings) -> list[dict]:
    recipe = CUSTOM_RECIPES.get(name)
    if recipe is None:
        raise KeyError(f"No recipe for {name}")
    values = {"node_lts": settings.node_lts, "php": settings.php_version}
    steps = []
    for raw in recipe.get(key, []):
        step = dict(raw)
        step["label"] = _fill(raw["label"], values)
        step["cmd"] = [_fill(part, values) for part in raw["cmd"]]
        steps.append(step)
    return steps


def _settings(settings: Settings | None) -> Settings:
    if settings is not None:
        return settings
    from ultrabunt.core.context import get_settings

    return get_settings()


# ── Public API ──────────────────────────────────────────────────

def build_install_steps(
    buntage: Buntage,
    cache: InstalledCache | None = None,
    settings: Settings | None = None,
) -> list[dict]:
    """Ordered steps that install *buntage*."""
    method = buntage.method

    if buntage.needs_recipe:
        return _recipe_steps(buntage.name, "install", _settings(settings))

    if method == InstallMethod.APT:
        return [
            _apt_update_step(),
            _step(f"Install {buntage.package}", _install_cmd(buntage), needs_sudo=True),
        ]

    if method == InstallMethod.SNAP:
        return [_step(f"Install snap {buntage.package}", _install_cmd(buntage), needs_sudo=True)]

    if method == InstallMethod.FLATPAK:
        steps = []
        have_flatpak = (
            cache.contains(InstallMethod.APT, "flatpak") if cache is not None
            else binary_present("flatpak")
        )
        if not have_flatpak:
            logger.info("flatpak not installed, bootstrapping it first")
            steps += [
                _apt_update_step(),
                _step("Install flatpak",
                      ["apt-get", "install", "-y", "--no-install-recommends", "flatpak"],
                      needs_sudo=True),
                _step("Add Flathub remote",
                      ["flatpak", "remote-add", "--if-not-exists", "flathub", FLATHUB_URL],
                      needs_sudo=True),
            ]
        steps.append(
            _step(f"Install flatpak {buntage.package}", _install_cmd(buntage), needs_sudo=True)
        )
        return steps

    if method == InstallMethod.PIP:
        return [_step(f"Install {buntage.package} (pip)", _install_cmd(buntage), needs_sudo=False)]

    raise ValueError(f"Unsupported install method: {method}")


def build_remove_steps(
    buntage: Buntage,
    purge_data: bool = False,
    settings: Settings | None = None,
) -> list[dict]:
    """Ordered steps that remove *buntage*.

    ``purge_data`` also deletes user data where the method supports it
    (snap/flatpak data, recipe ``purge`` steps).
    """
    pkg = buntage.package
    method = buntage.method

    if buntage.needs_recipe:
        s = _settings(settings)
        steps = _recipe_steps(buntage.name, "remove", s)
        if purge_data:
            steps += _recipe_steps(buntage.name, "purge", s)
        return steps

    if method == InstallMethod.APT:
        return [_step(f"Remove {pkg}", ["apt-get", "remove", "--purge", "-y", pkg], needs_sudo=True)]

    if method == InstallMethod.SNAP:
        cmd = ["snap", "remove", pkg]
        if purge_data:
            cmd.append("--purge")
        return [_step(f"Remove snap {pkg}", cmd, needs_sudo=True)]

    if method == InstallMethod.FLATPAK:
        cmd = ["flatpak", "uninstall", "-y", pkg]
        if purge_data:
            cmd.insert(3, "--delete-data")
        return [_step(f"Remove flatpak {pkg}", cmd, needs_sudo=True)]

    if method == InstallMethod.PIP:
        return [_step(f"Remove {pkg} (pip)", ["pip3", "uninstall", "-y", pkg], needs_sudo=False)]

    raise ValueError(f"Unsupported install method: {method}")


def build_update_steps(buntage: Buntage, settings: Settings | None = None) -> list[dict]:
    """Ordered steps that update an installed *buntage*.

    Package-manager methods get a derived update command; recipes
    without an apt package to upgrade are re-run.
    """
    method = buntage.method

    if buntage.needs_recipe:
        check = CUSTOM_RECIPES.get(buntage.name, {}).get("check", {})
        if "apt" in check:
            # Third-party repo already configured: a plain upgrade is enough
            cmd = _derive_update_cmd(
                ["apt-get", "install", "-y", check["apt"]], "apt",
            )
            return [_apt_update_step(), _step(f"Upgrade {check['apt']}", cmd, needs_sudo=True)]
        return _recipe_steps(buntage.name, "install", _settings(settings))

    cmd = _derive_update_cmd(_install_cmd(buntage), method.value)
    if cmd is None:
        raise ValueError(f"No update rule for method: {method}")

    if method == InstallMethod.APT:
        return [_apt_update_step(), _step(f"Upgrade {buntage.package}", cmd, needs_sudo=True)]
    return [_step(f"Update {buntage.package}", cmd, needs_sudo=method != InstallMethod.PIP)]
