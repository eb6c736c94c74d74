"""
Buntage model — one row of the catalog table.

A buntage is the pairing of a catalog key with the name its package
manager knows, the method used to install it and the category it is
shown under.  Everything the menu and the operations know about a
package comes from this model.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class InstallMethod(str, Enum):
    """How a buntage is installed and removed."""

    APT = "apt"
    SNAP = "snap"
    FLATPAK = "flatpak"
    SCRIPT = "script"
    CUSTOM = "custom"
    DEB = "deb"
    PIP = "pip"


# Methods whose installed state is read from the package manager cache.
TRACKED_METHODS = frozenset({InstallMethod.APT, InstallMethod.SNAP, InstallMethod.FLATPAK})

# Methods that need a recipe in CUSTOM_RECIPES.
RECIPE_METHODS = frozenset({InstallMethod.CUSTOM, InstallMethod.SCRIPT, InstallMethod.DEB})


class Category(BaseModel):
    """A menu grouping of buntages."""

    id: str
    label: str


class Buntage(BaseModel):
    """An installable package known to the catalog."""

    name: str
    package: str
    description: str = ""
    method: InstallMethod = InstallMethod.APT
    category: str
    deps: list[str] = Field(default_factory=list)
    snap_classic: bool = False
    check_binary: str | None = None

    @property
    def needs_recipe(self) -> bool:
        return self.method in RECIPE_METHODS

    @property
    def is_tracked(self) -> bool:
        """True when the installed state comes straight from a package manager."""
        return self.method in TRACKED_METHODS
