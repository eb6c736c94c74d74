"""
Domain models — Pydantic types for the buntstaller.

    from ultrabunt.core.models import Buntage, Category, InstallMethod, Settings
"""

from ultrabunt.core.models.buntage import (
    RECIPE_METHODS,
    TRACKED_METHODS,
    Buntage,
    Category,
    InstallMethod,
)
from ultrabunt.core.models.settings import ExtraBuntage, Settings

__all__ = [
    # buntage.py
    "Buntage",
    "Category",
    "InstallMethod",
    "RECIPE_METHODS",
    "TRACKED_METHODS",
    # settings.py
    "ExtraBuntage",
    "Settings",
]
