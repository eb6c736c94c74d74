"""
L0 Data — Catalog assembly and lookup.

Turns BUNTAGE_TABLE (plus any ``extra_buntages`` from ultrabunt.yml)
into validated ``Buntage`` models.  The built catalog is cached and
rebuilt whenever the process settings change.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ultrabunt.core.config.loader import ConfigError
from ultrabunt.core.models.buntage import RECIPE_METHODS, Buntage, Category
from ultrabunt.core.models.settings import Settings
from ultrabunt.core.services.buntage_install.data.buntage_table import BUNTAGE_TABLE
from ultrabunt.core.services.buntage_install.data.categories import CATEGORIES
from ultrabunt.core.services.buntage_install.data.custom_recipes import CUSTOM_RECIPES

logger = logging.getLogger(__name__)


class UnknownBuntageError(KeyError):
    """Raised when a name is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown buntage: {self.name}"


_catalog: dict[str, Buntage] | None = None
_built_from: Settings | None = None


def _from_row(name: str, row: dict, php: str) -> Buntage:
    return Buntage(
        name=name,
        package=row["package"].replace("{php}", php),
        description=row.get("desc", ""),
        method=row.get("method", "apt"),
        category=row["category"],
        deps=list(row.get("deps", [])),
        snap_classic=row.get("classic", False),
        check_binary=row.get("binary"),
    )


def build_catalog(settings: Settings | None = None) -> dict[str, Buntage]:
    """Build the full catalog for *settings*.

    Raises:
        ConfigError: an extra buntage from the config is invalid
            (unknown category or dependency, a method that needs a
            recipe, or a name clash with a built-in entry).
    """
    if settings is None:
        settings = Settings()
    php = settings.php_version

    catalog = {name: _from_row(name, row, php) for name, row in BUNTAGE_TABLE.items()}
    category_ids = {cid for cid, _ in CATEGORIES}

    for name, extra in settings.extra_buntages.items():
        if name in catalog:
            raise ConfigError(f"extra_buntages.{name}: already in the catalog")
        try:
            b = Buntage(name=name, **extra.model_dump())
        except ValidationError as e:
            raise ConfigError(f"extra_buntages.{name}: {e}") from e
        if b.category not in category_ids:
            raise ConfigError(f"extra_buntages.{name}: unknown category '{b.category}'")
        if b.needs_recipe:
            raise ConfigError(
                f"extra_buntages.{name}: method '{b.method.value}' needs a built-in recipe"
            )
        b.package = b.package.replace("{php}", php)
        catalog[name] = b

    for b in catalog.values():
        for dep in b.deps:
            if dep not in catalog:
                raise ConfigError(f"{b.name}: dependency '{dep}' is not in the catalog")

    logger.debug("Catalog built: %d buntages (%d extra)",
                 len(catalog), len(settings.extra_buntages))
    return catalog


def get_catalog() -> dict[str, Buntage]:
    """Return the catalog for the current process settings."""
    global _catalog, _built_from
    from ultrabunt.core.context import get_settings

    settings = get_settings()
    if _catalog is None or _built_from is not settings:
        _catalog = build_catalog(settings)
        _built_from = settings
    return _catalog


def reset_catalog() -> None:
    """Drop the cached catalog (tests, settings reload)."""
    global _catalog, _built_from
    _catalog = None
    _built_from = None


def get_buntage(name: str) -> Buntage:
    """Look up one buntage by catalog name.

    Raises:
        UnknownBuntageError: *name* is not in the catalog.
    """
    try:
        return get_catalog()[name]
    except KeyError:
        raise UnknownBuntageError(name) from None


def list_categories() -> list[Category]:
    """All categories in menu display order."""
    return [Category(id=cid, label=label) for cid, label in CATEGORIES]


def get_category(category_id: str) -> Category | None:
    for cid, label in CATEGORIES:
        if cid == category_id:
            return Category(id=cid, label=label)
    return None


def buntages_in_category(category_id: str) -> list[Buntage]:
    """Buntages of one category, sorted by name."""
    return sorted(
        (b for b in get_catalog().values() if b.category == category_id),
        key=lambda b: b.name,
    )


def check_catalog(catalog: dict[str, Buntage]) -> list[str]:
    """Integrity problems in *catalog* (empty list when sound)."""
    problems: list[str] = []
    category_ids = {cid for cid, _ in CATEGORIES}
    for b in catalog.values():
        if b.category not in category_ids:
            problems.append(f"{b.name}: unknown category '{b.category}'")
        for dep in b.deps:
            if dep not in catalog:
                problems.append(f"{b.name}: unknown dependency '{dep}'")
        if b.method in RECIPE_METHODS and b.name not in CUSTOM_RECIPES:
            problems.append(f"{b.name}: method '{b.method.value}' has no recipe")
        if "{php}" in b.package:
            problems.append(f"{b.name}: unresolved placeholder in '{b.package}'")
    return problems
