"""
Tests for the buntage catalog — table integrity, lookup and
config-declared extra buntages.
"""

import pytest

from ultrabunt.core import context
from ultrabunt.core.config.loader import ConfigError
from ultrabunt.core.models.buntage import InstallMethod
from ultrabunt.core.models.settings import ExtraBuntage, Settings
from ultrabunt.core.services.buntage_install.data.catalog import (
    UnknownBuntageError,
    build_catalog,
    buntages_in_category,
    check_catalog,
    get_buntage,
    get_catalog,
    get_category,
    list_categories,
)
from ultrabunt.core.services.buntage_install.data.categories import CATEGORIES


# ═══════════════════════════════════════════════════════════════════
#  Integrity
# ═══════════════════════════════════════════════════════════════════


class TestCatalogIntegrity:
    def test_builtin_catalog_is_sound(self):
        assert check_catalog(build_catalog()) == []

    def test_every_entry_has_a_description(self):
        missing = [b.name for b in build_catalog().values() if not b.description]
        assert missing == []

    def test_php_placeholder_resolved_from_settings(self):
        assert build_catalog(Settings())["php-mysql"].package == "php8.3-mysql"
        assert build_catalog(Settings(php_version="8.1"))["php-mysql"].package == "php8.1-mysql"

    def test_check_catalog_reports_unknown_dependency(self):
        cat = build_catalog()
        cat["git"] = cat["git"].model_copy(update={"deps": ["no-such-thing"]})
        problems = check_catalog(cat)
        assert problems == ["git: unknown dependency 'no-such-thing'"]

    def test_categories_in_display_order(self):
        ids = [c.id for c in list_categories()]
        assert ids == [cid for cid, _ in CATEGORIES]
        assert ids[0] == "core"


# ═══════════════════════════════════════════════════════════════════
#  Lookup
# ═══════════════════════════════════════════════════════════════════


class TestLookup:
    def test_get_buntage(self):
        b = get_buntage("git")
        assert b.package == "git"
        assert b.method == InstallMethod.APT
        assert b.category == "core"

    def test_unknown_buntage(self):
        with pytest.raises(UnknownBuntageError) as exc:
            get_buntage("definitely-not-a-package")
        assert str(exc.value) == "Unknown buntage: definitely-not-a-package"

    def test_unknown_buntage_is_a_key_error(self):
        with pytest.raises(KeyError):
            get_buntage("nope")

    def test_get_category(self):
        assert get_category("web").label == "Web Stack"
        assert get_category("nope") is None

    def test_category_members_sorted_by_name(self):
        names = [b.name for b in buntages_in_category("core")]
        assert "git" in names
        assert names == sorted(names)

    def test_catalog_rebuilt_when_settings_change(self):
        first = get_catalog()
        assert get_catalog() is first
        context.set_settings(Settings(php_version="8.2"))
        assert get_catalog() is not first
        assert get_buntage("php-cli").package == "php8.2-cli"


# ═══════════════════════════════════════════════════════════════════
#  Extra buntages from ultrabunt.yml
# ═══════════════════════════════════════════════════════════════════


def _with_extra(**extras) -> Settings:
    return Settings(extra_buntages={name: ExtraBuntage(**spec) for name, spec in extras.items()})


class TestExtraBuntages:
    def test_extra_entry_added(self):
        cat = build_catalog(_with_extra(htop2={"package": "htop", "category": "monitoring",
                                               "deps": ["git"]}))
        assert cat["htop2"].package == "htop"
        assert cat["htop2"].deps == ["git"]
        assert check_catalog(cat) == []

    def test_name_clash_rejected(self):
        with pytest.raises(ConfigError, match="already in the catalog"):
            build_catalog(_with_extra(git={"package": "git"}))

    def test_unknown_category_rejected(self):
        with pytest.raises(ConfigError, match="unknown category"):
            build_catalog(_with_extra(foo={"package": "foo", "category": "nowhere"}))

    def test_recipe_method_rejected(self):
        with pytest.raises(ConfigError, match="needs a built-in recipe"):
            build_catalog(_with_extra(foo={"package": "foo", "method": "custom"}))

    def test_invalid_method_rejected(self):
        with pytest.raises(ConfigError):
            build_catalog(_with_extra(foo={"package": "foo", "method": "brew"}))

    def test_unknown_dependency_rejected(self):
        with pytest.raises(ConfigError, match="dependency 'ghost'"):
            build_catalog(_with_extra(foo={"package": "foo", "deps": ["ghost"]}))
