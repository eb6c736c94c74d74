"""
Tests for the interactive menu, driven through CliRunner input.
"""

import logging
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ultrabunt.core.services.buntage_install import buntages_in_category, list_categories
from ultrabunt.main import cli

_MENU = "ultrabunt.ui.cli.menu"
_DETAILS = "ultrabunt.core.services.buntage_install.detection.package_info"
_MIRRORS = "ultrabunt.core.services.mirror_ops"


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in handlers:
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


@pytest.fixture
def menu(config_file):
    """Run the menu with the given keystrokes, one answer per line."""
    def _menu(*answers):
        return CliRunner().invoke(cli, ["--config", str(config_file)],
                                  input="".join(a + "\n" for a in answers))
    return _menu


class TestMainMenu:
    def test_quit(self, menu):
        result = menu("q", "y")
        assert result.exit_code == 0
        assert "ULTRABUNT" in result.output
        assert list_categories()[0].label in result.output
        assert "👋 Goodbye!" in result.output

    def test_quit_declined(self, menu):
        result = menu("", "n", "q", "y")
        assert result.output.count("Quit Ultrabunt?") == 2
        assert result.output.count("👋 Goodbye!") == 1

    def test_invalid_choice(self, menu):
        result = menu("spaceship", "q", "y")
        assert "Invalid choice" in result.output

    def test_installed_counts(self, menu, cache):
        first = list_categories()[0]
        members = buntages_in_category(first.id)
        cache.apt.add(next(b.package for b in members if b.method.value == "apt"))
        result = menu("q", "y")
        assert f"[1/{len(members)} installed]" in result.output


class TestBuntageScreens:
    def test_category_and_back(self, menu):
        first = list_categories()[0]
        member = buntages_in_category(first.id)[0]
        result = menu("1", "1", "z", "z", "q", "y")
        assert result.exit_code == 0
        assert f"{member.name} [not installed]" in result.output
        assert member.description in result.output

    def test_install_from_menu(self, menu):
        member = buntages_in_category(list_categories()[0].id)[0]
        with patch(f"{_MENU}.install_buntage",
                   return_value={"ok": True, "message": f"{member.name} installed"}) as mock_install:
            result = menu("1", "1", "i", "z", "z", "q", "y")
        mock_install.assert_called_once_with(member.name)
        assert f"✅ {member.name} installed" in result.output

    def test_install_offers_dependencies(self, capsys):
        from ultrabunt.ui.cli.menu import _install

        refused = {"ok": False, "error": "needs deps", "missing_deps": ["certbot"]}
        done = {"ok": True, "message": "installed with deps"}
        with patch(f"{_MENU}.install_buntage", side_effect=[refused, done]) as mock_install, \
             patch(f"{_MENU}.click.confirm", return_value=True):
            _install("python3-certbot-nginx")
        assert mock_install.call_args.kwargs == {"with_deps": True}
        out = capsys.readouterr().out
        assert "python3-certbot-nginx requires certbot" in out
        assert "installed with deps" in out


class TestOtherScreens:
    def test_logs_history(self, menu):
        result = menu("l", "3", "z", "q", "y")
        assert "No operations recorded yet" in result.output

    def test_keyboard_status(self, menu):
        with patch("ultrabunt.core.services.keyboard_ops.run_query", return_value=None):
            result = menu("k", "s", "z", "q", "y")
        assert "xkb options: (unavailable)" in result.output

    def test_wordpress_status(self, menu):
        with patch("ultrabunt.core.services.wordpress.sites.service_active", return_value=False):
            result = menu("w", "3", "z", "q", "y")
        assert "nginx      inactive" in result.output
        assert "No WordPress sites found" in result.output

    def test_wordpress_no_sites_to_manage(self, menu):
        result = menu("w", "4", "z", "q", "y")
        assert "No WordPress sites found" in result.output


def _index_of(category_id: str, name: str) -> str:
    """Menu number of *name* in its category listing."""
    names = [b.name for b in buntages_in_category(category_id)]
    return str(names.index(name) + 1)


class TestBuntageActions:
    def test_remove_declined(self, menu, cache):
        cache.apt.add("git")
        with patch(f"{_MENU}.remove_buntage") as mock_remove, \
             patch(f"{_DETAILS}.run_query", return_value=None):
            result = menu("1", _index_of("core", "git"), "x", "n", "z", "z", "q", "y")
        assert result.exit_code == 0
        assert "Remove git?" in result.output
        mock_remove.assert_not_called()

    def test_remove_confirmed(self, menu, cache):
        cache.apt.add("git")
        with patch(f"{_MENU}.remove_buntage",
                   return_value={"ok": True, "message": "git removed"}) as mock_remove, \
             patch(f"{_DETAILS}.run_query", return_value=None):
            result = menu("1", _index_of("core", "git"), "x", "y", "n", "z", "z", "q", "y")
        mock_remove.assert_called_once_with("git", purge_data=False)
        assert "✅ git removed" in result.output

    def test_reinstall(self, menu, cache):
        cache.apt.add("git")
        with patch(f"{_MENU}.reinstall_buntage",
                   return_value={"ok": True, "message": "git reinstalled"}) as mock_reinstall, \
             patch(f"{_DETAILS}.run_query", return_value=None):
            result = menu("1", _index_of("core", "git"), "r", "z", "z", "q", "y")
        mock_reinstall.assert_called_once_with("git")
        assert "✅ git reinstalled" in result.output

    def test_update(self, menu, cache):
        cache.apt.add("git")
        with patch(f"{_MENU}.update_buntage",
                   return_value={"ok": False, "error": "Update failed"}) as mock_update, \
             patch(f"{_DETAILS}.run_query", return_value=None):
            result = menu("1", _index_of("core", "git"), "u", "z", "z", "q", "y")
        mock_update.assert_called_once_with("git")
        assert "❌ Update failed" in result.output

    def test_actions_hidden_when_not_installed(self, menu):
        with patch(f"{_MENU}.remove_buntage") as mock_remove:
            result = menu("1", _index_of("core", "git"), "x", "z", "z", "q", "y")
        assert "Invalid choice" in result.output
        mock_remove.assert_not_called()


# ═══════════════════════════════════════════════════════════════════
#  Bulk operations
# ═══════════════════════════════════════════════════════════════════


class TestBulkScreens:
    def test_remove_category_first_confirmation_declined(self, menu):
        with patch(f"{_MENU}.bulk_remove_category") as mock_bulk:
            result = menu("b", "2", "1", "n", "z", "q", "y")
        assert result.exit_code == 0
        assert "Remove ALL installed buntages in" in result.output
        assert "Really continue?" not in result.output
        mock_bulk.assert_not_called()

    def test_remove_category_second_confirmation_declined(self, menu):
        with patch(f"{_MENU}.bulk_remove_category") as mock_bulk:
            result = menu("b", "2", "1", "y", "n", "z", "q", "y")
        assert "Really continue?" in result.output
        mock_bulk.assert_not_called()

    def test_remove_category_confirmed_twice(self, menu):
        first = list_categories()[0]
        with patch(f"{_MENU}.bulk_remove_category",
                   return_value={"ok": True, "message": "Removed: 0  Failed: 0"}) as mock_bulk:
            result = menu("b", "2", "1", "y", "y", "z", "q", "y")
        assert mock_bulk.call_args.args == (first.id,)
        assert "Removed: 0  Failed: 0" in result.output

    def test_install_category(self, menu):
        first = list_categories()[0]
        with patch(f"{_MENU}.bulk_install_category",
                   return_value={"ok": True, "message": "Installed: 3  Failed: 0  Skipped: 0"}) as mock_bulk:
            result = menu("b", "1", "1", "y", "z", "q", "y")
        assert mock_bulk.call_args.args == (first.id,)
        assert mock_bulk.call_args.kwargs["with_deps"] is True
        assert "Installed: 3" in result.output

    def test_install_selected(self, menu):
        first = list_categories()[0]
        names = [b.name for b in buntages_in_category(first.id)]
        with patch(f"{_MENU}.install_selected",
                   return_value={"ok": True, "message": "Installed: 2  Failed: 0  Skipped: 0"}) as mock_sel:
            result = menu("b", "3", "1", "1 3", "y", "z", "q", "y")
        assert result.exit_code == 0
        assert mock_sel.call_args.args == ([names[0], names[2]],)
        assert mock_sel.call_args.kwargs["with_deps"] is True
        assert "Installed: 2" in result.output

    def test_install_selected_lists_only_missing(self, menu, cache):
        cache.apt.add("git")
        names = [b.name for b in buntages_in_category("core") if b.name != "git"]
        core = str([c.id for c in list_categories()].index("core") + 1)
        with patch(f"{_MENU}.install_selected",
                   return_value={"ok": True, "message": "done"}) as mock_sel:
            menu("b", "3", core, ",".join(str(i) for i in range(1, len(names) + 1)),
                 "y", "z", "q", "y")
        assert mock_sel.call_args.args == (names,)

    def test_install_selected_invalid_number(self, menu):
        with patch(f"{_MENU}.install_selected") as mock_sel:
            result = menu("b", "3", "1", "1 999", "z", "q", "y")
        assert "Invalid choice: 999" in result.output
        mock_sel.assert_not_called()

    def test_remove_selected(self, menu, cache):
        cache.apt.update({"git", "curl"})
        installed = [b.name for b in buntages_in_category("core") if b.name in ("git", "curl")]
        core = str([c.id for c in list_categories()].index("core") + 1)
        with patch(f"{_MENU}.remove_selected",
                   return_value={"ok": True, "message": "Removed: 2  Failed: 0"}) as mock_sel:
            result = menu("b", "4", core, "2,1", "y", "z", "q", "y")
        assert mock_sel.call_args.args == ([installed[1], installed[0]],)
        assert "Removed: 2" in result.output

    def test_remove_selected_declined(self, menu, cache):
        cache.apt.add("git")
        core = str([c.id for c in list_categories()].index("core") + 1)
        with patch(f"{_MENU}.remove_selected") as mock_sel:
            result = menu("b", "4", core, "1", "n", "z", "q", "y")
        assert "Remove git?" in result.output
        mock_sel.assert_not_called()

    def test_remove_selected_nothing_installed(self, menu):
        with patch(f"{_MENU}.remove_selected") as mock_sel:
            result = menu("b", "4", "1", "z", "q", "y")
        assert "is not installed" in result.output
        mock_sel.assert_not_called()

    def test_update_everything(self, menu):
        steps = {"ok": True, "message": "1/1 steps succeeded",
                 "steps": [{"label": "Upgrade APT packages", "ok": True, "error": ""}]}
        with patch(f"{_MENU}.update_all", return_value=steps):
            result = menu("b", "5", "z", "q", "y")
        assert "✓ Upgrade APT packages" in result.output
        assert "1/1 steps succeeded" in result.output

    def test_cleanup(self, menu):
        steps = {"ok": False, "message": "0/1 steps succeeded",
                 "steps": [{"label": "Clean package cache", "ok": False, "error": "exit 100"}]}
        with patch(f"{_MENU}.cleanup", return_value=steps):
            result = menu("b", "6", "z", "q", "y")
        assert "✗ Clean package cache: exit 100" in result.output

    def test_export(self, menu):
        with patch(f"{_MENU}.export_package_list",
                   return_value={"ok": True, "message": "Buntage list exported to /tmp/x.json"}) as mock_export:
            result = menu("b", "7", "y", "z", "q", "y")
        mock_export.assert_called_once_with(fmt="json")
        assert "exported to /tmp/x.json" in result.output


# ═══════════════════════════════════════════════════════════════════
#  Mirrors
# ═══════════════════════════════════════════════════════════════════


class TestMirrorsScreen:
    def test_switch_to_ranked_mirror(self, menu):
        ranked = [
            {"url": "http://fast.example/ubuntu/", "latency_ms": 12},
            {"url": "http://down.example/ubuntu/", "latency_ms": None},
        ]
        with patch(f"{_MIRRORS}.find_sources_file", return_value=None), \
             patch(f"{_MIRRORS}.rank_mirrors", return_value=ranked), \
             patch(f"{_MIRRORS}.select_mirror",
                   return_value={"ok": True, "message": "Mirror switched"}) as mock_select:
            result = menu("m", "1", "1", "y", "z", "q", "y")
        assert "Current: unknown" in result.output
        assert "http://fast.example/ubuntu/ (12 ms)" in result.output
        assert "http://down.example/ubuntu/ (unreachable)" in result.output
        mock_select.assert_called_once_with("http://fast.example/ubuntu/")

    def test_switch_declined(self, menu):
        ranked = [{"url": "http://fast.example/ubuntu/", "latency_ms": 12}]
        with patch(f"{_MIRRORS}.find_sources_file", return_value=None), \
             patch(f"{_MIRRORS}.rank_mirrors", return_value=ranked), \
             patch(f"{_MIRRORS}.select_mirror") as mock_select:
            menu("m", "1", "1", "n", "z", "q", "y")
        mock_select.assert_not_called()

    def test_restore_declined(self, menu):
        with patch(f"{_MIRRORS}.find_sources_file", return_value=None), \
             patch(f"{_MIRRORS}.restore_mirror") as mock_restore:
            result = menu("m", "2", "n", "z", "q", "y")
        assert "Restore the newest sources backup?" in result.output
        mock_restore.assert_not_called()
