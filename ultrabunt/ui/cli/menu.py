"""
Interactive menu — the default front end when ``ultrabunt`` runs
without a sub-command.

Every screen is a numbered or lettered list read with ``click.prompt``.
``back``, ``z`` or an empty answer returns one level; at the main menu
that means quitting (after confirmation).
"""

from __future__ import annotations

from pathlib import Path

import click

from ultrabunt.core.context import get_log_file
from ultrabunt.core.services.buntage_install import (
    buntages_in_category,
    bulk_install_category,
    bulk_remove_category,
    cleanup,
    export_package_list,
    get_buntage,
    get_cache,
    get_package_details,
    install_buntage,
    install_selected,
    is_installed,
    list_categories,
    reinstall_buntage,
    remove_buntage,
    remove_selected,
    update_all,
    update_buntage,
)
from ultrabunt.ui.cli.output import report, report_steps

BACK = ("", "back", "z")
RULE = "═" * 50


def _ask(text: str = "Choice") -> str:
    return click.prompt(text, default="", show_default=False).strip()


def _title(text: str) -> None:
    click.echo()
    click.secho(text, fg="cyan", bold=True)
    click.echo(RULE)


def _item(key: str, label: str) -> None:
    click.echo(f"  {key:>3}) {label}")


def _pick(options: list[str], text: str = "Choice") -> str | None:
    """Index-based choice from *options*; None means back."""
    for i, option in enumerate(options, start=1):
        _item(str(i), option)
    _item("z", "Back")
    answer = _ask(text)
    if answer.lower() in BACK:
        return None
    if answer.isdigit() and 1 <= int(answer) <= len(options):
        return options[int(answer) - 1]
    click.secho("Invalid choice", fg="red")
    return None


def _pick_many(options: list[str], text: str = "Numbers") -> list[str]:
    """Several choices from *options*, e.g. ``1 3 5`` or ``1,3``; empty means back."""
    for i, option in enumerate(options, start=1):
        _item(str(i), option)
    _item("z", "Back")
    answer = _ask(text)
    if answer.lower() in BACK:
        return []
    picked: list[str] = []
    for token in answer.replace(",", " ").split():
        if not (token.isdigit() and 1 <= int(token) <= len(options)):
            click.secho(f"Invalid choice: {token}", fg="red")
            return []
        if options[int(token) - 1] not in picked:
            picked.append(options[int(token) - 1])
    return picked


# ── Buntages ────────────────────────────────────────────────────


def _install(name: str) -> None:
    result = install_buntage(name)
    if result.get("missing_deps"):
        deps = ", ".join(result["missing_deps"])
        click.secho(f"⚠️  {name} requires {deps}", fg="yellow")
        if click.confirm(f"Install {deps} first?", default=True):
            result = install_buntage(name, with_deps=True)
    report(result)


def _remove(name: str) -> None:
    if not click.confirm(f"Remove {name}?", default=False):
        return
    purge = click.confirm("Also delete its configuration and data?", default=False)
    result = remove_buntage(name, purge_data=purge)
    report(result)
    if result.get("dependents"):
        click.secho(f"   ⚠️  Still needed by: {', '.join(result['dependents'])}", fg="yellow")


def _details(name: str) -> None:
    d = get_package_details(get_buntage(name))
    click.echo(f"  {d['description']}")
    click.echo(f"  Package: {d['package']}  Method: {d['method']}")
    if d["deps"]:
        click.echo(f"  Requires: {', '.join(d['deps'])}")
    if d["installed"]:
        click.secho(f"  Installed {d['version']}".rstrip(), fg="green")
        for line in d["extra"]:
            click.echo(f"  {line}")
    else:
        click.secho("  Not installed", fg="yellow")


def buntage_menu(name: str) -> None:
    cache = get_cache()
    while True:
        installed = is_installed(get_buntage(name), cache)
        _title(f"{name} [{'installed' if installed else 'not installed'}]")
        _details(name)
        click.echo()
        if installed:
            _item("r", "Reinstall")
            _item("u", "Update")
            _item("x", "Remove")
        else:
            _item("i", "Install")
        _item("z", "Back")
        answer = _ask().lower()
        if answer in BACK:
            return
        if answer == "i" and not installed:
            _install(name)
        elif answer == "r" and installed:
            report(reinstall_buntage(name))
        elif answer == "u" and installed:
            report(update_buntage(name))
        elif answer == "x" and installed:
            _remove(name)
        else:
            click.secho("Invalid choice", fg="red")
        click.pause()


def category_menu(category_id: str, label: str) -> None:
    cache = get_cache()
    while True:
        members = buntages_in_category(category_id)
        _title(label)
        for i, b in enumerate(members, start=1):
            mark = click.style("✓", fg="green") if is_installed(b, cache) else click.style("✗", fg="red")
            click.echo(f"  {i:>3}) {mark} {b.name:<24} {b.description}")
        _item("z", "Back")
        answer = _ask().lower()
        if answer in BACK:
            return
        if answer.isdigit() and 1 <= int(answer) <= len(members):
            buntage_menu(members[int(answer) - 1].name)
        else:
            click.secho("Invalid choice", fg="red")


# ── Other screens ───────────────────────────────────────────────


def system_info_screen() -> None:
    from ultrabunt.core.services.system_info import collect_system_info, render_system_info

    click.echo()
    click.echo(render_system_info(collect_system_info()))
    click.pause()


def keyboard_menu() -> None:
    from ultrabunt.core.services.keyboard_ops import (
        LAYOUTS,
        apply_layout,
        keyboard_status,
        reset_keyboard,
    )

    while True:
        _title("Keyboard Layout")
        names = list(LAYOUTS)
        for i, key in enumerate(names, start=1):
            _item(str(i), f"{LAYOUTS[key]['label']} layout")
        _item("s", "Show current configuration")
        _item("r", "Reset to defaults")
        _item("z", "Back")
        answer = _ask().lower()
        if answer in BACK:
            return
        if answer.isdigit() and 1 <= int(answer) <= len(names):
            layout = LAYOUTS[names[int(answer) - 1]]
            for line in layout["summary"]:
                click.echo(f"   • {line}")
            if click.confirm(f"Apply the {layout['label']} layout?", default=True):
                report(apply_layout(names[int(answer) - 1]))
        elif answer == "s":
            for key, value in keyboard_status().items():
                click.echo(f"   {key.replace('_', ' ')}: {value}")
        elif answer == "r":
            if click.confirm("Reset keyboard settings to defaults?", default=False):
                report(reset_keyboard())
        else:
            click.secho("Invalid choice", fg="red")
        click.pause()


def _choose_category(text: str) -> tuple[str, str] | None:
    cats = list_categories()
    label = _pick([c.label for c in cats], text)
    if label is None:
        return None
    cat = next(c for c in cats if c.label == label)
    return cat.id, cat.label


def _bulk_progress(name: str, index: int, total: int) -> None:
    click.secho(f"[{index}/{total}] {name}", fg="cyan")


def _bulk_selected(installing: bool) -> None:
    """Pick several buntages of one category, then install or remove them."""
    chosen = _choose_category("Category")
    if chosen is None:
        return
    cache = get_cache()
    names = [b.name for b in buntages_in_category(chosen[0])
             if is_installed(b, cache) != installing]
    if not names:
        state = "already installed" if installing else "not installed"
        click.secho(f"Every buntage in {chosen[1]} is {state}", fg="yellow")
        return
    picked = _pick_many(names, "Buntages (e.g. 1 3 5)")
    if not picked:
        return
    if installing:
        if click.confirm(f"Install {', '.join(picked)}?", default=True):
            report(install_selected(picked, with_deps=True, progress=_bulk_progress))
    elif click.confirm(f"Remove {', '.join(picked)}?", default=False):
        report(remove_selected(picked, progress=_bulk_progress))


def bulk_menu() -> None:
    while True:
        _title("Bulk Operations")
        _item("1", "Install all buntages of a category")
        _item("2", "Remove all buntages of a category")
        _item("3", "Install selected buntages")
        _item("4", "Remove selected buntages")
        _item("5", "Update everything (apt, snap, flatpak)")
        _item("6", "System cleanup")
        _item("7", "Export buntage list")
        _item("z", "Back")
        answer = _ask().lower()
        if answer in BACK:
            return
        if answer == "1":
            chosen = _choose_category("Category to install")
            if chosen and click.confirm(f"Install every buntage in {chosen[1]}?", default=False):
                report(bulk_install_category(chosen[0], with_deps=True, progress=_bulk_progress))
        elif answer == "2":
            chosen = _choose_category("Category to remove")
            if (chosen
                    and click.confirm(f"Remove ALL installed buntages in {chosen[1]}?", default=False)
                    and click.confirm("This cannot be undone. Really continue?", default=False)):
                report(bulk_remove_category(chosen[0], progress=_bulk_progress))
        elif answer in ("3", "4"):
            _bulk_selected(installing=answer == "3")
        elif answer == "5":
            report_steps(update_all())
        elif answer == "6":
            report_steps(cleanup())
        elif answer == "7":
            fmt = "json" if click.confirm("Export as JSON?", default=False) else "text"
            report(export_package_list(fmt=fmt))
        else:
            click.secho("Invalid choice", fg="red")
        click.pause()


def mirrors_menu() -> None:
    from ultrabunt.core.services.mirror_ops import (
        find_sources_file,
        rank_mirrors,
        read_current_mirror,
        restore_mirror,
        select_mirror,
    )

    while True:
        path = find_sources_file()
        current = read_current_mirror(path) if path else None
        _title("APT Mirrors")
        click.echo(f"  Current: {current or 'unknown'}")
        _item("1", "Test mirror speeds and switch")
        _item("2", "Restore previous sources")
        _item("z", "Back")
        answer = _ask().lower()
        if answer in BACK:
            return
        if answer == "1":
            click.secho("⏱️  Testing mirror speeds...", fg="cyan")
            ranked = rank_mirrors()
            labels = [
                f"{m['url']} ({m['latency_ms']} ms)" if m["latency_ms"] is not None
                else f"{m['url']} (unreachable)"
                for m in ranked
            ]
            picked = _pick(labels, "Mirror")
            if picked is not None:
                url = ranked[labels.index(picked)]["url"]
                if click.confirm(f"Switch to {url}?", default=True):
                    report(select_mirror(url))
        elif answer == "2":
            if click.confirm("Restore the newest sources backup?", default=False):
                report(restore_mirror())
        else:
            click.secho("Invalid choice", fg="red")
        click.pause()


def logs_menu() -> None:
    from ultrabunt.core.services.log_ops import audit_history, list_log_files, tail_log

    while True:
        _title("Logs")
        _item("1", "Show current session log")
        _item("2", "Choose a log file")
        _item("3", "Operation history")
        _item("z", "Back")
        answer = _ask().lower()
        if answer in BACK:
            return
        if answer == "1":
            _show_log(tail_log(get_log_file()))
        elif answer == "2":
            files = [str(p) for p in list_log_files()]
            if not files:
                click.secho("No log files found", fg="yellow")
            else:
                picked = _pick(files, "Log file")
                if picked:
                    _show_log(tail_log(Path(picked)))
        elif answer == "3":
            entries = audit_history()
            if not entries:
                click.secho("No operations recorded yet", fg="yellow")
            for e in entries:
                click.echo(f"  {e.timestamp[:19].replace('T', ' ')}  {e.operation:<16} "
                           f"{e.target:<24} {e.status}")
        else:
            click.secho("Invalid choice", fg="red")
        click.pause()


def _show_log(result: dict) -> None:
    if not result["ok"]:
        report(result)
        return
    click.secho(result["path"], bold=True)
    for line in result["lines"]:
        click.echo(line)


# ── WordPress ───────────────────────────────────────────────────


def _wordpress_setup(custom: bool) -> None:
    from ultrabunt.core.services.wordpress import custom_setup, quick_setup

    server = _pick(["nginx", "apache"], "Web server")
    if server is None:
        return
    domain = click.prompt("Domain", default="localhost")
    if not custom:
        result = quick_setup(server, domain)
    else:
        site_dir = click.prompt("Site directory", default="", show_default=False)
        db_name = click.prompt("Database name", default="", show_default=False)
        db_user = click.prompt("Database user", default="", show_default=False)
        db_password = click.prompt("Database password (empty: generate)", default="",
                                   show_default=False, hide_input=True)
        result = custom_setup(
            server, domain,
            site_dir=Path(site_dir) if site_dir else None,
            db_name=db_name or None, db_user=db_user or None, db_password=db_password or None,
        )
    if report(result):
        click.secho(f"🔑 Credentials saved to {result['credentials_file']}", fg="yellow")


def site_menu(site: str) -> None:
    from ultrabunt.core.services.wordpress import (
        HARDENING_OPTIONS,
        apply_hardening,
        check_site,
        delete_site,
        disable_site,
        enable_site,
        setup_ssl,
        site_detail,
    )

    while True:
        _title(f"WordPress site: {site}")
        _item("1", "Details")
        _item("2", "Enable")
        _item("3", "Disable")
        _item("4", "Test accessibility")
        _item("5", "Security hardening")
        _item("6", "Set up SSL")
        _item("7", "Delete site")
        _item("z", "Back")
        answer = _ask().lower()
        if answer in BACK:
            return
        if answer == "1":
            d = site_detail(site)
            if _report_detail(d):
                for line in d["config_preview"]:
                    click.echo(f"     {line}")
        elif answer == "2":
            report(enable_site(site))
        elif answer == "3":
            report(disable_site(site))
        elif answer == "4":
            r = check_site(site)
            for key in ("http", "https"):
                code = r[key]["code"]
                click.echo(f"  {key.upper():<6} {code if code is not None else 'unreachable'}")
            click.echo(f"  DNS    {', '.join(r['dns']) or 'does not resolve'}")
        elif answer == "5":
            chosen = [key for key, text in HARDENING_OPTIONS.items()
                      if click.confirm(text, default=True)]
            if chosen:
                report(apply_hardening(site, chosen))
        elif answer == "6":
            email = click.prompt("Email for Let's Encrypt", default="", show_default=False)
            report(setup_ssl(site, email))
        elif answer == "7":
            click.secho(f"⚠️  This permanently deletes {site}.", fg="red", bold=True)
            text = click.prompt(f"Type 'DELETE {site}' to confirm", default="", show_default=False)
            result = delete_site(site, text)
            report(result)
            if result["ok"]:
                click.pause()
                return
        else:
            click.secho("Invalid choice", fg="red")
        click.pause()


def _report_detail(d: dict) -> bool:
    if not d["ok"]:
        return report(d)
    click.echo(f"  WordPress: {d['version'] or 'unknown version'}")
    click.echo(f"  Web server: {d['web_server'] or 'not configured'}")
    click.echo(f"  Enabled: {'yes' if d['enabled'] else 'no'}")
    if d.get("ssl_expires"):
        click.echo(f"  SSL expires: {d['ssl_expires']} ({d['ssl_days_left']} days)")
    else:
        click.echo(f"  SSL: {'yes' if d['ssl'] else 'no'}")
    click.echo(f"  Database: {d['database'] or 'unknown'} "
               f"({'connected' if d['database_ok'] else 'connection failed'})")
    if d["config_file"]:
        click.echo(f"  Config: {d['config_file']}")
    return True


def wordpress_menu() -> None:
    from ultrabunt.core.services.wordpress import list_sites, wordpress_status

    while True:
        _title("WordPress")
        _item("1", "Quick setup (generated names)")
        _item("2", "Custom setup")
        _item("3", "Status")
        _item("4", "Manage a site")
        _item("z", "Back")
        answer = _ask().lower()
        if answer in BACK:
            return
        if answer in ("1", "2"):
            _wordpress_setup(custom=answer == "2")
        elif answer == "3":
            status = wordpress_status()
            for name, active in status["services"].items():
                click.echo(f"  {name:<10} {'active' if active else 'inactive'}")
            if not status["sites"]:
                click.secho("  No WordPress sites found", fg="yellow")
            for s in status["sites"]:
                flags = "  ".join(f"{k}: {'yes' if s[k] else 'no'}"
                                  for k in ("configured", "enabled", "ssl", "accessible"))
                click.echo(f"  {s['site']}  {flags}")
        elif answer == "4":
            sites = list_sites()
            if not sites:
                click.secho("No WordPress sites found", fg="yellow")
            else:
                picked = _pick(sites, "Site")
                if picked:
                    site_menu(picked)
                    continue
        else:
            click.secho("Invalid choice", fg="red")
        click.pause()


# ── Main menu ───────────────────────────────────────────────────

_EXTRA_SCREENS = [
    ("i", "System Information", system_info_screen),
    ("k", "Keyboard Layout", keyboard_menu),
    ("w", "WordPress", wordpress_menu),
    ("b", "Bulk Operations", bulk_menu),
    ("m", "Mirrors", mirrors_menu),
    ("l", "Logs", logs_menu),
]


def _farewell() -> None:
    click.secho("👋 Goodbye!", fg="cyan")
    log_file = get_log_file()
    if log_file:
        click.echo(f"   Session log: {log_file}")


def run_menu() -> None:
    """Main loop: categories with installed counts, then the other screens."""
    cache = get_cache()
    screens = {key: screen for key, _, screen in _EXTRA_SCREENS}

    while True:
        cats = list_categories()
        _title("ULTRABUNT — Ubuntu buntage manager")
        for i, cat in enumerate(cats, start=1):
            members = buntages_in_category(cat.id)
            installed = sum(1 for b in members if is_installed(b, cache))
            _item(str(i), f"{cat.label:<30} [{installed}/{len(members)} installed]")
        click.echo()
        for key, label, _ in _EXTRA_SCREENS:
            _item(key, label)
        _item("q", "Quit")

        answer = _ask().lower()
        if answer in BACK + ("q", "quit"):
            if click.confirm("Quit Ultrabunt?", default=True):
                _farewell()
                return
            continue
        if answer.isdigit() and 1 <= int(answer) <= len(cats):
            cat = cats[int(answer) - 1]
            category_menu(cat.id, cat.label)
        elif answer in screens:
            screens[answer]()
        else:
            click.secho("Invalid choice", fg="red")
