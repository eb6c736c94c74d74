"""
Tests for session log listing, tailing and the audit history view.
"""

from ultrabunt.core.persistence.audit import record
from ultrabunt.core.services.log_ops import audit_history, list_log_files, tail_log


def _logs(settings, *names: str):
    settings.log_path.mkdir(parents=True, exist_ok=True)
    for name in names:
        (settings.log_path / name).write_text(
            "\n".join(f"{name} line {i}" for i in range(100)) + "\n", encoding="utf-8",
        )


class TestLogFiles:
    def test_newest_first(self, settings):
        _logs(settings, "ultrabunt_20240101_090000.log", "ultrabunt_20240301_120000.log",
              "other.log")
        names = [p.name for p in list_log_files()]
        assert names == ["ultrabunt_20240301_120000.log", "ultrabunt_20240101_090000.log"]

    def test_missing_dir(self, tmp_path):
        assert list_log_files(tmp_path / "nope") == []

    def test_tail_newest(self, settings):
        _logs(settings, "ultrabunt_20240101_090000.log", "ultrabunt_20240301_120000.log")
        r = tail_log(lines=3)
        assert r["ok"] is True
        assert r["path"].endswith("ultrabunt_20240301_120000.log")
        assert r["lines"] == [f"ultrabunt_20240301_120000.log line {i}" for i in (97, 98, 99)]

    def test_tail_no_logs(self):
        r = tail_log()
        assert r["ok"] is False
        assert r["error"].startswith("No log files in")

    def test_tail_missing_file(self, tmp_path):
        r = tail_log(tmp_path / "gone.log")
        assert r == {"ok": False, "error": f"Log file not found: {tmp_path / 'gone.log'}"}


class TestHistory:
    def test_recent_entries(self):
        for name in ("git", "curl", "jq"):
            record("install", name, status="ok")
        assert [e.target for e in audit_history(2)] == ["curl", "jq"]

    def test_empty(self):
        assert audit_history() == []
