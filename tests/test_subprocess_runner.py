"""
Tests for the subprocess runner — the single place that executes
system-changing commands.

subprocess.run is mocked throughout.
"""

import subprocess
from unittest.mock import patch

from ultrabunt.core import context
from ultrabunt.core.services.buntage_install.execution.subprocess_runner import (
    run_command,
    run_steps,
)

_RUNNER = "ultrabunt.core.services.buntage_install.execution.subprocess_runner"


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════


def _mock_result(stdout: str = "", stderr: str = "", rc: int = 0):
    """Create a mock subprocess.CompletedProcess."""
    return subprocess.CompletedProcess(args=["apt-get"], returncode=rc, stdout=stdout, stderr=stderr)


def _step(label: str, *cmd: str, allow_fail: bool = False) -> dict:
    step = {"label": label, "cmd": list(cmd), "needs_sudo": False}
    if allow_fail:
        step["allow_fail"] = True
    return step


# ═══════════════════════════════════════════════════════════════════
#  run_command
# ═══════════════════════════════════════════════════════════════════


class TestRunCommand:
    def test_success(self):
        with patch(f"{_RUNNER}.subprocess.run", return_value=_mock_result(stdout="done\n")):
            r = run_command(["echo", "done"])
        assert r["ok"] is True
        assert r["stdout"] == "done\n"

    def test_failure_carries_stderr(self):
        with patch(f"{_RUNNER}.subprocess.run",
                   return_value=_mock_result(stderr="E: Unable to locate package", rc=100)):
            r = run_command(["apt-get", "install", "nope"])
        assert r["ok"] is False
        assert r["error"] == "Command failed (exit 100)"
        assert "Unable to locate" in r["stderr"]

    def test_command_not_found(self):
        with patch(f"{_RUNNER}.subprocess.run", side_effect=FileNotFoundError()):
            r = run_command(["nonexistent-tool"])
        assert r == {"ok": False, "error": "Command not found: nonexistent-tool"}

    def test_timeout(self):
        with patch(f"{_RUNNER}.subprocess.run",
                   side_effect=subprocess.TimeoutExpired(cmd="sleep", timeout=5)):
            r = run_command(["sleep", "10"], timeout=5)
        assert r == {"ok": False, "error": "Command timed out (5s)"}

    def test_default_timeout_from_settings(self):
        with patch(f"{_RUNNER}.subprocess.run", return_value=_mock_result()) as mock_run:
            run_command(["true"])
        assert mock_run.call_args.kwargs["timeout"] == context.get_settings().command_timeout

    def test_dry_run_executes_nothing(self):
        context.set_dry_run(True)
        with patch(f"{_RUNNER}.subprocess.run") as mock_run:
            r = run_command(["apt-get", "install", "-y", "git"], needs_sudo=True)
        mock_run.assert_not_called()
        assert r["ok"] is True
        assert r["dry_run"] is True

    def test_sudo_prefix_for_regular_user(self):
        with patch(f"{_RUNNER}.os.geteuid", return_value=1000), \
             patch(f"{_RUNNER}.subprocess.run", return_value=_mock_result()) as mock_run:
            run_command(["apt-get", "update"], needs_sudo=True)
        assert mock_run.call_args.args[0] == ["sudo", "apt-get", "update"]

    def test_no_sudo_as_root(self):
        with patch(f"{_RUNNER}.os.geteuid", return_value=0), \
             patch(f"{_RUNNER}.subprocess.run", return_value=_mock_result()) as mock_run:
            run_command(["apt-get", "update"], needs_sudo=True)
        assert mock_run.call_args.args[0] == ["apt-get", "update"]

    def test_input_piped_to_stdin(self):
        with patch(f"{_RUNNER}.subprocess.run", return_value=_mock_result()) as mock_run:
            run_command(["mysql"], input_text="SELECT 1;")
        assert mock_run.call_args.kwargs["input"] == "SELECT 1;"

    def test_env_overrides_passed_verbatim(self, monkeypatch):
        monkeypatch.setenv("HOME", "/home/someone")
        with patch(f"{_RUNNER}.subprocess.run", return_value=_mock_result()) as mock_run:
            run_command(["mysql"], env_overrides={"MYSQL_PWD": "pa$HOMEx$HOME"})
        assert mock_run.call_args.kwargs["env"]["MYSQL_PWD"] == "pa$HOMEx$HOME"

    def test_wrong_sudo_password(self):
        with patch(f"{_RUNNER}.os.geteuid", return_value=1000), \
             patch(f"{_RUNNER}.subprocess.run",
                   return_value=_mock_result(stderr="sudo: 3 incorrect password attempts", rc=1)):
            r = run_command(["true"], needs_sudo=True)
        assert r == {"ok": False, "needs_sudo": True, "error": "Wrong sudo password."}

    def test_output_tail_kept(self):
        with patch(f"{_RUNNER}.subprocess.run", return_value=_mock_result(stdout="x" * 5000)):
            assert len(run_command(["true"])["stdout"]) == 2000
            assert len(run_command(["true"], full_output=True)["stdout"]) == 5000


# ═══════════════════════════════════════════════════════════════════
#  run_steps
# ═══════════════════════════════════════════════════════════════════


class TestRunSteps:
    def test_all_steps_run(self):
        with patch(f"{_RUNNER}.subprocess.run", return_value=_mock_result()) as mock_run:
            r = run_steps([_step("one", "true"), _step("two", "true")])
        assert r == {"ok": True, "steps_run": 2}
        assert mock_run.call_count == 2

    def test_stops_at_first_failure(self):
        results = [_mock_result(), _mock_result(stderr="boom\nlast line", rc=1), _mock_result()]
        with patch(f"{_RUNNER}.subprocess.run", side_effect=results) as mock_run:
            r = run_steps([_step("one", "a"), _step("two", "b"), _step("three", "c")])
        assert r["ok"] is False
        assert r["failed_step"] == "two"
        assert r["error"] == "two: Command failed (exit 1)"
        assert r["detail"] == "last line"
        assert r["steps_run"] == 2
        assert mock_run.call_count == 2

    def test_allow_fail_continues(self):
        results = [_mock_result(rc=1), _mock_result()]
        with patch(f"{_RUNNER}.subprocess.run", side_effect=results):
            r = run_steps([_step("optional", "a", allow_fail=True), _step("needed", "b")])
        assert r == {"ok": True, "steps_run": 2}

    def test_failed_download_stops_before_command(self):
        step = _step("Install deb", "dpkg", "-i", "/tmp/x.deb")
        step["download"] = {"url": "https://example.invalid/x.deb", "dest": "/tmp/x.deb"}
        with patch(f"{_RUNNER}.subprocess.run") as mock_run, \
             patch("ultrabunt.core.services.buntage_install.execution.download.fetch_download",
                   return_value={"ok": False, "error": "HTTP 404"}):
            r = run_steps([step])
        mock_run.assert_not_called()
        assert r["ok"] is False
        assert r["error"] == "Install deb: HTTP 404"
        assert r["steps_run"] == 0
