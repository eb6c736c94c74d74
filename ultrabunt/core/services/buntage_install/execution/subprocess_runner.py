"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for commands that
change the system.  Sudo handling, dry run, logging and error
conversion are centralised here.  Read-only queries (dpkg-query,
snap list, ...) call subprocess directly in the detection layer.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)

# Keep the tail of long package-manager output in result dicts.
_OUTPUT_TAIL = 2000


def _sudo_prefix(needs_sudo: bool) -> list[str]:
    if not needs_sudo or os.geteuid() == 0:
        return []
    # sudo prompts on the terminal and caches credentials
    return ["sudo"]


def run_command(
    cmd: list[str],
    *,
    needs_sudo: bool = False,
    timeout: int | None = None,
    env_overrides: dict[str, str] | None = None,
    input_text: str | None = None,
    full_output: bool = False,
) -> dict[str, Any]:
    """Run a command, with sudo when the step needs root.

    Args:
        cmd: Command list for ``subprocess.run()``.
        needs_sudo: Whether the command requires root.  Ignored when
            already running as root.
        timeout: Seconds before giving up (default: ``command_timeout``).
        env_overrides: Extra environment variables, passed verbatim.
        input_text: Data written to the command's stdin (never logged).
        full_output: Keep all of stdout instead of the tail.

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    from ultrabunt.core.context import get_settings, is_dry_run

    if timeout is None:
        timeout = get_settings().command_timeout

    full_cmd = _sudo_prefix(needs_sudo) + list(cmd)
    printable = shlex.join(full_cmd)

    if is_dry_run():
        logger.info("[dry-run] %s", printable)
        return {"ok": True, "stdout": "", "elapsed_ms": 0, "dry_run": True}

    logger.info("Running: %s", printable)

    env = os.environ.copy()
    if env_overrides:
        env.update(env_overrides)

    start = time.monotonic()
    try:
        result = subprocess.run(
            full_cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            input=input_text,
            env=env,
        )
    except subprocess.TimeoutExpired:
        logger.error("Timed out after %ss: %s", timeout, printable)
        return {"ok": False, "error": f"Command timed out ({timeout}s)"}
    except FileNotFoundError:
        logger.error("Command not found: %s", full_cmd[0])
        return {"ok": False, "error": f"Command not found: {full_cmd[0]}"}
    except OSError as e:
        logger.exception("Subprocess error: %s", printable)
        return {"ok": False, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout or ""
    if not full_output:
        stdout = stdout[-_OUTPUT_TAIL:]
    stderr = result.stderr[-_OUTPUT_TAIL:] if result.stderr else ""

    if stdout and not full_output:
        logger.debug("stdout:\n%s", stdout)
    if stderr:
        logger.debug("stderr:\n%s", stderr)

    if result.returncode == 0:
        return {"ok": True, "stdout": stdout, "elapsed_ms": elapsed_ms}

    if needs_sudo and (
        "incorrect password" in stderr.lower()
        or "sorry, try again" in stderr.lower()
    ):
        return {"ok": False, "needs_sudo": True, "error": "Wrong sudo password."}

    logger.warning("Command failed (exit %d): %s", result.returncode, printable)
    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "stderr": stderr,
        "stdout": stdout,
        "elapsed_ms": elapsed_ms,
    }


def run_steps(steps: list[dict]) -> dict[str, Any]:
    """Run steps in order, stopping at the first failure.

    Steps flagged ``allow_fail`` are logged and skipped over when they
    fail.  Steps with a ``download`` entry fetch their file first.

    Returns:
        ``{"ok": True, "steps_run": N}`` or
        ``{"ok": False, "error": "...", "failed_step": label, "steps_run": N}``
    """
    from ultrabunt.core.services.buntage_install.execution.download import fetch_download

    ran = 0
    for step in steps:
        label = step.get("label", shlex.join(step["cmd"]))
        logger.info("→ %s", label)

        if step.get("download"):
            dl = fetch_download(step["download"])
            if not dl["ok"]:
                return {
                    "ok": False,
                    "error": f"{label}: {dl['error']}",
                    "failed_step": label,
                    "steps_run": ran,
                }

        result = run_command(step["cmd"], needs_sudo=step.get("needs_sudo", False))
        ran += 1
        if result["ok"]:
            continue
        if step.get("allow_fail"):
            logger.warning("%s failed (ignored): %s", label, result["error"])
            continue
        detail = result.get("stderr", "").strip().splitlines()
        return {
            "ok": False,
            "error": f"{label}: {result['error']}",
            "detail": detail[-1] if detail else "",
            "failed_step": label,
            "steps_run": ran,
        }
    return {"ok": True, "steps_run": ran}
