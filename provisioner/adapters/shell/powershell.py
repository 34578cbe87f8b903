"""
PowerShell helpers — machine-scoped environment and elevation.

Reads and writes of the machine PATH go through the Command Runner,
so they honour dry-run and are visible to the mock backend.
"""

from __future__ import annotations

import logging
import os
import sys

from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.errors import StepFailure
from provisioner.core.models.result import ExecResult

logger = logging.getLogger(__name__)

_FLAGS = ["-NoProfile", "-NonInteractive", "-NoLogo"]


def which_powershell(runner: CommandRunner) -> str:
    """Prefer PowerShell 7 (``pwsh``) and fall back to Windows PowerShell."""
    for candidate in ("pwsh", "powershell"):
        if runner.which(candidate):
            return candidate
    return "powershell"


def run_powershell(
    runner: CommandRunner,
    script: str,
    *,
    quiet: bool = True,
    env: dict[str, str] | None = None,
) -> ExecResult:
    """Run a PowerShell snippet through the Command Runner."""
    return runner.run(
        which_powershell(runner),
        [*_FLAGS, "-Command", script],
        quiet=quiet,
        env=env,
    )


def get_machine_path(runner: CommandRunner) -> str:
    """Current machine-scoped PATH value."""
    result = run_powershell(
        runner, "[Environment]::GetEnvironmentVariable('PATH', 'Machine')"
    )
    if not result.success:
        raise StepFailure("path", f"Cannot read machine PATH: {result.combined_output}")
    return result.combined_output


def set_machine_path(runner: CommandRunner, value: str) -> None:
    """Overwrite the machine-scoped PATH value."""
    escaped = value.replace("'", "''")
    result = run_powershell(
        runner,
        f"[Environment]::SetEnvironmentVariable('PATH', '{escaped}', 'Machine')",
    )
    if not result.success:
        raise StepFailure("path", f"Cannot write machine PATH: {result.combined_output}")


def append_path_entry(current: str, entry: str) -> str | None:
    """Return ``current`` with ``entry`` appended, or None if already present.

    Membership is exact substring containment, so an entry already in
    PATH (in any position) is never added a second time.
    """
    if entry in current:
        return None
    if current and not current.endswith(";"):
        return f"{current};{entry}"
    return f"{current}{entry}"


def ensure_machine_path_entry(runner: CommandRunner, entry: str) -> bool:
    """Append ``entry`` to the machine PATH once.

    Also updates this process's PATH so later steps resolve the binary.

    Returns:
        True if PATH was changed, False if the entry was already there.
    """
    current = get_machine_path(runner)
    updated = append_path_entry(current, entry)
    if updated is None:
        logger.info("%s already on machine PATH", entry)
        return False

    set_machine_path(runner, updated)
    if not runner.dry_run and entry not in os.environ.get("PATH", ""):
        os.environ["PATH"] = os.environ.get("PATH", "") + os.pathsep + entry
    logger.info("Added %s to machine PATH", entry)
    return True


def is_elevated() -> bool:
    """Whether this process runs with administrator/root rights."""
    if sys.platform == "win32":
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except OSError:
            return False
    return os.geteuid() == 0


def relaunch_elevated(args: list[str]) -> bool:
    """Ask Windows to rerun the interpreter with ``args`` elevated (UAC prompt).

    Returns:
        True if the elevated process was started.  Always False off
        Windows, where escalation must be done with sudo by the user.
    """
    if sys.platform != "win32":
        return False

    import ctypes
    import subprocess

    params = subprocess.list2cmdline(args)
    # runas children start in System32 unless a directory is given.
    rc = ctypes.windll.shell32.ShellExecuteW(
        None, "runas", sys.executable, params, os.getcwd(), 1,
    )
    # ShellExecuteW returns a value > 32 on success.
    return rc > 32
