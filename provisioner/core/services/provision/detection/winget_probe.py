"""
L3 Detection — Package-manager probes.

Read-only: ``winget --version`` and ``winget list``.  A missing winget
binary is reported the same way as a failing one.
"""

from __future__ import annotations

import logging

from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.models.package import PackageSpec

logger = logging.getLogger(__name__)

WINGET = "winget"

_NOT_INSTALLED_MARKER = "No installed package found matching input criteria."


def probe_version(runner: CommandRunner) -> str | None:
    """Get the installed winget version.

    Returns:
        Trimmed ``winget --version`` output (e.g. ``"v1.7.10861"``), or
        None if winget is missing or the query fails.  A dry run reports
        an empty version, i.e. present.
    """
    result = runner.run(WINGET, ["--version"], quiet=True)
    if not result.success:
        logger.debug("winget probe failed (exit %d): %s",
                     result.exit_code, result.combined_output)
        return None
    return result.combined_output


def is_package_installed(runner: CommandRunner, package: PackageSpec) -> bool:
    """Whether ``winget list`` reports ``package`` as installed.

    winget has no machine-readable list output, so this matches on the
    "not found" marker and on the identifier appearing in the table.
    """
    result = runner.run(
        WINGET,
        ["list", "-e", "--id", package.identifier, "--accept-source-agreements"],
        quiet=True,
    )
    output = result.combined_output
    if _NOT_INSTALLED_MARKER in output:
        return False
    return result.success and package.identifier in output
