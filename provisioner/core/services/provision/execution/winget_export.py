"""
L4 Execution — snapshot installed packages into a package list.

``winget export`` writes the same document layout the package-list
loader accepts, so a machine's current state can seed the list for
the next one.
"""

from __future__ import annotations

import logging
from pathlib import Path

from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.config.loader import load_package_list
from provisioner.core.errors import StepFailure
from provisioner.core.services.provision.detection.winget_probe import WINGET

logger = logging.getLogger(__name__)


def export_installed_packages(runner: CommandRunner, path: Path) -> int:
    """Write the installed winget packages to ``path``.

    Returns:
        Number of packages in the exported list (0 in dry run).

    Raises:
        StepFailure: If winget fails or writes an unreadable file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    result = runner.run(
        WINGET,
        ["export", "-o", str(path), "--include-versions", "--accept-source-agreements"],
        quiet=True,
    )
    if not result.success:
        raise StepFailure("export", f"winget export failed (exit {result.exit_code})")
    if runner.dry_run:
        return 0

    packages = load_package_list(path)
    logger.info("Exported %d packages to %s", len(packages), path)
    return len(packages)
