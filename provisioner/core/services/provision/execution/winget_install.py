"""
L4 Execution — winget package installs.

Checks ``winget list`` first so re-runs do not trip over winget's
"already installed" exit code.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.models.package import PackageSpec
from provisioner.core.models.result import ExecResult
from provisioner.core.services.provision.detection.winget_probe import (
    WINGET,
    is_package_installed,
)

logger = logging.getLogger(__name__)


def install_package(
    runner: CommandRunner,
    package: PackageSpec,
    *,
    extra_args: Sequence[str] = (),
) -> ExecResult | None:
    """Install ``package`` unless winget already lists it.

    Returns:
        The install ExecResult, or None if nothing had to be done.
    """
    if is_package_installed(runner, package):
        logger.info("%s is already installed", package.identifier)
        return None
    return runner.run(WINGET, [*package.install_args(), *extra_args])
