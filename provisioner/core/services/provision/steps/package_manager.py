"""
Package-manager step — make sure winget is present.

Unlike the other steps this one is hard-gating: if winget is still
missing after a bootstrap attempt, the run cannot continue.
"""

from __future__ import annotations

import logging

from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.models.profile import BootstrapSources
from provisioner.core.services.provision.detection.winget_probe import probe_version
from provisioner.core.services.provision.execution.bootstrap import (
    bootstrap_package_manager,
)

logger = logging.getLogger(__name__)


def ensure_package_manager(runner: CommandRunner, sources: BootstrapSources) -> str | None:
    """Probe winget, bootstrap it if absent, and probe again.

    Returns:
        The winget version, or None if it is still unavailable.
    """
    version = probe_version(runner)
    if version is not None:
        logger.info("winget %s is installed", version or "(dry run)")
        return version

    logger.warning("winget not found — bootstrapping")
    if not bootstrap_package_manager(runner, sources):
        logger.warning("winget bootstrap did not complete")

    version = probe_version(runner)
    if version is not None:
        logger.info("winget %s installed", version)
    return version
