"""
Utility step — install an archiver and make sure it is on PATH.

Some installers do not register their directory in PATH.  When the
binary still does not resolve after install, its known directory is
appended to the machine PATH (once).
"""

from __future__ import annotations

import logging
from typing import Any

from provisioner.adapters.shell.powershell import ensure_machine_path_entry
from provisioner.core.errors import StepFailure
from provisioner.core.models.package import WingetPackage
from provisioner.core.services.provision.execution.winget_install import install_package
from provisioner.core.services.provision.steps.context import StepContext

logger = logging.getLogger(__name__)


def install_utility(ctx: StepContext) -> dict[str, Any]:
    utility = ctx.settings.profile.utility
    if not ctx.has_package_manager:
        return {"ok": True, "skipped": True, "message": "winget is not available"}

    result = install_package(ctx.runner, WingetPackage(identifier=utility.identifier))
    if result is not None and not result.success:
        raise StepFailure(
            "utility", f"{utility.identifier} install failed (exit {result.exit_code})",
        )

    if ctx.runner.which(utility.binary):
        return {"ok": True, "message": f"{utility.binary} is on PATH"}

    logger.info("%s not found on PATH, adding %s", utility.binary, utility.install_dir)
    changed = ensure_machine_path_entry(ctx.runner, utility.install_dir)
    return {
        "ok": True,
        "message": f"{utility.install_dir} {'added to' if changed else 'already in'} PATH",
        "path_changed": changed,
    }
