"""
Toolchain step — Visual Studio Build Tools with a ``.vsconfig``.

Runs last: it is the longest install and benefits from PATH and
system state set up by the earlier steps.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from provisioner.core.errors import StepFailure
from provisioner.core.models.package import WingetPackage
from provisioner.core.services.provision.execution.winget_install import install_package
from provisioner.core.services.provision.steps.context import StepContext

logger = logging.getLogger(__name__)


def toolchain_override(extra: str, config_file: Path) -> str:
    """Installer override string with the embedded config path."""
    return f'{extra} --config "{config_file}"'.strip()


def install_toolchain(ctx: StepContext) -> dict[str, Any]:
    toolchain = ctx.settings.profile.toolchain
    if not ctx.has_package_manager:
        return {"ok": True, "skipped": True, "message": "winget is not available"}

    config_file = Path(toolchain.config_file).resolve()
    if not config_file.is_file():
        raise StepFailure("toolchain", f"installer config not found: {config_file}")

    logger.info("Installing %s with %s", toolchain.identifier, config_file.name)
    result = install_package(
        ctx.runner,
        WingetPackage(identifier=toolchain.identifier),
        extra_args=["--override", toolchain_override(toolchain.extra_override, config_file)],
    )
    if result is None:
        return {"ok": True, "message": f"{toolchain.identifier} already installed"}
    if not result.success:
        raise StepFailure(
            "toolchain", f"{toolchain.identifier} install failed (exit {result.exit_code})",
        )
    return {"ok": True, "message": f"{toolchain.identifier} installed"}
