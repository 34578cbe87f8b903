"""
Dependency-list step — install every package from the package list.

One failing package never stops the batch: it is logged as an error
and the loop moves on.  Re-running retries it, since winget installs
are themselves idempotent.

Packages that name a ``binary`` are checked after install (or when
already present): the binary must resolve on PATH and answer
``--version``.  A failed check is a warning, never a failure.
"""

from __future__ import annotations

import logging
from typing import Any

from provisioner.core.models.package import PackageSpec
from provisioner.core.services.provision.detection.binary_check import check_binary
from provisioner.core.services.provision.execution.winget_install import install_package
from provisioner.core.services.provision.steps.context import StepContext

logger = logging.getLogger(__name__)


def install_dependency_list(ctx: StepContext) -> dict[str, Any]:
    """Install each package of ``ctx.packages`` in list order."""
    if not ctx.has_package_manager:
        return {"ok": True, "skipped": True, "message": "winget is not available"}
    if not ctx.packages:
        return {"ok": True, "skipped": True, "message": "package list is empty"}

    installed: list[str] = []
    present: list[str] = []
    failed: list[str] = []
    unverified: list[str] = []

    for package in ctx.packages:
        logger.info("Installing %s", package.identifier)
        try:
            result = install_package(ctx.runner, package)
        except Exception as e:
            logger.error("Failed to install %s: %s", package.identifier, e)
            failed.append(package.identifier)
            continue

        if result is None:
            present.append(package.identifier)
        elif result.success:
            logger.info("Installed %s", package.identifier)
            installed.append(package.identifier)
        else:
            logger.error(
                "Failed to install %s (exit %d)", package.identifier, result.exit_code,
            )
            failed.append(package.identifier)
            continue

        if package.binary and not ctx.runner.dry_run and not _verify(ctx, package):
            unverified.append(package.identifier)

    total = len(ctx.packages)
    message = (
        f"{len(installed)} installed, {len(present)} already present, "
        f"{len(failed)} failed of {total}"
    )
    if unverified:
        message += f", {len(unverified)} unverified"
    return {
        "ok": not failed,
        "message": message,
        "installed": installed,
        "present": present,
        "failed": failed,
        "unverified": unverified,
    }


def _verify(ctx: StepContext, package: PackageSpec) -> bool:
    path, version = check_binary(ctx.runner, package.binary)
    if path is None:
        logger.warning("%s: '%s' not found on PATH", package.identifier, package.binary)
        return False
    if version is None:
        logger.warning("%s: '%s --version' failed (%s)", package.identifier, package.binary, path)
        return False
    logger.info("%s: %s (%s)", package.binary, version, path)
    return True
