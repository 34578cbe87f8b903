"""
L5 Orchestration — the provisioning run.

Fixed sequence:

    privileges → env + package list → Run-Gate → winget guarantee
    → steps (isolated, fixed order) → persist fingerprint

Only three conditions end a run early with exit code 1: missing
privileges, a missing/invalid package list, and winget being
unavailable after a bootstrap.  Every other failure is logged at the
step boundary and the next step runs.
"""

from __future__ import annotations

import logging
import sys
import time

from provisioner.adapters.shell.command import CommandRunner
from provisioner.adapters.shell.powershell import is_elevated, relaunch_elevated
from provisioner.core.config.env_file import load_env_file
from provisioner.core.config.loader import load_package_list
from provisioner.core.errors import ConfigError, PrivilegeError, StepFailure
from provisioner.core.models.options import InstallOptions
from provisioner.core.models.profile import ProvisionSettings
from provisioner.core.models.run import GateState, RunReport
from provisioner.core.services.provision.detection.winget_probe import probe_version
from provisioner.core.services.provision.orchestration.run_gate import (
    RunGate,
    compute_fingerprint,
)
from provisioner.core.services.provision.steps.context import StepContext
from provisioner.core.services.provision.steps.package_manager import (
    ensure_package_manager,
)
from provisioner.core.services.provision.steps.registry import STEPS

logger = logging.getLogger(__name__)


def run_provisioning(
    options: InstallOptions,
    settings: ProvisionSettings,
    *,
    runner: CommandRunner | None = None,
) -> RunReport:
    """Run the provisioning sequence once.

    Args:
        options: Which steps are enabled.
        settings: Profile, file locations, and run switches.
        runner: Command Runner (default: real processes honouring
            ``settings.dry_run`` / ``settings.quiet``).

    Returns:
        RunReport whose ``exit_code`` the CLI passes to ``sys.exit``.
    """
    report = RunReport()
    runner = runner or CommandRunner(dry_run=settings.dry_run, quiet=settings.quiet)

    # ── 1. Privileges ──
    if not settings.dry_run and not is_elevated():
        if settings.elevate and relaunch_elevated(["-m", "provisioner", *sys.argv[1:]]):
            logger.info("Relaunched with elevated privileges")
            report.status = "skipped"
            return report.finish()
        return _fatal(report, settings, PrivilegeError(
            "Administrator privileges are required. "
            "Re-run from an elevated shell or pass --elevate."
        ))

    # ── 2. Environment overrides + package list ──
    load_env_file(settings.env_file)
    try:
        packages = load_package_list(settings.packages_file)
    except ConfigError as e:
        return _fatal(report, settings, e, suffix="Exiting")

    # ── 3/4. Run-Gate ──
    fingerprint = compute_fingerprint(settings.profile, packages)
    gate = RunGate(settings.fingerprint_path, fingerprint)
    report.fingerprint = fingerprint
    report.gate = gate.state()

    if report.gate is GateState.CURRENT and not settings.force:
        logger.info("Already provisioned (fingerprint %s) — nothing to do", fingerprint[:12])
        report.status = "skipped"
        return report.finish()

    logger.info("Provisioning: %s", ", ".join(options.enabled_steps()))

    # ── 5. Package manager (hard gate) ──
    if options.enabled("package_manager"):
        winget_version = ensure_package_manager(runner, settings.profile.bootstrap)
        if winget_version is None:
            return _fatal(report, settings, "winget is not available after bootstrap")
        report.record("package_manager", "ok", winget_version)
    else:
        winget_version = probe_version(runner)
        report.record("package_manager", "disabled")

    ctx = StepContext(
        runner=runner,
        settings=settings,
        options=options,
        packages=tuple(packages),
        winget_version=winget_version,
    )

    # ── 6. Steps, each isolated ──
    for step in STEPS:
        if step.action is None:
            continue
        if not options.enabled(step.name):
            report.record(step.name, "disabled")
            continue

        logger.info("▶ %s", step.label)
        try:
            result = step.action(ctx)
        except StepFailure as e:
            logger.error("%s failed: %s", step.label, e.message)
            report.record(step.name, "failed", e.message)
            continue
        except Exception as e:
            logger.exception("%s failed unexpectedly: %s", step.label, e)
            report.record(step.name, "failed", str(e))
            continue

        message = result.get("message", "")
        if result.get("skipped"):
            logger.warning("%s skipped: %s", step.label, message)
            report.record(step.name, "skipped", message)
        elif not result.get("ok"):
            logger.warning("%s finished with failures: %s", step.label, message)
            report.record(step.name, "failed", message)
        else:
            logger.info("%s done: %s", step.label, message)
            report.record(step.name, "ok", message)

    # ── 7. Persist fingerprint ──
    if settings.dry_run:
        logger.info("Dry run — fingerprint not saved")
    else:
        gate.mark_current()

    # ── 8. Done ──
    report.finish()
    if report.failed_steps:
        logger.warning(
            "Provisioning complete with failed steps: %s (re-run with --force to retry)",
            ", ".join(report.failed_steps),
        )
    else:
        logger.info("Provisioning complete")
    return report


def _fatal(
    report: RunReport,
    settings: ProvisionSettings,
    error: Exception | str,
    *,
    suffix: str = "",
) -> RunReport:
    """Log a run-fatal error, pause for the operator, and fail the report."""
    message = str(error)
    if suffix:
        message = f"{message}. {suffix}"
    logger.error(message)
    if settings.pause_seconds:
        time.sleep(settings.pause_seconds)
    return report.fail(message)
