"""
Machine Provisioner — CLI entrypoint.

Usage:
    python -m provisioner --help
    python -m provisioner                 # every step
    python -m provisioner -p -u           # dependency list + utility only
    python -m provisioner --dry-run       # print what would run
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from provisioner import __version__
from provisioner.core.models.profile import ProvisionSettings
from provisioner.core.observability.logging_config import setup_logging


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="provision")
@click.option("--winget", "-w", "package_manager", is_flag=True,
              help="Ensure winget is installed (bootstrap if missing).")
@click.option("--packages", "-p", is_flag=True, help="Install the package list.")
@click.option("--agent", "-a", is_flag=True, help="Install the CI agent.")
@click.option("--utility", "-u", is_flag=True, help="Install 7-Zip and put it on PATH.")
@click.option("--toolchain", "-t", is_flag=True, help="Install the IDE/toolchain.")
@click.option("--all", "all_steps", is_flag=True,
              help="Run every step (default when no step is selected).")
@click.option("--dry-run", is_flag=True, help="Print commands without running them.")
@click.option("--quiet", "-q", is_flag=True, help="Do not echo installer output.")
@click.option("--force", is_flag=True, help="Run even if already provisioned.")
@click.option("--elevate", is_flag=True, help="Relaunch elevated instead of failing.")
@click.option("--no-pause", is_flag=True, help="Do not pause after a fatal error.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option("--packages-file", type=click.Path(path_type=Path),
              default=Path("packages.json"), show_default=True,
              help="Package list (JSON).")
@click.option("--env-file", type=click.Path(path_type=Path),
              default=Path(".env"), show_default=True,
              help="Environment override file.")
@click.option("--profile", "profile_path", type=click.Path(path_type=Path),
              default=Path("provision.yml"), show_default=True,
              help="Provisioning profile (YAML, optional).")
@click.option("--state-dir", type=click.Path(file_okay=False, path_type=Path),
              default=Path("."), show_default=True,
              help="Directory for the fingerprint and log files.")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Log file (default: <state-dir>/provision.log).")
@click.option("--export", "export_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Write installed winget packages to a list and exit.")
def cli(
    package_manager: bool,
    packages: bool,
    agent: bool,
    utility: bool,
    toolchain: bool,
    all_steps: bool,
    dry_run: bool,
    quiet: bool,
    force: bool,
    elevate: bool,
    no_pause: bool,
    debug: bool,
    packages_file: Path,
    env_file: Path,
    profile_path: Path,
    state_dir: Path,
    log_file: Path | None,
    export_path: Path | None,
) -> None:
    """Machine Provisioner — bring this machine to a known software state."""
    from provisioner.core.config.loader import load_profile
    from provisioner.core.errors import ProvisionError
    from provisioner.core.models.options import InstallOptions

    # ── Logging setup (once, at process start) ──────────────────
    level = "DEBUG" if debug else os.environ.get("PROVISION_LOG_LEVEL", "INFO")
    if log_file is None and os.environ.get("PROVISION_LOG_FILE"):
        log_file = Path(os.environ["PROVISION_LOG_FILE"])
    setup_logging(
        level=level,
        log_file=log_file or state_dir / "provision.log",
        quiet_third_party=not debug,
    )

    try:
        profile = load_profile(profile_path)
    except ProvisionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    settings = ProvisionSettings(
        profile=profile,
        packages_file=packages_file,
        env_file=env_file,
        state_dir=state_dir,
        log_file=log_file,
        dry_run=dry_run,
        quiet=quiet,
        force=force,
        elevate=elevate,
        pause=not no_pause,
    )

    if export_path is not None:
        _export(settings, export_path)
        return

    options = InstallOptions(
        package_manager=package_manager,
        packages=packages,
        agent=agent,
        utility=utility,
        toolchain=toolchain,
        all=all_steps,
    )

    from provisioner.core.services.provision.orchestration.orchestrator import (
        run_provisioning,
    )

    report = run_provisioning(options, settings)

    if report.status == "failed":
        click.secho(f"❌ {report.error}", fg="red", err=True)
    elif report.status == "partial":
        click.secho(f"⚠️  Failed steps: {', '.join(report.failed_steps)}", fg="yellow")
    elif report.status == "skipped":
        click.secho("⏭️  Nothing to do", fg="cyan")
    else:
        click.secho("✅ Provisioning complete", fg="green")

    sys.exit(report.exit_code)


def _export(settings: ProvisionSettings, export_path: Path) -> None:
    """Handle ``--export``: snapshot installed packages and exit."""
    from provisioner.adapters.shell.command import CommandRunner
    from provisioner.core.errors import ProvisionError
    from provisioner.core.services.provision.execution.winget_export import (
        export_installed_packages,
    )

    runner = CommandRunner(dry_run=settings.dry_run, quiet=settings.quiet)
    try:
        count = export_installed_packages(runner, export_path)
    except ProvisionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"📦 Exported {count} packages to {export_path}", fg="green")


if __name__ == "__main__":
    cli()
