"""
L4 Execution — winget bootstrap.

Installs winget on a machine that does not have it.  The chain is
strictly ordered: runtime redistributable, UI framework, signed
license, installer bundle, then one provisioning call that ties them
together.  The first failed download stops the chain; nothing is
installed from a partial set.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

import click

from provisioner.adapters.shell.command import CommandRunner
from provisioner.adapters.shell.powershell import run_powershell
from provisioner.core.errors import DownloadFailure
from provisioner.core.models.artifact import DownloadArtifact
from provisioner.core.models.profile import BootstrapSources
from provisioner.core.services.provision.execution.download import (
    download_file,
    resolve_license_url,
)

logger = logging.getLogger(__name__)

VCLIBS_FILE = "Microsoft.VCLibs.x64.14.00.Desktop.appx"
UI_XAML_FILE = "Microsoft.UI.Xaml.x64.appx"
LICENSE_FILE = "winget_License1.xml"
INSTALLER_FILE = "Microsoft.DesktopAppInstaller.msixbundle"


def _quote(path: Path) -> str:
    return "'" + str(path).replace("'", "''") + "'"


def install_command(
    installer: Path,
    license_file: Path,
    dependencies: list[Path],
) -> str:
    """PowerShell that provisions the bundle with its license and dependencies."""
    deps = ",".join(_quote(p) for p in dependencies)
    return (
        "Add-AppxProvisionedPackage -Online"
        f" -PackagePath {_quote(installer)}"
        f" -LicensePath {_quote(license_file)}"
        f" -DependencyPackagePath {deps}"
    )


def bootstrap_package_manager(runner: CommandRunner, sources: BootstrapSources) -> bool:
    """Download and install winget.

    Args:
        runner: Command Runner (its ``dry_run`` setting is honoured).
        sources: Artifact URLs and the license lookup settings.

    Returns:
        True if the install command succeeded.  The caller still
        re-probes to confirm winget is usable.
    """
    workdir = Path(tempfile.mkdtemp(prefix="winget-bootstrap-"))
    logger.info("Bootstrapping winget in %s", workdir)

    vclibs = DownloadArtifact(url=sources.vclibs_url, local_path=workdir / VCLIBS_FILE)
    ui_xaml = DownloadArtifact(url=sources.ui_xaml_url, local_path=workdir / UI_XAML_FILE)
    installer = DownloadArtifact(url=sources.installer_url, local_path=workdir / INSTALLER_FILE)
    license_path = workdir / LICENSE_FILE

    ok = False
    try:
        _fetch(runner, vclibs)
        _fetch(runner, ui_xaml)
        if runner.dry_run:
            click.echo(f"[download] license lookup via {sources.release_index_url}")
        else:
            license_url = resolve_license_url(
                sources.release_index_url, sources.license_asset_pattern,
            )
            _fetch(runner, DownloadArtifact(url=license_url, local_path=license_path))
        _fetch(runner, installer)

        result = run_powershell(
            runner,
            install_command(
                installer.local_path,
                license_path,
                [vclibs.local_path, ui_xaml.local_path],
            ),
            quiet=False,
        )
        if not result.success:
            logger.error("winget install failed (exit %d): %s",
                         result.exit_code, result.combined_output)
        ok = result.success
    except DownloadFailure as e:
        logger.error("winget bootstrap aborted: %s", e)
    finally:
        if ok or not sources.keep_failed_downloads:
            shutil.rmtree(workdir, ignore_errors=True)
        else:
            logger.warning("Bootstrap files kept for diagnosis in %s", workdir)

    return ok


def _fetch(runner: CommandRunner, artifact: DownloadArtifact) -> None:
    if runner.dry_run:
        click.echo(f"[download] {artifact.url} -> {artifact.local_path}")
        return
    download_file(artifact)
