"""
Provisioning profile and runtime settings.

``ProvisionProfile`` is loaded from ``provision.yml`` (optional, every
field has a default).  ``ProvisionSettings`` combines it with the paths
and switches given on the command line.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

FINGERPRINT_FILE = ".provision-fingerprint"
LOG_FILE = "provision.log"


class BootstrapSources(BaseModel):
    """Where the winget bootstrap artifacts come from."""

    model_config = ConfigDict(extra="forbid")

    vclibs_url: str = "https://aka.ms/Microsoft.VCLibs.x64.14.00.Desktop.appx"
    ui_xaml_url: str = (
        "https://github.com/microsoft/microsoft-ui-xaml/releases/download/"
        "v2.8.6/Microsoft.UI.Xaml.2.8.x64.appx"
    )
    release_index_url: str = "https://api.github.com/repos/microsoft/winget-cli/releases"
    license_asset_pattern: str = r"_License1\.xml$"
    installer_url: str = "https://aka.ms/getwinget"
    keep_failed_downloads: bool = True


class ToolchainProfile(BaseModel):
    """IDE/toolchain installed last, with a ``.vsconfig`` override."""

    model_config = ConfigDict(extra="forbid")

    identifier: str = "Microsoft.VisualStudio.2022.BuildTools"
    config_file: str = "vs2022.vsconfig"
    extra_override: str = "--passive --wait"


class AgentProfile(BaseModel):
    """CI agent installed from a remote PowerShell script."""

    model_config = ConfigDict(extra="forbid")

    token_env: str = "BUILDKITE_AGENT_TOKEN"
    script_url: str = (
        "https://raw.githubusercontent.com/buildkite/agent/main/install.ps1"
    )
    # Variable name the install script reads the token from.
    script_token_env: str = "buildkiteAgentToken"


class UtilityProfile(BaseModel):
    """Command-line utility that must be resolvable on PATH."""

    model_config = ConfigDict(extra="forbid")

    identifier: str = "7zip.7zip"
    binary: str = "7z"
    install_dir: str = r"C:\Program Files\7-Zip"


class ProvisionProfile(BaseModel):
    """Root of ``provision.yml``."""

    model_config = ConfigDict(extra="forbid")

    bootstrap: BootstrapSources = Field(default_factory=BootstrapSources)
    toolchain: ToolchainProfile = Field(default_factory=ToolchainProfile)
    agent: AgentProfile = Field(default_factory=AgentProfile)
    utility: UtilityProfile = Field(default_factory=UtilityProfile)
    fatal_pause_seconds: float = Field(default=10, ge=0)


class ProvisionSettings(BaseModel):
    """Everything a run needs besides the step selection."""

    model_config = ConfigDict(frozen=True)

    profile: ProvisionProfile = Field(default_factory=ProvisionProfile)

    packages_file: Path = Path("packages.json")
    env_file: Path = Path(".env")
    state_dir: Path = Path(".")
    log_file: Path | None = None

    dry_run: bool = False
    quiet: bool = False
    force: bool = False
    elevate: bool = False
    pause: bool = True

    @property
    def fingerprint_path(self) -> Path:
        return self.state_dir / FINGERPRINT_FILE

    @property
    def resolved_log_file(self) -> Path:
        return self.log_file or self.state_dir / LOG_FILE

    @property
    def pause_seconds(self) -> float:
        return self.profile.fatal_pause_seconds if self.pause else 0
