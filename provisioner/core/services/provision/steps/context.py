"""Shared, read-only inputs for every installation step."""

from __future__ import annotations

from dataclasses import dataclass, field

from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.models.options import InstallOptions
from provisioner.core.models.package import PackageSpec
from provisioner.core.models.profile import ProvisionSettings


@dataclass(frozen=True)
class StepContext:
    """Everything a step needs, passed by parameter."""

    runner: CommandRunner
    settings: ProvisionSettings
    options: InstallOptions
    packages: tuple[PackageSpec, ...] = field(default_factory=tuple)
    # None when winget is absent (and was not bootstrapped).
    winget_version: str | None = None

    @property
    def has_package_manager(self) -> bool:
        return self.winget_version is not None
