"""
Domain models — Pydantic types for the provisioner.

All models are re-exported here for convenient access:

    from provisioner.core.models import InstallOptions, PackageSpec, ExecResult
"""

from provisioner.core.models.artifact import DownloadArtifact
from provisioner.core.models.options import STEP_ORDER, InstallOptions
from provisioner.core.models.package import PackageSpec, WingetPackage
from provisioner.core.models.profile import (
    AgentProfile,
    BootstrapSources,
    ProvisionProfile,
    ProvisionSettings,
    ToolchainProfile,
    UtilityProfile,
)
from provisioner.core.models.result import ExecResult
from provisioner.core.models.run import GateState, RunReport, StepRecord

__all__ = [
    "AgentProfile",
    "BootstrapSources",
    "DownloadArtifact",
    "ExecResult",
    "GateState",
    "InstallOptions",
    "PackageSpec",
    "ProvisionProfile",
    "ProvisionSettings",
    "RunReport",
    "STEP_ORDER",
    "StepRecord",
    "ToolchainProfile",
    "UtilityProfile",
    "WingetPackage",
]
