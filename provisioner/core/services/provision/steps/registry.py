"""
Installation Step Registry — the fixed, ordered set of steps.

The order is a contract: the package manager first, the toolchain
last.  ``package_manager`` is listed for ordering and reporting but
is run by the orchestrator itself because its failure is fatal.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from provisioner.core.services.provision.steps.agent import install_agent
from provisioner.core.services.provision.steps.context import StepContext
from provisioner.core.services.provision.steps.dependency_list import install_dependency_list
from provisioner.core.services.provision.steps.toolchain import install_toolchain
from provisioner.core.services.provision.steps.utility import install_utility

StepAction = Callable[[StepContext], dict[str, Any]]


@dataclass(frozen=True)
class Step:
    """A named, independently gated unit of provisioning work."""

    name: str
    label: str
    action: StepAction | None = None


STEPS: tuple[Step, ...] = (
    Step("package_manager", "Package manager (winget)"),
    Step("packages", "Dependency list", install_dependency_list),
    Step("agent", "CI agent", install_agent),
    Step("utility", "Utility (7-Zip)", install_utility),
    Step("toolchain", "IDE/toolchain", install_toolchain),
)

def get_step(name: str) -> Step:
    """Look up a step by name."""
    for step in STEPS:
        if step.name == name:
            return step
    raise KeyError(name)
