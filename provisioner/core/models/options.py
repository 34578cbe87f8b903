"""
InstallOptions — which installation steps a run should perform.

Built once per run from CLI arguments and passed by parameter into
the orchestrator and every step.  Immutable after construction.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

# Fixed execution order.  Toolchain runs last because it relies on
# PATH and system state established by the earlier steps.
STEP_ORDER: tuple[str, ...] = (
    "package_manager",
    "packages",
    "agent",
    "utility",
    "toolchain",
)


class InstallOptions(BaseModel):
    """Per-step enable flags plus the derived ``all`` flag.

    If no individual flag is set, ``all`` is forced on: an invocation
    without selections provisions everything rather than nothing.
    """

    model_config = ConfigDict(frozen=True)

    package_manager: bool = False
    packages: bool = False
    agent: bool = False
    utility: bool = False
    toolchain: bool = False
    all: bool = False

    @model_validator(mode="before")
    @classmethod
    def _default_to_all(cls, data: Any) -> Any:
        if isinstance(data, dict):
            if not any(data.get(name) for name in (*STEP_ORDER, "all")):
                data = {**data, "all": True}
        return data

    def enabled(self, step: str) -> bool:
        """Whether ``step`` should run (its own flag or ``all``)."""
        if step not in STEP_ORDER:
            raise ValueError(f"Unknown step: {step}")
        return self.all or bool(getattr(self, step))

    def enabled_steps(self) -> list[str]:
        """Enabled step names in execution order."""
        return [name for name in STEP_ORDER if self.enabled(name)]
