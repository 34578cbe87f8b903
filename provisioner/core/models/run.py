"""
RunReport — the outcome of one orchestrator run.

Mirrors the role of the operation record: a summary the CLI turns into
console output and an exit code.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class GateState(str, Enum):
    """Run-Gate states."""

    STALE = "stale"
    CURRENT = "current"


StepStatus = Literal["ok", "failed", "skipped", "disabled"]


class StepRecord(BaseModel):
    """Result of a single installation step."""

    name: str
    status: StepStatus = "disabled"
    message: str = ""


class RunReport(BaseModel):
    """Summary of a provisioning run."""

    status: Literal["ok", "partial", "skipped", "failed"] = "ok"
    exit_code: int = 0
    gate: GateState | None = None
    fingerprint: str = ""
    error: str | None = None

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = ""

    steps: dict[str, StepRecord] = Field(default_factory=dict)

    def record(self, name: str, status: StepStatus, message: str = "") -> None:
        """Set the status of a step."""
        self.steps[name] = StepRecord(name=name, status=status, message=message)

    def fail(self, error: str, exit_code: int = 1) -> RunReport:
        """Mark the run as fatally failed."""
        self.status = "failed"
        self.error = error
        self.exit_code = exit_code
        self.ended_at = _now_iso()
        return self

    def finish(self) -> RunReport:
        """Close the report, downgrading to ``partial`` if a step failed."""
        if any(s.status == "failed" for s in self.steps.values()):
            self.status = "partial"
        self.ended_at = _now_iso()
        return self

    @property
    def failed_steps(self) -> list[str]:
        return [name for name, s in self.steps.items() if s.status == "failed"]
