"""
ExecResult — the outcome of one external process invocation.

Every call through the Command Runner produces one of these.  Failures
are captured here, never raised.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ExecResult(BaseModel):
    """Exit status and merged stdout/stderr of a finished process."""

    model_config = ConfigDict(frozen=True)

    success: bool
    exit_code: int
    signal: str | None = None
    combined_output: str = ""

    @classmethod
    def dry_run(cls) -> ExecResult:
        """Synthetic success for a command that was only printed."""
        return cls(success=True, exit_code=0)

    @classmethod
    def spawn_failed(cls, message: str) -> ExecResult:
        """Failed result for a program that could not be started."""
        return cls(success=False, exit_code=-1, combined_output=message)
