"""
Process backend — the seam between the Command Runner and the OS.

The Command Runner never creates processes itself.  It asks a backend,
so dry-run/quiet semantics can be tested against a fake backend that
counts spawns instead of starting programs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import IO, Protocol


class ProcessHandle(Protocol):
    """A running process with one merged output stream.

    ``subprocess.Popen`` opened with ``stderr=STDOUT`` and text mode
    satisfies this protocol as-is.  The runner closes ``stdout`` once
    the process has exited.
    """

    stdout: IO[str] | None

    def wait(self) -> int: ...


class ProcessBackend(ABC):
    """Abstract base class for process backends.

    Backends raise ``SpawnFailure`` when a program cannot be started.
    They never raise raw ``OSError`` to the runner.
    """

    @abstractmethod
    def spawn(
        self,
        argv: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> ProcessHandle:
        """Start ``argv`` with stdout and stderr merged into one pipe."""

    @abstractmethod
    def which(self, program: str) -> str | None:
        """Resolve ``program`` on the execution path, or None."""
