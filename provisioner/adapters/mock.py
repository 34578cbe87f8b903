"""
Mock process backend — test double for every external invocation.

Used to exercise the Command Runner and the provisioning steps
without starting real programs.  Configurable per argv prefix to
return success, failure, custom output, or a spawn failure.
"""

from __future__ import annotations

import io
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from provisioner.adapters.base import ProcessBackend
from provisioner.core.errors import SpawnFailure


@dataclass
class _Scripted:
    output: str = ""
    exit_code: int = 0


class _FakeProcess:
    """Finished process with canned output."""

    def __init__(self, output: str, exit_code: int):
        self.stdout = io.StringIO(output)
        self._exit_code = exit_code

    def wait(self) -> int:
        return self._exit_code


class MockProcessBackend(ProcessBackend):
    """Universal mock backend for testing.

    By default every program exits 0 with no output.  Responses are
    matched on the longest configured argv prefix.
    """

    def __init__(self, default_output: str = ""):
        self._default = _Scripted(output=default_output)
        self._responses: dict[tuple[str, ...], _Scripted] = {}
        self._missing: set[str] = set()
        self._binaries: dict[str, str] = {}
        self._call_log: list[list[str]] = []
        self._env_log: list[dict[str, str] | None] = []

    @property
    def call_log(self) -> list[list[str]]:
        """Every argv this backend was asked to spawn, in order."""
        return self._call_log

    @property
    def env_log(self) -> list[dict[str, str] | None]:
        """Environment passed with each spawn (parallel to call_log)."""
        return self._env_log

    @property
    def call_count(self) -> int:
        """Number of spawn attempts, including failed ones."""
        return len(self._call_log)

    def set_response(self, *argv: str, output: str = "", exit_code: int = 0) -> None:
        """Script the result for commands starting with ``argv``."""
        self._responses[tuple(argv)] = _Scripted(output=output, exit_code=exit_code)

    def set_failure(self, *argv: str, output: str = "mock failure", exit_code: int = 1) -> None:
        """Configure commands starting with ``argv`` to fail."""
        self.set_response(*argv, output=output, exit_code=exit_code)

    def set_missing(self, program: str) -> None:
        """Make ``program`` impossible to spawn."""
        self._missing.add(program)

    def add_binary(self, program: str, path: str | None = None) -> None:
        """Make ``program`` resolvable through ``which``."""
        self._binaries[program] = path or f"C:\\mock\\{program}.exe"

    def calls_for(self, program: str) -> list[list[str]]:
        """Calls whose program is ``program``."""
        return [argv for argv in self._call_log if argv and argv[0] == program]

    def spawn(
        self,
        argv: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> _FakeProcess:
        argv = list(argv)
        self._call_log.append(argv)
        self._env_log.append(dict(env) if env is not None else None)

        if argv[0] in self._missing:
            raise SpawnFailure(argv[0], "No such file or directory")

        scripted = self._match(argv)
        return _FakeProcess(scripted.output, scripted.exit_code)

    def which(self, program: str) -> str | None:
        return self._binaries.get(program)

    def reset(self) -> None:
        """Clear the call log and scripted responses."""
        self._call_log.clear()
        self._env_log.clear()
        self._responses.clear()
        self._missing.clear()
        self._binaries.clear()

    def _match(self, argv: list[str]) -> _Scripted:
        best: tuple[str, ...] | None = None
        for prefix in self._responses:
            if tuple(argv[: len(prefix)]) == prefix:
                if best is None or len(prefix) > len(best):
                    best = prefix
        return self._responses[best] if best is not None else self._default
