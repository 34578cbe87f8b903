"""
Command Runner — the single place external programs are executed.

Every package-manager call, download helper, and PowerShell snippet
goes through ``CommandRunner.run`` so dry-run and quiet modes behave
the same everywhere.  Failures come back as ``ExecResult``, never as
exceptions.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
from collections.abc import Mapping, Sequence

import click

from provisioner.adapters.base import ProcessBackend, ProcessHandle
from provisioner.core.errors import SpawnFailure
from provisioner.core.models.result import ExecResult

logger = logging.getLogger(__name__)


class SubprocessBackend(ProcessBackend):
    """Spawn real processes with ``subprocess.Popen``."""

    def spawn(
        self,
        argv: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> ProcessHandle:
        try:
            return subprocess.Popen(
                list(argv),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
                env=dict(env) if env is not None else None,
            )
        except OSError as e:
            raise SpawnFailure(argv[0], e.strerror or str(e)) from e

    def which(self, program: str) -> str | None:
        return shutil.which(program)


class CommandRunner:
    """Run external programs and capture their merged output.

    Args:
        backend: Process backend (default: real subprocesses).
        dry_run: Default for ``run(dry_run=...)``.
        quiet: Default for ``run(quiet=...)``.
    """

    def __init__(
        self,
        backend: ProcessBackend | None = None,
        *,
        dry_run: bool = False,
        quiet: bool = False,
    ):
        self.backend = backend or SubprocessBackend()
        self.dry_run = dry_run
        self.quiet = quiet

    def run(
        self,
        program: str,
        args: Sequence[str] = (),
        *,
        dry_run: bool | None = None,
        quiet: bool | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ExecResult:
        """Run ``program`` with ``args`` and wait for it to finish.

        Args:
            program: Program name resolvable on PATH (or a full path).
            args: Ordered argument list.
            dry_run: Print the invocation and return a synthetic success
                without creating a process.
            quiet: Capture output without echoing it to the console.
            env: Extra environment variables for this invocation only.

        Returns:
            ExecResult with merged, trimmed output.  A program that
            cannot be started yields ``success=False, exit_code=-1``.
        """
        dry_run = self.dry_run if dry_run is None else dry_run
        quiet = self.quiet if quiet is None else quiet
        argv = [program, *args]

        if dry_run:
            click.echo(f"[{program}] {' '.join(args)}")
            return ExecResult.dry_run()

        child_env = None
        if env:
            child_env = os.environ.copy()
            child_env.update(env)

        logger.debug("Executing: %s", " ".join(argv))
        try:
            proc = self.backend.spawn(argv, child_env)
        except SpawnFailure as e:
            logger.debug("Spawn failed: %s", e)
            return ExecResult.spawn_failed(str(e))

        chunks: list[str] = []
        try:
            if proc.stdout is not None:
                for line in proc.stdout:
                    chunks.append(line)
                    if not quiet:
                        click.echo(line, nl=False)
            code = proc.wait()
        finally:
            if proc.stdout is not None:
                proc.stdout.close()

        return ExecResult(
            success=code == 0,
            exit_code=code,
            signal=_signal_name(code),
            combined_output="".join(chunks).strip(),
        )

    def which(self, program: str) -> str | None:
        """Resolve ``program`` on the execution path."""
        return self.backend.which(program)


def _signal_name(code: int) -> str | None:
    """Name of the signal that killed the process (POSIX negative codes)."""
    if code >= 0:
        return None
    try:
        return signal.Signals(-code).name
    except ValueError:
        return None
