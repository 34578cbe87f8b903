"""
L3 Detection — Post-install binary check.

Read-only: resolves an executable on PATH and runs ``<bin> --version``.
"""

from __future__ import annotations

import logging

from provisioner.adapters.shell.command import CommandRunner

logger = logging.getLogger(__name__)


def check_binary(runner: CommandRunner, binary: str) -> tuple[str | None, str | None]:
    """Resolve ``binary`` and read its version.

    Returns:
        ``(path, version)``.  ``path`` is None if the binary is not on
        PATH; ``version`` is the first line of ``--version`` output, or
        None if the command failed or printed nothing.
    """
    path = runner.which(binary)
    if path is None:
        return None, None

    result = runner.run(path, ["--version"], quiet=True)
    if not result.success or not result.combined_output:
        logger.debug("%s --version failed (exit %d)", binary, result.exit_code)
        return path, None
    return path, result.combined_output.splitlines()[0].strip()
