"""Adapters — process execution bindings for external tools.

Public re-exports for convenient access.
"""

from provisioner.adapters.base import ProcessBackend, ProcessHandle
from provisioner.adapters.mock import MockProcessBackend
from provisioner.adapters.shell.command import CommandRunner, SubprocessBackend

__all__ = [
    "CommandRunner",
    "MockProcessBackend",
    "ProcessBackend",
    "ProcessHandle",
    "SubprocessBackend",
]
