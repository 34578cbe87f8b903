"""
Error taxonomy for provisioning runs.

Only three conditions are run-fatal: missing privileges, a missing or
invalid package list, and winget still being unavailable after the
bootstrap.  Everything else degrades to a logged step failure.
"""

from __future__ import annotations


class ProvisionError(Exception):
    """Base class for all provisioning errors."""


class PrivilegeError(ProvisionError):
    """The process is not elevated and escalation was not possible."""


class ConfigError(ProvisionError):
    """Raised when provisioning configuration is invalid."""


class MissingConfigError(ConfigError):
    """A required configuration file (the package list) does not exist."""


class SpawnFailure(ProvisionError):
    """The target program could not be located or started."""

    def __init__(self, program: str, reason: str):
        super().__init__(f"Cannot start '{program}': {reason}")
        self.program = program
        self.reason = reason


class DownloadFailure(ProvisionError):
    """A bootstrap artifact could not be fetched."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Download failed for {url}: {reason}")
        self.url = url
        self.reason = reason


class StepFailure(ProvisionError):
    """An installation step failed.  Isolated at the step boundary."""

    def __init__(self, step: str, message: str):
        super().__init__(f"{step}: {message}")
        self.step = step
        self.message = message
