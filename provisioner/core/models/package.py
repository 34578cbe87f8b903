"""
Package specifications — what the dependency-list step installs.

Package kinds form a tagged union on ``kind``.  Only ``winget`` is
implemented, so only ``winget`` exists in the type: a list naming any
other kind fails validation at load time.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class WingetPackage(BaseModel):
    """A package installed through ``winget install -e --id``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["winget"] = "winget"
    identifier: str = Field(min_length=1)
    version: str | None = None
    scope: Literal["user", "machine"] | None = None
    # Executable the package provides; checked with ``--version`` after install.
    binary: str | None = None

    def install_args(self) -> list[str]:
        """Arguments for ``winget`` that install this package."""
        args = ["install", "-e", "--id", self.identifier]
        if self.version:
            args += ["--version", self.version]
        if self.scope:
            args += ["--scope", self.scope]
        args += ["--accept-package-agreements", "--accept-source-agreements"]
        return args


# Extend by adding variants to the union and a ``Field(discriminator="kind")``.
PackageSpec = WingetPackage
