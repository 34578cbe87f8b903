"""
L5 Orchestration — Run-Gate (idempotency guard).

Answers "has the provisioning definition changed since the last full
run?", not "is everything still installed?".  The fingerprint covers
the provisioning code itself, the package version, the profile, and
the package list.  Nothing about the machine's installed state goes in.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Sequence
from pathlib import Path

from provisioner import __version__
from provisioner.core.models.package import PackageSpec
from provisioner.core.models.profile import ProvisionProfile
from provisioner.core.models.run import GateState
from provisioner.core.persistence.fingerprint_file import read_fingerprint, write_fingerprint

logger = logging.getLogger(__name__)

# Root of the provisioning service package (hashed as "the definition").
_DEFINITION_ROOT = Path(__file__).resolve().parent.parent


def compute_fingerprint(
    profile: ProvisionProfile,
    packages: Sequence[PackageSpec],
    *,
    definition_root: Path = _DEFINITION_ROOT,
) -> str:
    """SHA-256 of the orchestrator definition.

    Args:
        profile: Loaded provisioning profile.
        packages: Package list, in order.
        definition_root: Directory whose ``*.py`` sources are hashed.
    """
    h = hashlib.sha256()
    h.update(f"version:{__version__}\n".encode())

    for source in sorted(definition_root.rglob("*.py")):
        rel = source.relative_to(definition_root).as_posix()
        h.update(f"file:{rel}\n".encode())
        h.update(source.read_bytes())

    h.update(b"profile:")
    h.update(json.dumps(profile.model_dump(mode="json"), sort_keys=True).encode())
    h.update(b"\npackages:")
    h.update(json.dumps([p.model_dump(mode="json") for p in packages]).encode())
    return h.hexdigest()


class RunGate:
    """Compare the current fingerprint with the persisted one.

    Args:
        path: Sentinel file holding the last applied fingerprint.
        fingerprint: Fingerprint of this run's definition.
    """

    def __init__(self, path: Path, fingerprint: str):
        self.path = path
        self.fingerprint = fingerprint

    @property
    def persisted(self) -> str | None:
        return read_fingerprint(self.path)

    def state(self) -> GateState:
        """``CURRENT`` only when the persisted value matches exactly."""
        if self.persisted == self.fingerprint:
            return GateState.CURRENT
        return GateState.STALE

    def mark_current(self) -> None:
        """Persist this run's fingerprint (``STALE → CURRENT``)."""
        write_fingerprint(self.path, self.fingerprint)
        logger.debug("Run-Gate marked current: %s", self.fingerprint[:12])
