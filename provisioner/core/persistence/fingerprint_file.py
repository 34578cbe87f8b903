"""
Fingerprint file persistence — the Run-Gate sentinel.

The file holds exactly one line: the fingerprint of the last run that
completed its full step sequence.  Writes are atomic (write to temp
file, then rename) so an interrupted write never leaves a half line
that could match by accident.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def read_fingerprint(path: Path) -> str | None:
    """Read the persisted fingerprint.

    Returns:
        The stored value, or None if the file is missing, empty, or
        unreadable (all of which mean "stale").
    """
    if not path.is_file():
        logger.debug("No fingerprint file at %s", path)
        return None

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot read fingerprint file %s: %s", path, e)
        return None

    lines = raw.splitlines()
    value = lines[0].strip() if lines else ""
    return value or None


def write_fingerprint(path: Path, fingerprint: str) -> None:
    """Persist ``fingerprint`` as a single line (atomic write)."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=".fingerprint_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(fingerprint + "\n")
        tmp.replace(path)
        logger.debug("Fingerprint saved to %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
