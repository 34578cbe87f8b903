"""
Environment override file — optional ``KEY=value`` lines.

Values are exported into this process's environment so later steps
(e.g. the CI agent install) can read them.  Variables already present
in the environment are left alone.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse an env file into a key/value dict.

    Handles:
    - KEY=value
    - KEY="value" / KEY='value'
    - export KEY=value
    - Comments (#) and empty lines
    """
    result: dict[str, str] = {}
    if not path.is_file():
        return result

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot read env file %s: %s", path, e)
        return result

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        # Strip optional 'export'
        if line.startswith("export "):
            line = line[7:].strip()

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()

        # Remove surrounding quotes
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]

        if key:
            result[key] = value

    return result


def load_env_file(path: Path) -> list[str]:
    """Export the variables of ``path`` into ``os.environ``.

    Returns:
        Names of the variables that were set.
    """
    applied = []
    for key, value in parse_env_file(path).items():
        if key in os.environ:
            continue
        os.environ[key] = value
        applied.append(key)

    if applied:
        logger.debug("Loaded %d variables from %s", len(applied), path)
    return applied
