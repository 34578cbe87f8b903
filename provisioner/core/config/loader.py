"""
Configuration loader — provisioning profile and package list.

``provision.yml`` is optional and validated against ``ProvisionProfile``.
The package list is mandatory: without it a run cannot know what to
install, so its absence raises ``MissingConfigError``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from provisioner.core.errors import ConfigError, MissingConfigError
from provisioner.core.models.package import PackageSpec
from provisioner.core.models.profile import ProvisionProfile

logger = logging.getLogger(__name__)

# Default config filenames
PROFILE_FILE = "provision.yml"
PACKAGES_FILE = "packages.json"

_PACKAGE_LIST = TypeAdapter(list[PackageSpec])


def load_profile(path: Path | None = None) -> ProvisionProfile:
    """Load and validate the provisioning profile.

    Args:
        path: Path to ``provision.yml``.  A missing file (or None)
            yields the built-in defaults.

    Raises:
        ConfigError: If the file exists but is not a valid profile.
    """
    if path is None or not path.is_file():
        logger.debug("No profile at %s — using defaults", path)
        return ProvisionProfile()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ProvisionProfile()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        profile = ProvisionProfile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid provisioning profile: {e}") from e

    logger.debug("Loaded profile from %s", path)
    return profile


def load_package_list(path: Path) -> list[PackageSpec]:
    """Load the declarative package list.

    Accepts ``{"packages": [...]}`` where entries are identifier strings
    or objects, and the ``winget export`` document layout.

    Raises:
        MissingConfigError: If the file does not exist.
        ConfigError: If it is not valid JSON or has no package list.
    """
    if not path.is_file():
        raise MissingConfigError(f"Package list not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    entries = _extract_entries(data, path)

    try:
        packages = _PACKAGE_LIST.validate_python([_normalize(e) for e in entries])
    except ValidationError as e:
        raise ConfigError(f"Invalid package list in {path}: {e}") from e

    logger.debug("Loaded %d packages from %s", len(packages), path)
    return packages


def _extract_entries(data: Any, path: Path) -> list[Any]:
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")

    if "packages" in data:
        entries = data["packages"]
        if not isinstance(entries, list):
            raise ConfigError(f"'packages' in {path} must be a list")
        return entries

    # winget export layout
    if "Sources" in data:
        entries = []
        for source in data["Sources"] or []:
            entries.extend(source.get("Packages", []))
        return entries

    raise ConfigError(f"No 'packages' list in {path}")


def _normalize(entry: Any) -> Any:
    """Map identifier strings and winget-export keys onto PackageSpec fields."""
    if isinstance(entry, str):
        return {"identifier": entry}
    if isinstance(entry, dict) and "PackageIdentifier" in entry:
        out: dict[str, Any] = {"identifier": entry["PackageIdentifier"]}
        if entry.get("Version"):
            out["version"] = entry["Version"]
        if entry.get("Scope"):
            out["scope"] = str(entry["Scope"]).lower()
        return out
    return entry
