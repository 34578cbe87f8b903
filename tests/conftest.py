"""
Shared test fixtures and configuration.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from provisioner.adapters.mock import MockProcessBackend
from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.models.profile import (
    ProvisionProfile,
    ProvisionSettings,
    ToolchainProfile,
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep PATH and agent token changes local to each test."""
    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))
    monkeypatch.setenv("BUILDKITE_AGENT_TOKEN", "placeholder")
    monkeypatch.delenv("BUILDKITE_AGENT_TOKEN")


@pytest.fixture
def tmp_state_dir(tmp_path: Path) -> Path:
    """Return a temporary directory for state files."""
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def mock_backend() -> MockProcessBackend:
    """Process backend that spawns nothing; winget reports a version."""
    backend = MockProcessBackend()
    backend.set_response("winget", "--version", output="v1.7.10861")
    return backend


@pytest.fixture
def runner(mock_backend: MockProcessBackend) -> CommandRunner:
    return CommandRunner(mock_backend, quiet=True)


@pytest.fixture
def write_packages(tmp_path: Path):
    """Write a package list and return its path."""

    def _write(packages, name: str = "packages.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"packages": packages}))
        return path

    return _write


@pytest.fixture
def vsconfig(tmp_path: Path) -> Path:
    path = tmp_path / "vs2022.vsconfig"
    path.write_text('{"version": "1.0", "components": []}')
    return path


@pytest.fixture
def settings(tmp_path: Path, tmp_state_dir: Path, write_packages, vsconfig: Path) -> ProvisionSettings:
    """Settings for a run against a two-package list, without pauses."""
    profile = ProvisionProfile(toolchain=ToolchainProfile(config_file=str(vsconfig)))
    return ProvisionSettings(
        profile=profile,
        packages_file=write_packages(["7zip.7zip", "Git.Git"]),
        env_file=tmp_path / ".env",
        state_dir=tmp_state_dir,
        pause=False,
    )


@pytest.fixture
def elevated():
    """Pretend the process runs as administrator."""
    with patch(
        "provisioner.core.services.provision.orchestration.orchestrator.is_elevated",
        return_value=True,
    ) as m:
        yield m
