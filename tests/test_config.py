"""
Tests for configuration — package list, profile, env override file.
"""

import json
import os
import textwrap
from pathlib import Path

import pytest

from provisioner.core.config.env_file import load_env_file, parse_env_file
from provisioner.core.config.loader import load_package_list, load_profile
from provisioner.core.errors import ConfigError, MissingConfigError


class TestPackageList:
    """Package list loading."""

    def test_identifier_strings(self, write_packages):
        packages = load_package_list(write_packages(["7zip.7zip", "Git.Git"]))
        assert [p.identifier for p in packages] == ["7zip.7zip", "Git.Git"]
        assert all(p.kind == "winget" for p in packages)

    def test_objects(self, write_packages):
        packages = load_package_list(write_packages([
            {"identifier": "Git.Git", "version": "2.44.0", "scope": "machine"},
        ]))
        assert packages[0].version == "2.44.0"
        assert packages[0].scope == "machine"

    def test_winget_export_layout(self, tmp_path: Path):
        path = tmp_path / "export.json"
        path.write_text(json.dumps({
            "WinGetVersion": "1.7.10861",
            "Sources": [{
                "SourceDetails": {"Name": "winget"},
                "Packages": [
                    {"PackageIdentifier": "Git.Git", "Version": "2.44.0"},
                    {"PackageIdentifier": "DenoLand.Deno", "Scope": "User"},
                ],
            }],
        }))
        packages = load_package_list(path)
        assert [p.identifier for p in packages] == ["Git.Git", "DenoLand.Deno"]
        assert packages[1].scope == "user"

    def test_order_preserved(self, write_packages):
        ids = ["c.c", "a.a", "b.b"]
        assert [p.identifier for p in load_package_list(write_packages(ids))] == ids

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(MissingConfigError):
            load_package_list(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "packages.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_package_list(path)

    def test_no_packages_field(self, tmp_path: Path):
        path = tmp_path / "packages.json"
        path.write_text(json.dumps({"tools": []}))
        with pytest.raises(ConfigError, match="No 'packages'"):
            load_package_list(path)

    def test_unimplemented_kind(self, write_packages):
        with pytest.raises(ConfigError):
            load_package_list(write_packages([{"kind": "zip", "identifier": "tool"}]))


class TestProfile:
    """Provisioning profile loading."""

    def test_missing_uses_defaults(self, tmp_path: Path):
        profile = load_profile(tmp_path / "provision.yml")
        assert profile.utility.identifier == "7zip.7zip"
        assert profile.agent.token_env == "BUILDKITE_AGENT_TOKEN"

    def test_overrides(self, tmp_path: Path):
        path = tmp_path / "provision.yml"
        path.write_text(textwrap.dedent("""\
            fatal_pause_seconds: 0
            utility:
              identifier: 7zip.7zip
              install_dir: D:\\Tools\\7-Zip
            bootstrap:
              keep_failed_downloads: false
        """))
        profile = load_profile(path)
        assert profile.fatal_pause_seconds == 0
        assert profile.utility.install_dir == "D:\\Tools\\7-Zip"
        assert profile.bootstrap.keep_failed_downloads is False
        assert profile.toolchain.identifier == "Microsoft.VisualStudio.2022.BuildTools"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "provision.yml"
        path.write_text("")
        assert load_profile(path).fatal_pause_seconds == 10

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "provision.yml"
        path.write_text("utility: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_profile(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "provision.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_profile(path)

    def test_invalid_schema(self, tmp_path: Path):
        path = tmp_path / "provision.yml"
        path.write_text("fatal_pause_seconds: -5\n")
        with pytest.raises(ConfigError, match="Invalid provisioning profile"):
            load_profile(path)

    def test_nested_sections(self, tmp_path: Path):
        path = tmp_path / "provision.yml"
        path.write_text(textwrap.dedent("""\
            toolchain:
              identifier: Custom.Toolchain
            utility:
              identifier: Foo.Bar
            agent:
              token_env: MY_TOKEN
        """))
        profile = load_profile(path)
        assert profile.toolchain.identifier == "Custom.Toolchain"
        assert profile.utility.identifier == "Foo.Bar"
        assert profile.agent.token_env == "MY_TOKEN"

    @pytest.mark.parametrize("text", [
        "toolchain_id: Custom.Toolchain\n",
        "utility_id: Foo.Bar\n",
        "agent:\n  token_envv: MY_TOKEN\n",
        "bootstrap:\n  installer: https://example.invalid/x.msixbundle\n",
    ])
    def test_unknown_key_rejected(self, tmp_path: Path, text):
        path = tmp_path / "provision.yml"
        path.write_text(text)
        with pytest.raises(ConfigError, match="Invalid provisioning profile"):
            load_profile(path)


class TestEnvFile:
    """Environment override file."""

    def test_parse(self, tmp_path: Path):
        path = tmp_path / ".env"
        path.write_text(textwrap.dedent("""\
            # agent registration
            BUILDKITE_AGENT_TOKEN=abc123

            export QUOTED="hello world"
            SINGLE='x'
            not a pair
        """))
        assert parse_env_file(path) == {
            "BUILDKITE_AGENT_TOKEN": "abc123",
            "QUOTED": "hello world",
            "SINGLE": "x",
        }

    def test_missing_file(self, tmp_path: Path):
        assert parse_env_file(tmp_path / ".env") == {}
        assert load_env_file(tmp_path / ".env") == []

    def test_load_sets_environment(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PROVISION_TEST_VAR", "x")
        monkeypatch.delenv("PROVISION_TEST_VAR")
        path = tmp_path / ".env"
        path.write_text("PROVISION_TEST_VAR=from-file\n")

        assert load_env_file(path) == ["PROVISION_TEST_VAR"]
        assert os.environ["PROVISION_TEST_VAR"] == "from-file"

    def test_existing_environment_wins(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PROVISION_TEST_VAR", "from-shell")
        path = tmp_path / ".env"
        path.write_text("PROVISION_TEST_VAR=from-file\n")

        assert load_env_file(path) == []
        assert os.environ["PROVISION_TEST_VAR"] == "from-shell"
