"""
Tests for the CLI entrypoint — flags, exit codes, and global options.
"""

import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from provisioner.core.models.run import RunReport
from provisioner.main import cli

_RUN = "provisioner.core.services.provision.orchestration.orchestrator.run_provisioning"


def _base_args(tmp_path: Path) -> list[str]:
    packages = tmp_path / "packages.json"
    packages.write_text(json.dumps({"packages": ["Git.Git"]}))
    return [
        "--packages-file", str(packages),
        "--env-file", str(tmp_path / ".env"),
        "--profile", str(tmp_path / "provision.yml"),
        "--state-dir", str(tmp_path),
        "--no-pause",
    ]


class TestCLIGlobal:
    """Global options: help and version."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Machine Provisioner" in result.output
        assert "--winget" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestFlagMapping:
    """CLI flags to InstallOptions and settings."""

    def _invoke(self, tmp_path: Path, *flags: str):
        with patch(_RUN, return_value=RunReport()) as run:
            result = CliRunner().invoke(cli, [*_base_args(tmp_path), *flags])
        assert result.exit_code == 0, result.output
        options, settings = run.call_args.args
        return options, settings

    def test_no_flags_selects_all(self, tmp_path: Path):
        options, _ = self._invoke(tmp_path)
        assert options.all is True

    def test_winget_flag_only_maps_to_package_manager(self, tmp_path: Path):
        options, _ = self._invoke(tmp_path, "--winget")
        assert options.enabled_steps() == ["package_manager"]

    def test_short_flags(self, tmp_path: Path):
        options, _ = self._invoke(tmp_path, "-p", "-u")
        assert options.enabled_steps() == ["packages", "utility"]

    def test_run_switches(self, tmp_path: Path):
        _, settings = self._invoke(tmp_path, "--dry-run", "--quiet", "--force")
        assert settings.dry_run and settings.quiet and settings.force
        assert settings.pause is False
        assert settings.fingerprint_path == tmp_path / ".provision-fingerprint"


class TestExitCodes:
    """Run reports mapped to process exit codes."""

    def test_fatal_report_exits_1(self, tmp_path: Path):
        with patch(_RUN, return_value=RunReport().fail("winget is not available")):
            result = CliRunner().invoke(cli, _base_args(tmp_path))
        assert result.exit_code == 1
        assert "winget is not available" in result.output

    def test_partial_exits_0(self, tmp_path: Path):
        report = RunReport()
        report.record("packages", "failed", "1 failed")
        with patch(_RUN, return_value=report.finish()):
            result = CliRunner().invoke(cli, _base_args(tmp_path))
        assert result.exit_code == 0
        assert "packages" in result.output

    def test_missing_package_list(self, tmp_path: Path):
        args = _base_args(tmp_path)
        (tmp_path / "packages.json").unlink()
        result = CliRunner().invoke(cli, [*args, "--dry-run"])
        assert result.exit_code == 1

    def test_invalid_profile(self, tmp_path: Path):
        (tmp_path / "provision.yml").write_text("fatal_pause_seconds: [")
        result = CliRunner().invoke(cli, _base_args(tmp_path))
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_dry_run_end_to_end(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch("provisioner.adapters.shell.command.SubprocessBackend.spawn") as spawn:
            result = CliRunner().invoke(cli, [*_base_args(tmp_path), "-p", "--dry-run"])
        assert result.exit_code == 0, result.output
        spawn.assert_not_called()
        assert "[winget] install -e --id Git.Git" in result.output
        assert not (tmp_path / ".provision-fingerprint").exists()
        assert (tmp_path / "provision.log").is_file()


class TestExport:
    """Tests for --export."""

    def test_export_dry_run(self, tmp_path: Path):
        out = tmp_path / "exported.json"
        with patch("provisioner.adapters.shell.command.SubprocessBackend.spawn") as spawn:
            result = CliRunner().invoke(
                cli, [*_base_args(tmp_path), "--dry-run", "--export", str(out)],
            )
        assert result.exit_code == 0, result.output
        spawn.assert_not_called()
        assert "[winget] export -o" in result.output
