"""
Tests for persistence — the Run-Gate fingerprint file.
"""

from pathlib import Path

from provisioner.core.persistence.fingerprint_file import read_fingerprint, write_fingerprint


class TestFingerprintFile:
    """Tests for fingerprint file persistence."""

    def test_write_and_read(self, tmp_path: Path):
        path = tmp_path / ".provision-fingerprint"
        write_fingerprint(path, "abc123")
        assert read_fingerprint(path) == "abc123"

    def test_single_line(self, tmp_path: Path):
        path = tmp_path / ".provision-fingerprint"
        write_fingerprint(path, "abc123")
        write_fingerprint(path, "def456")
        assert path.read_text().splitlines() == ["def456"]

    def test_missing_is_none(self, tmp_path: Path):
        assert read_fingerprint(tmp_path / "missing") is None

    def test_empty_is_none(self, tmp_path: Path):
        path = tmp_path / ".provision-fingerprint"
        path.write_text("\n")
        assert read_fingerprint(path) is None

    def test_creates_directories(self, tmp_path: Path):
        path = tmp_path / "deep" / "nested" / ".provision-fingerprint"
        write_fingerprint(path, "abc")
        assert path.is_file()

    def test_no_temp_files_left(self, tmp_path: Path):
        write_fingerprint(tmp_path / ".provision-fingerprint", "abc")
        assert list(tmp_path.glob(".fingerprint_*.tmp")) == []
