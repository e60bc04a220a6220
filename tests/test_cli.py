"""Tests for the command line interface."""

from pathlib import Path

from click.testing import CliRunner

from transferpilot import cli as cli_module
from transferpilot.cli import cli
from transferpilot.volumes import VolumeInfo


def _make_source(tmp_path: Path) -> Path:
    source = tmp_path / "Shoot"
    (source / "day1").mkdir(parents=True)
    (source / "day1" / "a.jpg").write_bytes(b"a" * 300)
    (source / "b.mp4").write_bytes(b"b" * 700)
    return source


class TestPreflightCommand:
    """Tests for the preflight command."""

    def test_prints_report(self, tmp_path: Path, monkeypatch):
        source = _make_source(tmp_path)
        monkeypatch.setattr("transferpilot.preflight.analyzer.available_bytes", lambda _m: 0)

        result = CliRunner().invoke(cli, ["preflight", str(source), "--dest", str(tmp_path)])

        assert result.exit_code == 0
        assert "Files: 2 (1 folder picks)" in result.output
        assert "Images" in result.output
        assert "Videos" in result.output

    def test_requires_dest(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["preflight", str(tmp_path)])
        assert result.exit_code != 0


class TestTransferCommand:
    """Tests for the transfer command."""

    def test_copies_into_session(self, tmp_path: Path):
        source = _make_source(tmp_path)
        dest = tmp_path / "usb"
        dest.mkdir()

        result = CliRunner().invoke(
            cli,
            ["transfer", str(source), "--dest", str(dest), "--verify", "sha256"],
        )

        assert result.exit_code == 0, result.output
        copied = list((dest / "Transfers").glob("*/*/Folders/Shoot/day1/a.jpg"))
        assert len(copied) == 1
        assert (source / "b.mp4").exists()

    def test_move_mode(self, tmp_path: Path):
        source = _make_source(tmp_path)
        loose = source / "b.mp4"
        dest = tmp_path / "usb"
        dest.mkdir()

        result = CliRunner().invoke(
            cli, ["transfer", str(loose), "--dest", str(dest), "--mode", "move"]
        )

        assert result.exit_code == 0, result.output
        assert not loose.exists()
        assert list((dest / "Transfers").glob("*/*/Files/b.mp4"))

    def test_rejects_unknown_mode(self, tmp_path: Path):
        result = CliRunner().invoke(
            cli, ["transfer", str(tmp_path), "--dest", str(tmp_path), "--mode", "teleport"]
        )
        assert result.exit_code == 2

    def test_fatal_error_exits_with_one(self, tmp_path: Path):
        source = _make_source(tmp_path)
        dest = tmp_path / "usb"
        dest.mkdir()
        (dest / "Transfers").write_text("blocking file")

        result = CliRunner().invoke(cli, ["transfer", str(source), "--dest", str(dest)])

        assert result.exit_code == 1


class TestVolumesCommand:
    """Tests for the volumes command."""

    def test_lists_volumes(self, monkeypatch):
        monkeypatch.setattr(
            cli_module,
            "list_volumes",
            lambda: [VolumeInfo("/media/usb", "/media/usb", 2048, 1024)],
        )

        result = CliRunner().invoke(cli, ["volumes"])

        assert result.exit_code == 0
        assert "/media/usb" in result.output

    def test_no_volumes(self, monkeypatch):
        monkeypatch.setattr(cli_module, "list_volumes", lambda: [])

        result = CliRunner().invoke(cli, ["volumes"])

        assert "No volumes found." in result.output
