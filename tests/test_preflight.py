"""Tests for preflight analysis."""

from pathlib import Path

import pytest

from transferpilot.errors import PreflightError
from transferpilot.preflight import preflight
from transferpilot.preflight import analyzer
from transferpilot.scanner import PickedItem


def _fixed_space(available: int):
    return lambda _mount: available


@pytest.fixture
def picks(tmp_path: Path) -> list[PickedItem]:
    folder = tmp_path / "Shoot"
    (folder / "sub").mkdir(parents=True)
    (folder / "a.jpg").write_bytes(b"a" * 100)
    (folder / "sub" / "b.jpg").write_bytes(b"b" * 200)
    (folder / "sub" / "notes").write_bytes(b"n" * 50)
    loose = tmp_path / "report.pdf"
    loose.write_bytes(b"p" * 150)
    return [PickedItem.folder(folder), PickedItem.file(loose)]


class TestPreflight:
    """Tests for preflight function."""

    def test_totals(self, picks, tmp_path: Path):
        report = preflight(picks, str(tmp_path), space_probe=_fixed_space(10_000))

        assert report.total_files == 4
        assert report.total_folders == 1
        assert report.total_bytes == 500
        assert report.dest_avail_bytes == 10_000
        assert report.will_fit is True

    def test_groupings(self, picks, tmp_path: Path):
        report = preflight(picks, str(tmp_path), space_probe=_fixed_space(10_000))

        assert report.by_category == {"Images": 2, "Other": 1, "Documents": 1}
        assert report.by_extension == {".jpg": 2, ".noext": 1, ".pdf": 1}

    def test_will_not_fit(self, picks, tmp_path: Path):
        report = preflight(picks, str(tmp_path), space_probe=_fixed_space(499))
        assert report.will_fit is False

    def test_exact_fit(self, picks, tmp_path: Path):
        report = preflight(picks, str(tmp_path), space_probe=_fixed_space(500))
        assert report.will_fit is True

    def test_failing_probe_reports_zero(self, picks, tmp_path: Path):
        def broken(_mount: str) -> int:
            raise RuntimeError("df exploded")

        report = preflight(picks, str(tmp_path), space_probe=broken)

        assert report.dest_avail_bytes == 0
        assert report.will_fit is False

    def test_empty_picks_fit_anywhere(self, tmp_path: Path):
        report = preflight([], str(tmp_path), space_probe=_fixed_space(0))

        assert report.total_files == 0
        assert report.total_bytes == 0
        assert report.will_fit is True

    def test_repeatable(self, picks, tmp_path: Path):
        first = preflight(picks, str(tmp_path), space_probe=_fixed_space(1))
        second = preflight(picks, str(tmp_path), space_probe=_fixed_space(2))

        first.dest_avail_bytes = second.dest_avail_bytes = 0
        first.will_fit = second.will_fit = False
        assert first == second

    def test_metadata_failure_aborts(self, picks, tmp_path: Path, monkeypatch):
        original_stat = Path.stat

        def failing_stat(self, *args, **kwargs):
            if self.name == "b.jpg":
                raise PermissionError("denied")
            return original_stat(self, *args, **kwargs)

        entries = analyzer.scan(picks)
        monkeypatch.setattr(analyzer, "scan", lambda _items: entries)
        monkeypatch.setattr(Path, "stat", failing_stat)

        with pytest.raises(PreflightError, match="metadata error"):
            preflight(picks, str(tmp_path), space_probe=_fixed_space(0))
