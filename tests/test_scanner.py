"""Tests for scanner module."""

from pathlib import Path

from transferpilot.scanner.scanner import (
    FileEntry,
    PickedItem,
    PickKind,
    items_from_paths,
    scan,
)


def _make_tree(root: Path) -> Path:
    album = root / "Album"
    (album / "raw").mkdir(parents=True)
    (album / "edits").mkdir()
    (album / "cover.jpg").write_text("cover")
    (album / "raw" / "a.cr2").write_text("raw a")
    (album / "edits" / "a.jpg").write_text("edit a")
    return album


class TestPickKind:
    """Tests for PickKind parsing."""

    def test_file(self):
        assert PickKind.parse("file") is PickKind.FILE

    def test_folder(self):
        assert PickKind.parse("folder") is PickKind.FOLDER

    def test_unknown_is_folder(self):
        assert PickKind.parse("directory") is PickKind.FOLDER


class TestScan:
    """Tests for scan function."""

    def test_file_pick_has_no_relative_path(self, tmp_path: Path):
        f = tmp_path / "doc.txt"
        f.write_text("hello")

        entries = scan([PickedItem.file(f)])

        assert entries == [FileEntry(source_path=f, folder_relative_path=None)]

    def test_missing_file_pick_is_dropped(self, tmp_path: Path):
        entries = scan([PickedItem.file(tmp_path / "missing.txt")])
        assert entries == []

    def test_directory_picked_as_file_is_dropped(self, tmp_path: Path):
        entries = scan([PickedItem.file(tmp_path)])
        assert entries == []

    def test_folder_pick_preserves_tree_under_folder_name(self, tmp_path: Path):
        album = _make_tree(tmp_path)

        entries = scan([PickedItem.folder(album)])
        relative = {str(e.folder_relative_path) for e in entries}

        assert relative == {
            str(Path("Album") / "cover.jpg"),
            str(Path("Album") / "raw" / "a.cr2"),
            str(Path("Album") / "edits" / "a.jpg"),
        }
        assert all(e.source_path.is_file() for e in entries)

    def test_folder_pick_skips_symlinks(self, tmp_path: Path):
        folder = tmp_path / "docs"
        folder.mkdir()
        real = folder / "real.txt"
        real.write_text("real")
        (folder / "link.txt").symlink_to(real)

        entries = scan([PickedItem.folder(folder)])

        assert [e.source_path.name for e in entries] == ["real.txt"]

    def test_empty_folder_yields_nothing(self, tmp_path: Path):
        folder = tmp_path / "empty"
        (folder / "nested").mkdir(parents=True)

        assert scan([PickedItem.folder(folder)]) == []

    def test_missing_folder_is_dropped(self, tmp_path: Path):
        assert scan([PickedItem.folder(tmp_path / "nope")]) == []

    def test_preserves_pick_order(self, tmp_path: Path):
        album = _make_tree(tmp_path)
        first = tmp_path / "z_first.txt"
        last = tmp_path / "a_last.txt"
        first.write_text("1")
        last.write_text("2")

        entries = scan([PickedItem.file(first), PickedItem.folder(album), PickedItem.file(last)])

        assert entries[0].source_path == first
        assert entries[-1].source_path == last
        assert len(entries) == 5

    def test_nested_files_keep_full_relative_path(self, tmp_path: Path):
        deep = tmp_path / "root" / "a" / "b"
        deep.mkdir(parents=True)
        (deep / "leaf.bin").write_bytes(b"\x00")

        entries = scan([PickedItem.folder(tmp_path / "root")])

        assert entries[0].folder_relative_path == Path("root") / "a" / "b" / "leaf.bin"


class TestItemsFromPaths:
    """Tests for items_from_paths function."""

    def test_infers_kinds(self, tmp_path: Path):
        folder = tmp_path / "folder"
        folder.mkdir()
        f = tmp_path / "file.txt"
        f.write_text("x")

        items = items_from_paths([str(folder), str(f), "   "])

        assert items == [PickedItem.folder(folder), PickedItem.file(f)]

    def test_missing_path_is_treated_as_file(self, tmp_path: Path):
        items = items_from_paths([str(tmp_path / "gone")])
        assert items[0].kind is PickKind.FILE
