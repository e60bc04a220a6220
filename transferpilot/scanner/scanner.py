"""Expansion of picked items into concrete file entries."""

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_FOLDER_NAME = "Folder"


class PickKind(str, Enum):
    """Kind of a user-picked item."""

    FILE = "file"
    FOLDER = "folder"

    @classmethod
    def parse(cls, value: "str | PickKind") -> "PickKind":
        # Anything that is not explicitly a file pick is walked as a folder.
        if isinstance(value, PickKind):
            return value
        return cls.FILE if value == cls.FILE.value else cls.FOLDER


@dataclass(frozen=True)
class PickedItem:
    kind: PickKind
    path: Path

    @classmethod
    def file(cls, path: str | Path) -> "PickedItem":
        return cls(PickKind.FILE, Path(path))

    @classmethod
    def folder(cls, path: str | Path) -> "PickedItem":
        return cls(PickKind.FOLDER, Path(path))

    @classmethod
    def from_path(cls, path: str | Path) -> "PickedItem":
        """Build a pick from a dropped path, using the filesystem to infer its kind."""
        path = Path(path)
        kind = PickKind.FOLDER if path.is_dir() else PickKind.FILE
        return cls(kind, path)


@dataclass(frozen=True)
class FileEntry:
    """A concrete file to transfer.

    ``folder_relative_path`` is set only for files discovered under a folder
    pick and has the form ``<folder name>/<path inside folder>``.
    """

    source_path: Path
    folder_relative_path: Path | None = None


def items_from_paths(paths: Iterable[str]) -> list[PickedItem]:
    """Convert raw dropped paths into picks, ignoring blank strings."""
    return [PickedItem.from_path(p) for p in paths if p.strip()]


def scan(items: Iterable[PickedItem]) -> list[FileEntry]:
    """Expand picked items into a flat, ordered list of file entries.

    File picks are kept only if they currently resolve to a regular file.
    Folder picks are walked recursively; only regular files are returned,
    and entries that cannot be read are skipped.
    """
    entries: list[FileEntry] = []

    for item in items:
        path = Path(item.path)
        if PickKind.parse(item.kind) is PickKind.FILE:
            if path.is_file():
                entries.append(FileEntry(source_path=path))
            else:
                logger.warning("Picked file is not a regular file, skipping: %s", path)
            continue

        if not path.is_dir():
            logger.warning("Picked folder is not a directory, skipping: %s", path)
            continue

        folder_name = Path(path.name or DEFAULT_FOLDER_NAME)
        for file_path in _walk_files(path):
            relative = folder_name / file_path.relative_to(path)
            entries.append(FileEntry(source_path=file_path, folder_relative_path=relative))

    return entries


def _walk_files(directory: Path) -> Iterator[Path]:
    try:
        with os.scandir(directory) as it:
            dir_entries = sorted(it, key=lambda e: e.name)
    except PermissionError:
        logger.warning("Permission denied scanning directory: %s", directory)
        return
    except OSError as e:
        logger.error("Error scanning directory %s: %s", directory, e)
        return

    for entry in dir_entries:
        try:
            if entry.is_symlink():
                continue
            if entry.is_dir(follow_symlinks=False):
                yield from _walk_files(Path(entry.path))
            elif entry.is_file(follow_symlinks=False):
                yield Path(entry.path)
        except PermissionError:
            logger.warning("Permission denied: %s", entry.path)
        except OSError as e:
            logger.error("Error processing %s: %s", entry.path, e)
