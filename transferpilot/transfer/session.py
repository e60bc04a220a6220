"""Destination session layout and manifest output.

Every run gets its own folder on the destination volume:

    <mount>/Transfers/<YYYY-MM-DD>/<HHMMSS>/
        Files/      loose file picks
        Folders/    folder picks, tree preserved
        manifest.json

``Transfers/_latest.txt`` and ``Transfers/<YYYY-MM-DD>/_latest.txt`` always
hold the path of the most recently started session.
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from transferpilot.errors import TransferError
from transferpilot.scanner.scanner import FileEntry
from transferpilot.transfer.models import ManifestRow

logger = logging.getLogger(__name__)

DEFAULT_ROOT_DIR_NAME = "Transfers"
FILES_DIR_NAME = "Files"
FOLDERS_DIR_NAME = "Folders"
MANIFEST_FILENAME = "manifest.json"
LATEST_POINTER_FILENAME = "_latest.txt"
README_FILENAME = "README.txt"

README_TEXT = """\
TransferPilot output

Folder layout:
  Transfers/<YYYY-MM-DD>/<HHMMSS>/
    - Files/      (loose files you added directly)
    - Folders/    (folder picks; preserves the folder tree)
    - manifest.json

Pointers:
  Transfers/_latest.txt -> most recent run folder
  Transfers/<YYYY-MM-DD>/_latest.txt -> most recent run for that day
"""


@dataclass(frozen=True)
class SessionLayout:
    transfers_root: Path
    day_dir: Path
    session_dir: Path

    @property
    def files_dir(self) -> Path:
        return self.session_dir / FILES_DIR_NAME

    @property
    def folders_dir(self) -> Path:
        return self.session_dir / FOLDERS_DIR_NAME

    @property
    def manifest_path(self) -> Path:
        return self.session_dir / MANIFEST_FILENAME

    def destination_for(self, entry: FileEntry) -> Path:
        """Destination of an entry before conflict resolution."""
        if entry.folder_relative_path is not None:
            return self.folders_dir / entry.folder_relative_path
        return self.files_dir / (entry.source_path.name or "file")


def build_layout(
    dest_mount: str | Path,
    now: datetime,
    root_dir_name: str = DEFAULT_ROOT_DIR_NAME,
) -> SessionLayout:
    """Derive the session paths for a run started at ``now`` (local time)."""
    transfers_root = Path(dest_mount) / root_dir_name
    day_dir = transfers_root / now.strftime("%Y-%m-%d")
    session_dir = day_dir / now.strftime("%H%M%S")
    return SessionLayout(transfers_root=transfers_root, day_dir=day_dir, session_dir=session_dir)


def create_session(
    dest_mount: str | Path,
    now: datetime,
    root_dir_name: str = DEFAULT_ROOT_DIR_NAME,
) -> SessionLayout:
    """Create the session directory and update the pointer files.

    The README is written only if missing. Both ``_latest.txt`` pointers are
    overwritten before any file is copied.

    Raises:
        TransferError: The session directory or a pointer file could not be written.
    """
    layout = build_layout(dest_mount, now, root_dir_name)

    try:
        layout.session_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TransferError(f"mkdir error: {e}") from e

    _write_readme(layout.transfers_root / README_FILENAME)

    session_path = str(layout.session_dir.absolute())
    for pointer in (
        layout.transfers_root / LATEST_POINTER_FILENAME,
        layout.day_dir / LATEST_POINTER_FILENAME,
    ):
        try:
            pointer.write_text(session_path, encoding="utf-8")
        except OSError as e:
            raise TransferError(f"latest pointer write error ({pointer}): {e}") from e

    logger.info("Created transfer session %s", layout.session_dir)
    return layout


def write_manifest(layout: SessionLayout, rows: Iterable[ManifestRow]) -> Path:
    """Write the manifest for a finished run.

    Raises:
        TransferError: The manifest could not be serialized or written.
    """
    try:
        payload = json.dumps([row.to_dict() for row in rows], indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise TransferError(f"manifest json error: {e}") from e

    try:
        layout.manifest_path.write_text(payload, encoding="utf-8")
    except OSError as e:
        raise TransferError(f"manifest write error: {e}") from e

    return layout.manifest_path


def _write_readme(readme_path: Path) -> None:
    if readme_path.exists():
        return
    try:
        readme_path.write_text(README_TEXT, encoding="utf-8")
    except OSError as e:
        logger.warning("Could not write %s: %s", readme_path, e)
