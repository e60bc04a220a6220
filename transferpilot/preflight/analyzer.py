"""Read-only capacity and content report for picked items."""

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from pathlib import Path

from transferpilot.errors import PreflightError
from transferpilot.scanner import PickedItem, PickKind, classify, scan
from transferpilot.transfer.progress import saturating_add
from transferpilot.volumes import SpaceProbe, available_bytes

logger = logging.getLogger(__name__)


@dataclass
class PreflightReport:
    """Aggregate statistics for a set of picks against a destination.

    ``dest_avail_bytes`` is sampled when the report is built and may be stale
    by the time a transfer starts.
    """

    total_files: int
    total_folders: int
    total_bytes: int
    dest_avail_bytes: int
    will_fit: bool
    by_category: dict[str, int] = field(default_factory=dict)
    by_extension: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def preflight(
    items: Iterable[PickedItem],
    dest_mount: str | Path,
    space_probe: SpaceProbe | None = None,
) -> PreflightReport:
    """Scan picks and report totals, category counts and whether they fit.

    Args:
        items: Picked files and folders.
        dest_mount: Mount point of the destination volume.
        space_probe: Returns available bytes for a mount point. Defaults to
            querying ``df``.

    Returns:
        PreflightReport for the current state of the filesystem.

    Raises:
        PreflightError: The size of a scanned file could not be read.
    """
    items = list(items)
    entries = scan(items)

    total_bytes = 0
    by_category: dict[str, int] = {}
    by_extension: dict[str, int] = {}

    for entry in entries:
        try:
            size = entry.source_path.stat().st_size
        except OSError as e:
            raise PreflightError(f"metadata error: {e}") from e
        total_bytes = saturating_add(total_bytes, size)

        category, ext = classify(entry.source_path)
        by_category[category.value] = by_category.get(category.value, 0) + 1
        by_extension[f".{ext}"] = by_extension.get(f".{ext}", 0) + 1

    dest_avail = _probe_available(space_probe or available_bytes, str(dest_mount))

    return PreflightReport(
        total_files=len(entries),
        total_folders=sum(1 for item in items if PickKind.parse(item.kind) is PickKind.FOLDER),
        total_bytes=total_bytes,
        dest_avail_bytes=dest_avail,
        will_fit=dest_avail >= total_bytes,
        by_category=by_category,
        by_extension=by_extension,
    )


def _probe_available(space_probe: SpaceProbe, mount_point: str) -> int:
    # An unknown amount of free space is reported as none, so the verdict errs on "won't fit".
    try:
        return space_probe(mount_point)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.warning("Could not determine free space for %s: %s", mount_point, e)
        return 0
