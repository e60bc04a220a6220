"""Volume capacity queries backed by the ``df`` utility."""

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SpaceProbe = Callable[[str], int]

# df -k columns: Filesystem, 1024-blocks, Used, Available, Capacity, ..., Mounted on
_TOTAL_COLUMN = 1
_AVAILABLE_COLUMN = 3
_MIN_COLUMNS = 6


@dataclass
class VolumeInfo:
    name: str
    mount_point: str
    total_bytes: int
    avail_bytes: int
    fs_type: str | None = None
    removable: bool | None = None


def list_volumes() -> list[VolumeInfo]:
    """List mounted volumes with their available space."""
    output = _run_df([])
    if output is None:
        return []
    return parse_df_output(output)


def available_bytes(mount_point: str) -> int:
    """Return the bytes available on the volume holding ``mount_point``.

    Best effort: any failure to run or parse ``df`` is reported as 0.
    """
    output = _run_df([mount_point])
    if output is None:
        return 0

    lines = output.splitlines()
    if len(lines) < 2:
        return 0

    parts = lines[1].split()
    if len(parts) <= _AVAILABLE_COLUMN:
        return 0
    return _kib_to_bytes(parts[_AVAILABLE_COLUMN])


def parse_df_output(output: str) -> list[VolumeInfo]:
    """Parse the tabular output of ``df -k`` into volume records.

    The header line is skipped, as are rows too short to carry a mount point.
    The mount point is taken from the last column.
    """
    volumes: list[VolumeInfo] = []

    for line in output.splitlines()[1:]:
        parts = line.split()
        if len(parts) < _MIN_COLUMNS:
            continue

        mount_point = parts[-1]
        volumes.append(
            VolumeInfo(
                name=mount_point,
                mount_point=mount_point,
                total_bytes=_kib_to_bytes(parts[_TOTAL_COLUMN]),
                avail_bytes=_kib_to_bytes(parts[_AVAILABLE_COLUMN]),
            )
        )

    return volumes


def _run_df(args: list[str]) -> str | None:
    try:
        result = subprocess.run(
            ["df", "-k", *args],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.warning("Failed to run df: %s", e)
        return None

    if result.returncode != 0 and not result.stdout.strip():
        logger.warning("df exited with status %d: %s", result.returncode, result.stderr.strip())
        return None

    return result.stdout


def _kib_to_bytes(value: str) -> int:
    try:
        return max(int(value), 0) * 1024
    except ValueError:
        return 0
