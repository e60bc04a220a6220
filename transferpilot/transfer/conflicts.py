"""Destination name conflict handling."""

from pathlib import Path

MAX_RENAME_ATTEMPTS = 9999


def unique_dest_path(dest: Path, max_attempts: int = MAX_RENAME_ATTEMPTS) -> Path:
    """Find a free destination path by inserting a numbered suffix.

    ``photo.jpg`` becomes ``photo (1).jpg``, then ``photo (2).jpg`` and so on,
    using the lowest number that does not exist yet.

    Args:
        dest: Desired destination path.
        max_attempts: Highest suffix number to try.

    Returns:
        ``dest`` itself if it does not exist, the first free candidate
        otherwise, or ``dest`` again if every candidate is taken.
    """
    if not dest.exists():
        return dest

    stem = dest.stem or "file"
    suffix = dest.suffix
    for i in range(1, max_attempts + 1):
        candidate = dest.with_name(f"{stem} ({i}){suffix}")
        if not candidate.exists():
            return candidate

    return dest
