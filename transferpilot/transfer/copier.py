"""Streaming file copy and hashing."""

import contextlib
import hashlib
import os
from collections.abc import Callable
from pathlib import Path

from transferpilot.transfer.progress import CancelToken

DEFAULT_CHUNK_SIZE = 1024 * 1024


class CopyCancelled(Exception):
    """Raised when a copy stops because the cancel token was set."""


def copy_file_streamed(
    src: Path,
    dst: Path,
    cancel: CancelToken,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_chunk: Callable[[int], None] | None = None,
) -> None:
    """Copy ``src`` to ``dst`` in chunks, checking ``cancel`` before each read.

    A cancelled copy leaves the partially written destination in place.

    Raises:
        CopyCancelled: The token was set during the copy.
        OSError: Opening, reading or writing failed.
    """
    dst.parent.mkdir(parents=True, exist_ok=True)

    with src.open("rb") as in_f, dst.open("wb") as out_f:
        while True:
            if cancel.cancelled:
                raise CopyCancelled(str(src))

            chunk = in_f.read(chunk_size)
            if not chunk:
                break

            out_f.write(chunk)
            if on_chunk is not None:
                on_chunk(len(chunk))

        out_f.flush()
        # Some filesystems (network, FUSE) reject fsync.
        with contextlib.suppress(OSError):
            os.fsync(out_f.fileno())


def sha256_file(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    hasher = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hasher.update(chunk)
    return hasher.hexdigest()
