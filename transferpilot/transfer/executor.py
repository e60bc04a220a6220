"""Transfer executor: copies or moves scanned entries into a session folder."""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from transferpilot.config import TransferConfig
from transferpilot.errors import TransferError
from transferpilot.scanner import FileEntry, PickedItem, classify, scan
from transferpilot.transfer.conflicts import unique_dest_path
from transferpilot.transfer.copier import CopyCancelled, copy_file_streamed, sha256_file
from transferpilot.transfer.models import (
    ConflictPolicy,
    CopyMode,
    EntryStatus,
    ManifestRow,
    Phase,
    TransferSummary,
    VerifyMode,
)
from transferpilot.transfer.progress import (
    CancelToken,
    ProgressEmitter,
    ProgressSink,
    Throttle,
    saturating_add,
)
from transferpilot.transfer.session import SessionLayout, create_session, write_manifest

logger = logging.getLogger(__name__)


@dataclass
class _RunState:
    """Mutable bookkeeping for one run; only the executor writes to it."""

    total_files: int
    total_bytes: int
    bytes_done: int = 0
    copied_files: int = 0
    moved_files: int = 0
    skipped_files: int = 0
    error_files: int = 0
    cancelled: bool = False
    manifest: list[ManifestRow] = field(default_factory=list)

    def record(self, row: ManifestRow) -> None:
        self.manifest.append(row)
        if row.status is EntryStatus.COPIED:
            self.copied_files += 1
        elif row.status is EntryStatus.MOVED:
            self.moved_files += 1
        elif row.status is EntryStatus.SKIPPED:
            self.skipped_files += 1
        elif row.status is EntryStatus.ERROR:
            self.error_files += 1

    @property
    def processed_files(self) -> int:
        return self.copied_files + self.moved_files + self.skipped_files + self.error_files


class TransferExecutor:
    """Runs one transfer at a time, strictly in scan order.

    For every scanned entry the executor resolves a destination inside the
    session folder, applies the conflict policy, streams the copy while
    polling the cancel token, optionally verifies the result and, in move
    mode, deletes the source. Each entry ends up as exactly one manifest row.

    Per-entry I/O failures become ``error`` rows and the run continues.
    Setup failures, unreadable source metadata and manifest write failures
    raise ``TransferError``.
    """

    def __init__(
        self,
        config: TransferConfig | None = None,
        sink: ProgressSink | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the executor.

        Args:
            config: Chunk size, throttle interval and layout settings.
            sink: Receives progress events. Failures inside it are ignored.
            clock: Local wall clock used to name the session folder.
        """
        self.config = config or TransferConfig()
        self.emitter = ProgressEmitter(sink)
        self.clock = clock

    def execute(
        self,
        items: Iterable[PickedItem],
        dest_mount: str | Path,
        copy_mode: CopyMode | str = CopyMode.COPY,
        conflict_policy: ConflictPolicy | str = ConflictPolicy.RENAME,
        verify_mode: VerifyMode | str = VerifyMode.NONE,
        cancel: CancelToken | None = None,
    ) -> TransferSummary:
        copy_mode = CopyMode.parse(copy_mode)
        conflict_policy = ConflictPolicy.parse(conflict_policy)
        verify_mode = VerifyMode.parse(verify_mode)
        cancel = cancel or CancelToken()

        started = self.clock().astimezone()
        start_time = time.monotonic()

        self.emitter.emit(
            Phase.SCANNING,
            current_file=0,
            total_files=0,
            current_path="",
            bytes_done=0,
            bytes_total=0,
        )

        try:
            entries = scan(items)
            run = _RunState(total_files=len(entries), total_bytes=_total_bytes(entries))
            layout = create_session(dest_mount, started, self.config.root_dir_name)
            logger.info(
                "Starting %s of %d files (%d bytes) into %s",
                copy_mode.value,
                run.total_files,
                run.total_bytes,
                layout.session_dir,
            )
            self._run_entries(run, entries, layout, copy_mode, conflict_policy, verify_mode, cancel)
            write_manifest(layout, run.manifest)
        except TransferError as e:
            logger.error("Transfer failed: %s", e)
            self.emitter.emit(
                Phase.ERROR,
                current_file=0,
                total_files=0,
                current_path=str(e),
                bytes_done=0,
                bytes_total=0,
            )
            raise

        final_phase = Phase.CANCELLED if run.cancelled else Phase.DONE
        self.emitter.emit(
            final_phase,
            current_file=run.total_files,
            total_files=run.total_files,
            current_path=str(layout.session_dir.absolute()),
            bytes_done=run.bytes_done,
            bytes_total=run.total_bytes,
            percent_override=100.0 if final_phase is Phase.DONE and run.total_bytes else None,
        )

        finished = self.clock().astimezone()
        summary = TransferSummary(
            started_at=started.isoformat(),
            finished_at=finished.isoformat(),
            duration_ms=int((time.monotonic() - start_time) * 1000),
            total_files=run.processed_files,
            total_bytes=run.total_bytes,
            copied_files=run.copied_files,
            moved_files=run.moved_files,
            skipped_files=run.skipped_files,
            error_files=run.error_files,
            output_session_dir=str(layout.session_dir.absolute()),
            cancelled=run.cancelled,
        )
        logger.info(
            "Transfer %s: %d copied, %d moved, %d skipped, %d errors",
            final_phase.value,
            summary.copied_files,
            summary.moved_files,
            summary.skipped_files,
            summary.error_files,
        )
        return summary

    def _run_entries(
        self,
        run: _RunState,
        entries: list[FileEntry],
        layout: SessionLayout,
        copy_mode: CopyMode,
        conflict_policy: ConflictPolicy,
        verify_mode: VerifyMode,
        cancel: CancelToken,
    ) -> None:
        # Initial event so the progress bar appears before the first file.
        self._emit(run, Phase.COPYING, 0, "")

        for index, entry in enumerate(entries, start=1):
            if cancel.cancelled:
                run.cancelled = True
                self._emit(run, Phase.CANCELLED, index, str(entry.source_path))
                return

            row = self._transfer_entry(
                run, index, entry, layout, copy_mode, conflict_policy, verify_mode, cancel
            )
            run.record(row)
            if row.status is EntryStatus.CANCELLED:
                return

    def _transfer_entry(
        self,
        run: _RunState,
        index: int,
        entry: FileEntry,
        layout: SessionLayout,
        copy_mode: CopyMode,
        conflict_policy: ConflictPolicy,
        verify_mode: VerifyMode,
        cancel: CancelToken,
    ) -> ManifestRow:
        src = entry.source_path
        try:
            size = src.stat().st_size
        except OSError as e:
            raise TransferError(f"metadata error: {e}") from e

        category, ext = classify(src)
        dst = layout.destination_for(entry)

        def row(status: EntryStatus, error: str | None = None) -> ManifestRow:
            return ManifestRow(
                source=str(src),
                dest=str(dst),
                category=category.value,
                ext=ext,
                bytes=size,
                status=status,
                error=error,
            )

        if dst.exists():
            if conflict_policy is ConflictPolicy.SKIP:
                logger.debug("Destination exists, skipping: %s", dst)
                return row(EntryStatus.SKIPPED)
            if conflict_policy is ConflictPolicy.RENAME:
                dst = unique_dest_path(dst, self.config.max_rename_attempts)

        self._emit(run, Phase.COPYING, index, str(src))

        throttle = Throttle(self.config.progress_interval)

        def on_chunk(n: int) -> None:
            run.bytes_done = saturating_add(run.bytes_done, n)
            if throttle.ready():
                self._emit(run, Phase.COPYING, index, str(src))

        error: str | None = None
        try:
            copy_file_streamed(src, dst, cancel, self.config.chunk_size, on_chunk)
        except CopyCancelled:
            logger.info("Transfer cancelled during %s", src)
            run.cancelled = True
            self._emit(run, Phase.CANCELLED, index, str(src))
            return row(EntryStatus.CANCELLED)
        except OSError as e:
            error = f"copy failed: {e}"

        if error is None:
            error = self._verify(run, index, src, dst, size, verify_mode)

        status = EntryStatus.COPIED
        if error is None and copy_mode is CopyMode.MOVE:
            try:
                _delete_source(src)
                status = EntryStatus.MOVED
            except OSError as e:
                error = f"move cleanup failed: {e}"

        if error is not None:
            logger.warning("Failed to transfer %s: %s", src, error)
            status = EntryStatus.ERROR

        # End-of-file event so the UI catches up on small files.
        self._emit(run, Phase.COPYING, index, "")
        return row(status, error)

    def _verify(
        self,
        run: _RunState,
        index: int,
        src: Path,
        dst: Path,
        expected_size: int,
        verify_mode: VerifyMode,
    ) -> str | None:
        """Return an error message if the copy does not match the source."""
        if verify_mode is VerifyMode.SIZE:
            try:
                actual_size = dst.stat().st_size
            except OSError as e:
                return f"verify failed: {e}"
            if actual_size != expected_size:
                return "verify failed: size mismatch"

        elif verify_mode is VerifyMode.SHA256:
            self._emit(run, Phase.VERIFYING, index, str(src))
            try:
                src_hash = sha256_file(src, self.config.chunk_size)
                dst_hash = sha256_file(dst, self.config.chunk_size)
            except OSError as e:
                return f"verify failed: {e}"
            if src_hash != dst_hash:
                return "verify failed: sha256 mismatch"

        return None

    def _emit(self, run: _RunState, phase: Phase, current_file: int, current_path: str) -> None:
        self.emitter.emit(
            phase,
            current_file=current_file,
            total_files=run.total_files,
            current_path=current_path,
            bytes_done=run.bytes_done,
            bytes_total=run.total_bytes,
        )


def execute(
    items: Iterable[PickedItem],
    dest_mount: str | Path,
    copy_mode: CopyMode | str = CopyMode.COPY,
    conflict_policy: ConflictPolicy | str = ConflictPolicy.RENAME,
    verify_mode: VerifyMode | str = VerifyMode.NONE,
    cancel: CancelToken | None = None,
    sink: ProgressSink | None = None,
    config: TransferConfig | None = None,
) -> TransferSummary:
    """Run a single transfer with a fresh executor."""
    executor = TransferExecutor(config=config, sink=sink)
    return executor.execute(items, dest_mount, copy_mode, conflict_policy, verify_mode, cancel)


def _total_bytes(entries: list[FileEntry]) -> int:
    total = 0
    for entry in entries:
        try:
            size = entry.source_path.stat().st_size
        except OSError as e:
            raise TransferError(f"metadata error: {e}") from e
        total = saturating_add(total, size)
    return total


def _delete_source(path: Path) -> None:
    path.unlink()
