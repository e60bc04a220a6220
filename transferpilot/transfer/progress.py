"""Progress events, cancellation and console reporting for transfers."""

import logging
import sys
import threading
import time
from collections.abc import Callable

from transferpilot.transfer.models import Phase, TransferProgress, TransferSummary

logger = logging.getLogger(__name__)

MAX_BYTES = 2**64 - 1

ProgressSink = Callable[[TransferProgress], None]


def saturating_add(a: int, b: int) -> int:
    """Add two byte counts, capping at MAX_BYTES instead of growing past it."""
    return min(a + b, MAX_BYTES)


def percent(bytes_done: int, bytes_total: int) -> float:
    if bytes_total == 0:
        return 0.0
    return min(max(bytes_done / bytes_total * 100.0, 0.0), 100.0)


class CancelToken:
    """Cooperative cancellation flag shared between a caller and one run.

    The executor only reads the token; resetting it before a new run is the
    caller's job.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ProgressEmitter:
    """Fire-and-forget delivery of progress events to a sink.

    A sink that raises never affects the transfer: the failure is logged at
    debug level and dropped.
    """

    def __init__(self, sink: ProgressSink | None = None):
        self.sink = sink

    def emit(
        self,
        phase: Phase,
        *,
        current_file: int,
        total_files: int,
        current_path: str,
        bytes_done: int,
        bytes_total: int,
        percent_override: float | None = None,
    ) -> None:
        if self.sink is None:
            return

        event = TransferProgress(
            phase=phase,
            current_file=current_file,
            total_files=total_files,
            current_path=current_path,
            bytes_done=bytes_done,
            bytes_total=bytes_total,
            percent=(
                percent_override
                if percent_override is not None
                else percent(bytes_done, bytes_total)
            ),
        )
        try:
            self.sink(event)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.debug("Progress sink failed for %s event", phase.value, exc_info=True)


class Throttle:
    """Lets an action through at most once per ``interval`` seconds."""

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self._clock = clock
        self._last = clock()

    def ready(self) -> bool:
        now = self._clock()
        if now - self._last >= self.interval:
            self._last = now
            return True
        return False


class ProgressReporter:
    """Renders progress events and summaries on the console."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr
        self._last_phase: Phase | None = None

    def __call__(self, event: TransferProgress) -> None:
        if event.phase is Phase.SCANNING:
            print("Scanning picked items...", file=self.stream)
        elif event.phase in (Phase.COPYING, Phase.VERIFYING):
            label = "Verifying" if event.phase is Phase.VERIFYING else "Copying"
            print(
                f"\r[{event.current_file:,}/{event.total_files:,}] {label} "
                f"{_format_bytes(event.bytes_done)} / {_format_bytes(event.bytes_total)} "
                f"({event.percent:5.1f}%)",
                end="",
                file=self.stream,
            )
        elif event.phase is Phase.CANCELLED and self._last_phase is not Phase.CANCELLED:
            print(f"\nTransfer cancelled at file {event.current_file:,}.", file=self.stream)
        elif event.phase is Phase.DONE:
            print("\nTransfer complete.", file=self.stream)
        self._last_phase = event.phase

    def report_summary(self, summary: TransferSummary) -> None:
        duration = _format_duration(summary.duration_ms / 1000)
        print(
            f"Processed {summary.total_files:,} files "
            f"({_format_bytes(summary.total_bytes)}) in {duration}",
            file=self.stream,
        )
        print(
            f"  Copied: {summary.copied_files:,}  Moved: {summary.moved_files:,}  "
            f"Skipped: {summary.skipped_files:,}  Errors: {summary.error_files:,}",
            file=self.stream,
        )
        print(f"Session: {summary.output_session_dir}", file=self.stream)


def _format_duration(seconds: float) -> str:
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def _format_bytes(size: int) -> str:
    size_f = float(size)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_f < 1024:
            return f"{size_f:.2f} {unit}"
        size_f /= 1024
    return f"{size_f:.2f} PB"
