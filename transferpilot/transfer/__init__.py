"""Transfer engine: execution, session layout and progress reporting."""

from .copier import CopyCancelled, copy_file_streamed, sha256_file
from .executor import TransferExecutor, execute
from .models import (
    ConflictPolicy,
    CopyMode,
    EntryStatus,
    ManifestRow,
    Phase,
    TransferProgress,
    TransferSummary,
    VerifyMode,
)
from .progress import CancelToken, ProgressEmitter, ProgressReporter, percent
from .session import SessionLayout, create_session, write_manifest

__all__ = [
    "CancelToken",
    "ConflictPolicy",
    "CopyCancelled",
    "CopyMode",
    "EntryStatus",
    "ManifestRow",
    "Phase",
    "ProgressEmitter",
    "ProgressReporter",
    "SessionLayout",
    "TransferExecutor",
    "TransferProgress",
    "TransferSummary",
    "VerifyMode",
    "copy_file_streamed",
    "create_session",
    "execute",
    "percent",
    "sha256_file",
    "write_manifest",
]
