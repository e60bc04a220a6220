"""Data models for transfer runs."""

from dataclasses import asdict, dataclass
from enum import Enum


class CopyMode(str, Enum):
    COPY = "copy"
    MOVE = "move"

    @classmethod
    def parse(cls, value: "str | CopyMode") -> "CopyMode":
        # Only an explicit "move" deletes sources.
        return cls.MOVE if value == cls.MOVE.value else cls.COPY


class ConflictPolicy(str, Enum):
    OVERWRITE = "overwrite"
    SKIP = "skip"
    RENAME = "rename"

    @classmethod
    def parse(cls, value: "str | ConflictPolicy") -> "ConflictPolicy":
        # Unrecognized policies fall back to renaming.
        for policy in cls:
            if value == policy.value:
                return policy
        return cls.RENAME


class VerifyMode(str, Enum):
    NONE = "none"
    SIZE = "size"
    SHA256 = "sha256"

    @classmethod
    def parse(cls, value: "str | VerifyMode") -> "VerifyMode":
        for mode in cls:
            if value == mode.value:
                return mode
        return cls.NONE


class Phase(str, Enum):
    """Phase reported in progress events."""

    SCANNING = "scanning"
    COPYING = "copying"
    VERIFYING = "verifying"
    DONE = "done"
    CANCELLED = "cancelled"
    ERROR = "error"


class EntryStatus(str, Enum):
    """Final status of one manifest row."""

    COPIED = "copied"
    MOVED = "moved"
    SKIPPED = "skipped"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TransferProgress:
    phase: Phase
    current_file: int  # 1-based, 0 before the first file
    total_files: int
    current_path: str
    bytes_done: int
    bytes_total: int
    percent: float  # 0..100

    def to_dict(self) -> dict:
        data = asdict(self)
        data["phase"] = self.phase.value
        return data


@dataclass(frozen=True)
class ManifestRow:
    """What happened to one scanned file."""

    source: str
    dest: str
    category: str
    ext: str
    bytes: int
    status: EntryStatus
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "dest": self.dest,
            "category": self.category,
            "ext": self.ext,
            "bytes": self.bytes,
            "status": self.status.value,
            "error": self.error,
        }


@dataclass
class TransferSummary:
    """Aggregate result of a transfer run."""

    started_at: str
    finished_at: str
    duration_ms: int
    total_files: int
    total_bytes: int
    copied_files: int
    moved_files: int
    skipped_files: int
    error_files: int
    output_session_dir: str
    cancelled: bool = False

    def to_dict(self) -> dict:
        return asdict(self)
