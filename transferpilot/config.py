"""Configuration module for transferpilot."""

from dataclasses import dataclass, field


@dataclass
class TransferConfig:
    chunk_size: int = 1024 * 1024
    progress_interval: float = 0.12
    max_rename_attempts: int = 9999
    root_dir_name: str = "Transfers"


@dataclass
class Config:
    transfer: TransferConfig = field(default_factory=TransferConfig)
