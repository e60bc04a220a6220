"""TransferPilot - Move picked files and folders into dated transfer sessions."""

__version__ = "0.1.0"

from transferpilot.preflight import PreflightReport
from transferpilot.scanner import FileEntry, PickedItem
from transferpilot.transfer import CancelToken, TransferExecutor, TransferSummary

__all__ = [
    "CancelToken",
    "FileEntry",
    "PickedItem",
    "PreflightReport",
    "TransferExecutor",
    "TransferSummary",
]
