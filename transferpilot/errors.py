"""Exception hierarchy for transferpilot."""


class TransferPilotError(Exception):
    """Base error for the project."""


class PreflightError(TransferPilotError):
    """Raised when a scanned entry's metadata cannot be read during preflight."""


class TransferError(TransferPilotError):
    """Raised when a transfer run cannot continue (setup, metadata or manifest failure)."""
