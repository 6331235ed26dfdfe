"""Domain-specific errors for btsend."""

from __future__ import annotations

from btsend.core.model import ValidationIssue


class BtsendError(Exception):
    """Base error for btsend."""


class TaskLoadError(BtsendError):
    """Raised when reading a task file fails."""


class TaskValidationError(BtsendError):
    """Raised when a task file does not conform to schema or semantics."""


class UnknownTaskError(BtsendError):
    """Raised when a named task is not defined in the loaded task file."""


class RecordRejectedError(BtsendError):
    """Raised when an address/command pair cannot be turned into a sendable record."""

    def __init__(self, message: str, issue: ValidationIssue | None = None) -> None:
        super().__init__(message)
        self.issue = issue


class TransportError(BtsendError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised on RFCOMM connect failures."""


class TransportSendError(TransportError):
    """Raised when payload sending fails."""


class TransportTimeoutError(TransportError):
    """Raised when RFCOMM receive times out."""
