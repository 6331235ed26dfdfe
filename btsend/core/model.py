"""Core data models used across validator, task loader, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

PACKAGE_NAME = "io.github.btsend"

# Keys for holder mappings
HOLDER_KEY_ADDRESS = PACKAGE_NAME + ".STRING_MAC"
HOLDER_KEY_COMMAND = PACKAGE_NAME + ".STRING_MSG"
HOLDER_KEY_REPLACE = PACKAGE_NAME + ".VARIABLE_REPLACE_KEYS"

PLACEHOLDER_MARKER = "%"
TERMINATOR = "\r"
ELLIPSIS = "..."
MAX_SUMMARY_LEN = 60


class ValidationIssue(Enum):
    INVALID_ADDRESS = "Invalid Mac"
    MISSING_OR_EMPTY_COMMAND = "Message not selected"
    ABSENT_INPUT = "Missing input"

    @property
    def message(self) -> str:
        return self.value


@dataclass(frozen=True)
class Record:
    """Validated (address, command) pair.

    Only obtain instances through :func:`btsend.core.record.build`; the
    dataclass constructor itself performs no checks.
    """

    address: str
    command: str

    @property
    def is_placeholder(self) -> bool:
        return self.address.startswith(PLACEHOLDER_MARKER)


@dataclass(frozen=True)
class Task:
    name: str
    record: Record


@dataclass(frozen=True)
class LoadedTasks:
    tasks: dict[str, Task]
    source: str


@dataclass(frozen=True)
class SendResult:
    record: Record
    summary: str
    payload_hex: str
    response_hex: str | None
