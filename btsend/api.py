"""Stable public API for building tooling on top of btsend.

This module is the supported integration surface for third-party callers
(automation hosts, scripts, services). The pure record functions are
re-exported alongside a :class:`Client` that adds task files and sending.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from btsend.core.errors import (
    BtsendError,
    RecordRejectedError,
    TaskLoadError,
    TaskValidationError,
    TransportConnectError,
    TransportError,
    TransportSendError,
    TransportTimeoutError,
    UnknownTaskError,
)
from btsend.core.model import (
    HOLDER_KEY_ADDRESS,
    HOLDER_KEY_COMMAND,
    LoadedTasks,
    Record,
    SendResult,
    Task,
    ValidationIssue,
)
from btsend.core.placeholders import resolve, substitute
from btsend.core.record import (
    address_is_valid,
    build,
    encode,
    error_for,
    from_holder,
    record_is_valid,
    summarize,
    to_holder,
)
from btsend.core.service import DEFAULT_CHANNEL, DEFAULT_TIMEOUT_S, SerialCommandService
from btsend.transports.base import Transport

__all__ = [
    "BtsendError",
    "RecordRejectedError",
    "TaskLoadError",
    "TaskValidationError",
    "UnknownTaskError",
    "TransportError",
    "TransportConnectError",
    "TransportSendError",
    "TransportTimeoutError",
    "HOLDER_KEY_ADDRESS",
    "HOLDER_KEY_COMMAND",
    "LoadedTasks",
    "Record",
    "SendResult",
    "Task",
    "ValidationIssue",
    "address_is_valid",
    "build",
    "encode",
    "error_for",
    "from_holder",
    "record_is_valid",
    "resolve",
    "substitute",
    "summarize",
    "to_holder",
    "Client",
]


class Client:
    """Public client wrapping record building, task files, and RFCOMM sends."""

    def __init__(self, *, transport: Transport | None = None) -> None:
        self._service = SerialCommandService(transport=transport)

    @property
    def runtime_warnings(self) -> tuple[str, ...]:
        return self._service.runtime_warnings

    def record(self, address: str, command: str) -> Record:
        """Build a record, raising :class:`RecordRejectedError` with the reason."""
        return self._service.build_record(address, command)

    def load_tasks(self, path: Path | None = None) -> LoadedTasks:
        return self._service.load_tasks(path)

    def send(
        self,
        address: str,
        command: str,
        *,
        variables: Mapping[str, str] | None = None,
        channel: int = DEFAULT_CHANNEL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> SendResult:
        record = self._service.build_record(address, command)
        return self._service.fire(record, variables=variables, channel=channel, timeout_s=timeout_s)

    def run_task(
        self,
        name: str,
        *,
        path: Path | None = None,
        variables: Mapping[str, str] | None = None,
        channel: int = DEFAULT_CHANNEL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> SendResult:
        task = self._service.task(name, path)
        return self._service.fire(task.record, variables=variables, channel=channel, timeout_s=timeout_s)
