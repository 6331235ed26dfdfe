"""Service layer used by CLI and the public API."""

from __future__ import annotations

import logging
import socket
from collections.abc import Mapping
from pathlib import Path

from btsend.core.errors import RecordRejectedError, UnknownTaskError
from btsend.core.model import LoadedTasks, Record, SendResult, Task, ValidationIssue
from btsend.core.placeholders import resolve, substitute
from btsend.core.record import build, encode, issue_for, summarize
from btsend.core.task_loader import load_tasks
from btsend.transports.base import Transport
from btsend.transports.rfcomm import RFCOMMTransport

DEFAULT_CHANNEL = 1
DEFAULT_TIMEOUT_S = 3.0
LOGGER = logging.getLogger(__name__)


class SerialCommandService:
    def __init__(self, *, transport: Transport | None = None) -> None:
        self.transport = transport or RFCOMMTransport()
        self.runtime_warnings = _runtime_warnings()

    def check(self, address: str | None, command: str | None) -> ValidationIssue | None:
        return issue_for(address, command)

    def build_record(self, address: str | None, command: str | None) -> Record:
        record = build(address, command)
        if record is None:
            raise _rejected(address, command)
        return record

    def describe(self, record: Record) -> str:
        summary = summarize(record)
        if summary is None:
            raise _rejected(record.address, record.command)
        return summary

    def payload(self, record: Record) -> bytes:
        data = encode(record)
        if data is None:
            raise _rejected(record.address, record.command)
        return data

    def load_tasks(self, path: Path | None = None) -> LoadedTasks:
        return load_tasks(path)

    def task(self, name: str, path: Path | None = None) -> Task:
        loaded = self.load_tasks(path)
        task = loaded.tasks.get(name)
        if task is None:
            available = ", ".join(sorted(loaded.tasks)) or "<none>"
            raise UnknownTaskError(
                f"No task named '{name}' in {loaded.source}. Available: {available}"
            )
        return task

    def fire(
        self,
        record: Record,
        *,
        variables: Mapping[str, str] | None = None,
        channel: int = DEFAULT_CHANNEL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> SendResult:
        """Resolve placeholders, encode, and send ``record`` over the transport."""
        resolved = resolve(record, variables or {})
        if resolved is None:
            values = variables or {}
            raise _rejected(substitute(record.address, values), substitute(record.command, values))
        if resolved.is_placeholder:
            raise RecordRejectedError(
                f"Address '{resolved.address}' is an unresolved placeholder. Pass --var to substitute it.",
                ValidationIssue.INVALID_ADDRESS,
            )

        payload = self.payload(resolved)
        LOGGER.info("Sending %d byte(s) to %s on channel %d", len(payload), resolved.address, channel)
        response = self.transport.send(
            resolved.address,
            payload,
            channel=channel,
            timeout_s=timeout_s,
        )
        return SendResult(
            record=resolved,
            summary=self.describe(resolved),
            payload_hex=payload.hex(),
            response_hex=response.hex() if response else None,
        )


def _rejected(address: str | None, command: str | None) -> RecordRejectedError:
    if address is None or command is None:
        return RecordRejectedError(ValidationIssue.ABSENT_INPUT.message, ValidationIssue.ABSENT_INPUT)
    issue = issue_for(address, command)
    # Only called after validation failed, so an issue is always reported.
    return RecordRejectedError(issue.message, issue)  # type: ignore[union-attr]


def _runtime_warnings() -> tuple[str, ...]:
    warnings: list[str] = []
    if not hasattr(socket, "AF_BLUETOOTH") or not hasattr(socket, "BTPROTO_RFCOMM"):
        warnings.append(
            "Python runtime missing AF_BLUETOOTH/BTPROTO_RFCOMM; RFCOMM send commands will fail."
        )
    return tuple(warnings)
