from __future__ import annotations

from pathlib import Path

import pytest

from btsend.core.errors import RecordRejectedError, UnknownTaskError
from btsend.core.model import Record, ValidationIssue
from btsend.core.service import SerialCommandService

MAC = "00:11:22:33:44:55"


class FakeTransport:
    def __init__(self, response: bytes | None = bytes.fromhex("beef")) -> None:
        self.response = response
        self.calls: list[tuple[str, bytes, int, float]] = []

    def send(self, address: str, payload: bytes, *, channel: int = 1, timeout_s: float = 3.0) -> bytes | None:
        self.calls.append((address, payload, channel, timeout_s))
        return self.response


def test_fire_happy_path() -> None:
    transport = FakeTransport()
    service = SerialCommandService(transport=transport)

    result = service.fire(service.build_record(MAC, "stop"), channel=3, timeout_s=1.5)
    assert transport.calls == [(MAC, b"stop\r", 3, 1.5)]
    assert result.payload_hex == b"stop\r".hex()
    assert result.response_hex == "beef"
    assert result.summary == f"{MAC} <- stop\r"


def test_fire_without_response() -> None:
    service = SerialCommandService(transport=FakeTransport(response=None))
    result = service.fire(service.build_record(MAC, "go"))
    assert result.response_hex is None


def test_fire_substitutes_placeholders() -> None:
    transport = FakeTransport()
    service = SerialCommandService(transport=transport)

    record = service.build_record("%BTMAC", "VOL %level")
    result = service.fire(record, variables={"BTMAC": MAC, "level": "4"})
    assert result.record == Record(address=MAC, command="VOL 4")
    assert transport.calls[0][:2] == (MAC, b"VOL 4\r")


def test_fire_rejects_unresolved_placeholder() -> None:
    transport = FakeTransport()
    service = SerialCommandService(transport=transport)

    with pytest.raises(RecordRejectedError, match="unresolved placeholder") as excinfo:
        service.fire(service.build_record("%BTMAC", "go"))
    assert excinfo.value.issue is ValidationIssue.INVALID_ADDRESS
    assert transport.calls == []


def test_fire_rejects_bad_substitution() -> None:
    transport = FakeTransport()
    service = SerialCommandService(transport=transport)

    with pytest.raises(RecordRejectedError, match="Invalid Mac"):
        service.fire(service.build_record("%BTMAC", "go"), variables={"BTMAC": "nope"})
    assert transport.calls == []


def test_build_record_reports_reason() -> None:
    service = SerialCommandService(transport=FakeTransport())

    with pytest.raises(RecordRejectedError, match="Invalid Mac") as excinfo:
        service.build_record("bad-mac", "go")
    assert excinfo.value.issue is ValidationIssue.INVALID_ADDRESS

    with pytest.raises(RecordRejectedError, match="Message not selected"):
        service.build_record(MAC, "")

    with pytest.raises(RecordRejectedError, match="Missing input") as absent:
        service.build_record(MAC, None)
    assert absent.value.issue is ValidationIssue.ABSENT_INPUT

    with pytest.raises(RecordRejectedError) as absent_address:
        service.build_record(None, "go")
    assert absent_address.value.issue is ValidationIssue.ABSENT_INPUT


def test_task_lookup(tmp_path: Path) -> None:
    path = tmp_path / "tasks.yaml"
    path.write_text('tasks:\n  stop:\n    address: "00:11:22:33:44:55"\n    command: stop\n', encoding="utf-8")
    service = SerialCommandService(transport=FakeTransport())

    assert service.task("stop", path).record == Record(address=MAC, command="stop")
    with pytest.raises(UnknownTaskError, match="Available: stop"):
        service.task("start", path)
