from __future__ import annotations

from btsend.core.model import Record
from btsend.core.placeholders import resolve, substitute
from btsend.core.record import build


def test_substitute_known_and_unknown_variables() -> None:
    assert substitute("%mac", {"mac": "00:11:22:33:44:55"}) == "00:11:22:33:44:55"
    assert substitute("PRESET %n now", {"n": "3"}) == "PRESET 3 now"
    assert substitute("%missing stays", {"n": "3"}) == "%missing stays"
    assert substitute("100%", {"n": "3"}) == "100%"


def test_resolve_returns_new_record() -> None:
    record = build("%BTMAC", "VOL %level")
    resolved = resolve(record, {"BTMAC": "aa-bb-cc-dd-ee-ff", "level": "7"})
    assert resolved == Record(address="aa-bb-cc-dd-ee-ff", command="VOL 7")
    assert record.address == "%BTMAC"
    assert not resolved.is_placeholder


def test_resolve_without_variables_keeps_record() -> None:
    record = build("%BTMAC", "go")
    assert resolve(record, {}) is record


def test_resolve_rejects_substituted_garbage() -> None:
    record = build("%BTMAC", "go")
    assert resolve(record, {"BTMAC": "not-a-mac"}) is None


def test_resolve_rejects_empty_command_after_substitution() -> None:
    record = build("00:11:22:33:44:55", "%cmd")
    assert resolve(record, {"cmd": ""}) is None
