"""Validation and wire encoding for (address, command) records.

Every function here is pure apart from diagnostic logging. Rejections are
reported as ``False``/``None`` results, never raised.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from btsend.core.model import (
    ELLIPSIS,
    HOLDER_KEY_ADDRESS,
    HOLDER_KEY_COMMAND,
    HOLDER_KEY_REPLACE,
    MAX_SUMMARY_LEN,
    PLACEHOLDER_MARKER,
    TERMINATOR,
    Record,
    ValidationIssue,
)

# Six hex pairs, one separator kind used throughout.
_MAC_RE = re.compile(r"[0-9a-f]{2}([:-])[0-9a-f]{2}(?:\1[0-9a-f]{2}){4}", re.IGNORECASE)
DEFAULT_ENCODING = "utf-8"
LOGGER = logging.getLogger(__name__)

Candidate = Record | Mapping[str, object] | None


def address_is_valid(address: str | None) -> bool:
    if not isinstance(address, str):
        return False
    # Placeholders are substituted later by the host.
    if address.startswith(PLACEHOLDER_MARKER):
        return True
    return _MAC_RE.fullmatch(address) is not None


def _text(value: object) -> str | None:
    # Non-text values read as absent.
    return value if isinstance(value, str) else None


def get_address(holder: Mapping[str, object]) -> str | None:
    return _text(holder.get(HOLDER_KEY_ADDRESS))


def get_command(holder: Mapping[str, object]) -> str | None:
    return _text(holder.get(HOLDER_KEY_COMMAND))


def _fields(candidate: Record | Mapping[str, object]) -> tuple[str | None, str | None]:
    if isinstance(candidate, Record):
        return _text(candidate.address), _text(candidate.command)
    for key in (HOLDER_KEY_ADDRESS, HOLDER_KEY_COMMAND):
        if key not in candidate:
            LOGGER.warning("Holder missing key %s", key)
    return get_address(candidate), get_command(candidate)


def record_is_valid(candidate: Candidate) -> bool:
    """Whether ``candidate`` holds a well-formed address and a non-empty command.

    ``candidate`` may be a :class:`Record` or a holder mapping keyed by
    ``HOLDER_KEY_ADDRESS``/``HOLDER_KEY_COMMAND``. Missing holder keys are
    logged but only the field contents decide the outcome.
    """
    if candidate is None:
        LOGGER.warning("Null record")
        return False

    address, command = _fields(candidate)
    if not address_is_valid(address):
        LOGGER.warning("Invalid MAC")
        return False
    if command is None:
        LOGGER.warning("Null command")
        return False
    if not command:
        LOGGER.warning("Empty command")
        return False
    return True


def issue_for(address: str | None, command: str | None) -> ValidationIssue | None:
    """First rule violated by the raw pair, address checked before command."""
    if not address_is_valid(address):
        return ValidationIssue.INVALID_ADDRESS
    if not _text(command):
        return ValidationIssue.MISSING_OR_EMPTY_COMMAND
    return None


def error_for(address: str | None, command: str | None) -> str | None:
    issue = issue_for(address, command)
    return issue.message if issue else None


def build(address: str | None, command: str | None) -> Record | None:
    """Create a record from raw values, or ``None`` if they are rejected.

    The reason for a rejection is available separately via :func:`error_for`.
    """
    if address is None or command is None:
        return None

    candidate = Record(address=address, command=command)
    if not record_is_valid(candidate):
        return None
    return candidate


def summarize(record: Candidate) -> str | None:
    """One-line ``<address> <- <command>`` rendering, CR-terminated, at most 60 chars."""
    if not record_is_valid(record):
        return None

    address, command = _fields(record)
    text = f"{address} <- {command}"
    length = len(text) + len(TERMINATOR)
    if length > MAX_SUMMARY_LEN:
        text = text[: MAX_SUMMARY_LEN - len(TERMINATOR) - len(ELLIPSIS)] + ELLIPSIS
    return text + TERMINATOR


def encode(record: Candidate, *, encoding: str = DEFAULT_ENCODING) -> bytes | None:
    """Wire payload: the command followed by a single CR, with no other framing."""
    if not record_is_valid(record):
        return None

    _, command = _fields(record)
    return (command + TERMINATOR).encode(encoding)


def to_holder(record: Record) -> dict[str, str]:
    return {
        HOLDER_KEY_ADDRESS: record.address,
        HOLDER_KEY_COMMAND: record.command,
        HOLDER_KEY_REPLACE: f"{HOLDER_KEY_ADDRESS} {HOLDER_KEY_COMMAND}",
    }


def from_holder(holder: Mapping[str, object] | None) -> Record | None:
    if holder is None:
        return None
    return build(get_address(holder), get_command(holder))
