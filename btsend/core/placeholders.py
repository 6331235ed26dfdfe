"""Fire-time ``%name`` substitution for record fields."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from btsend.core.model import Record
from btsend.core.record import build

_VARIABLE_RE = re.compile(r"%([A-Za-z_][A-Za-z0-9_]*)")
LOGGER = logging.getLogger(__name__)


def substitute(text: str, variables: Mapping[str, str]) -> str:
    """Replace known ``%name`` tokens; unknown ones are left untouched."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return variables[name]
        LOGGER.debug("No value for variable %%%s", name)
        return match.group(0)

    return _VARIABLE_RE.sub(_replace, text)


def resolve(record: Record, variables: Mapping[str, str]) -> Record | None:
    """Substitute both fields and re-validate, yielding a new record or ``None``."""
    if not variables:
        return record
    return build(substitute(record.address, variables), substitute(record.command, variables))
