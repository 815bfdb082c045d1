"""Structural checks for ledger object identifiers."""

from __future__ import annotations

import re
from typing import Final

POLICY_ID_LENGTH: Final[int] = 66
_POLICY_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"0x[0-9a-f]{64}")


def is_well_formed_policy_id(value: object) -> bool:
    """Return whether ``value`` is ``0x`` followed by 64 lowercase hex digits."""

    if not isinstance(value, str) or len(value) != POLICY_ID_LENGTH:
        return False
    return _POLICY_ID_PATTERN.fullmatch(value) is not None
