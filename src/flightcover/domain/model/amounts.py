"""SUI amount conversion and contract thresholds."""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Final

MIST_PER_SUI: Final[int] = 1_000_000_000
CLAIM_DELAY_THRESHOLD_MINUTES: Final[int] = 1440


def to_mist(amount: str | Decimal) -> int:
    """Convert a SUI amount to whole MIST, flooring any sub-MIST remainder."""

    try:
        value = Decimal(amount.strip()) if isinstance(amount, str) else Decimal(amount)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid SUI amount: {amount!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Invalid SUI amount: {amount!r}")
    if value < 0:
        raise ValueError(f"SUI amount must not be negative: {amount!r}")
    return int((value * MIST_PER_SUI).to_integral_value(rounding=ROUND_FLOOR))


def from_mist(mist: int) -> Decimal:
    return Decimal(mist) / Decimal(MIST_PER_SUI)


def format_sui(mist: int) -> str:
    return f"{from_mist(mist).normalize():f}"
