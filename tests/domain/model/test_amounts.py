from __future__ import annotations

from decimal import Decimal

import pytest

from flightcover.domain.model import MIST_PER_SUI, format_sui, from_mist, to_mist


def test_to_mist_converts_whole_and_fractional_amounts() -> None:
    assert to_mist("1") == MIST_PER_SUI
    assert to_mist("0.5") == 500_000_000
    assert to_mist(" 2.25 ") == 2_250_000_000
    assert to_mist(Decimal("0.000000001")) == 1


def test_to_mist_floors_sub_mist_remainders() -> None:
    assert to_mist("0.0000000019") == 1
    assert to_mist("0.0000000009") == 0


@pytest.mark.parametrize("amount", ["", "abc", "-1", "NaN", "Infinity"])
def test_to_mist_rejects_invalid_amounts(amount: str) -> None:
    with pytest.raises(ValueError, match="SUI amount"):
        to_mist(amount)


def test_format_sui_drops_trailing_zeros() -> None:
    assert from_mist(1_500_000_000) == Decimal("1.5")
    assert format_sui(1_500_000_000) == "1.5"
    assert format_sui(10 * MIST_PER_SUI) == "10"
    assert format_sui(0) == "0"
