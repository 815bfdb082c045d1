from __future__ import annotations

import pytest

from flightcover.domain.model import POLICY_ID_LENGTH, is_well_formed_policy_id


def test_well_formed_policy_id_accepts_lowercase_hex() -> None:
    value = "0x" + "0123456789abcdef" * 4
    assert len(value) == POLICY_ID_LENGTH
    assert is_well_formed_policy_id(value)


@pytest.mark.parametrize(
    "value",
    [
        "",
        "0x",
        "0x" + "a" * 63,
        "0x" + "a" * 65,
        "0X" + "a" * 64,
        "0x" + "A" * 64,
        "1x" + "a" * 64,
        "0x" + "g" * 64,
        " 0x" + "a" * 63,
        None,
        42,
    ],
)
def test_well_formed_policy_id_rejects_everything_else(value: object) -> None:
    assert not is_well_formed_policy_id(value)
