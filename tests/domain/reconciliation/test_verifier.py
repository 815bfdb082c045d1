from __future__ import annotations

import asyncio

import pytest

from flightcover.domain.errors import LedgerResponseError, ObjectNotFoundError
from flightcover.domain.model import VerificationOutcome
from flightcover.domain.reconciliation import ExistenceVerifier

from tests.helpers.ledger import FakeLedgerReader, policy_id


def test_malformed_identifier_fails_without_ledger_read(reader: FakeLedgerReader) -> None:
    verifier = ExistenceVerifier(reader)

    result = asyncio.run(verifier.check("0x1234"))

    assert not result.exists
    assert result.outcome is VerificationOutcome.MALFORMED_IDENTIFIER
    assert reader.calls == []


def test_live_policy_verifies(reader: FakeLedgerReader) -> None:
    live = reader.add_policy(policy_id(1))

    assert asyncio.run(ExistenceVerifier(reader).verify(live))


def test_missing_object_is_not_found(reader: FakeLedgerReader) -> None:
    result = asyncio.run(ExistenceVerifier(reader).check(policy_id(2)))

    assert result.outcome is VerificationOutcome.NOT_FOUND
    assert reader.calls == [policy_id(2)]


def test_object_of_other_type_is_a_mismatch(reader: FakeLedgerReader) -> None:
    reader.objects[policy_id(3)] = "0x2::coin::Coin<0x2::sui::SUI>"

    result = asyncio.run(ExistenceVerifier(reader).check(policy_id(3)))

    assert result.outcome is VerificationOutcome.TYPE_MISMATCH
    assert result.type_tag == "0x2::coin::Coin<0x2::sui::SUI>"


def test_transport_failure_folds_into_false(reader: FakeLedgerReader) -> None:
    reader.add_policy(policy_id(4))
    reader.unreachable.add(policy_id(4))

    result = asyncio.run(ExistenceVerifier(reader).check(policy_id(4)))

    assert result.outcome is VerificationOutcome.TRANSPORT_FAILURE
    assert not result.exists


def test_error_payload_is_distinct_from_transport_failure(reader: FakeLedgerReader) -> None:
    reader.failures[policy_id(7)] = LedgerResponseError("invalid params", code=-32602)

    result = asyncio.run(ExistenceVerifier(reader).check(policy_id(7)))

    assert result.outcome is VerificationOutcome.RESPONSE_ERROR
    assert isinstance(result.error, LedgerResponseError)
    assert not result.exists


def test_not_found_raised_by_reader_keeps_its_outcome(reader: FakeLedgerReader) -> None:
    reader.failures[policy_id(8)] = ObjectNotFoundError(policy_id(8), code="deleted")

    result = asyncio.run(ExistenceVerifier(reader).check(policy_id(8)))

    assert result.outcome is VerificationOutcome.NOT_FOUND


def test_verify_many_checks_each_distinct_id_once(reader: FakeLedgerReader) -> None:
    reader.add_policy(policy_id(5))
    ids = [policy_id(5), policy_id(6), policy_id(5), "garbage"]

    verified = asyncio.run(ExistenceVerifier(reader, max_concurrency=2).verify_many(ids))

    assert verified == {policy_id(5): True, policy_id(6): False, "garbage": False}
    assert sorted(reader.calls) == [policy_id(5), policy_id(6)]


def test_verifier_requires_positive_concurrency(reader: FakeLedgerReader) -> None:
    with pytest.raises(ValueError, match="max_concurrency"):
        ExistenceVerifier(reader, max_concurrency=0)
