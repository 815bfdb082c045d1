from __future__ import annotations

import json

import pytest

from flightcover.domain.model import PolicyRecord, PolicyStatus
from flightcover.domain.record_store import RecordStore

from tests.helpers.ledger import InMemoryCacheSlot, fixed_clock, policy_id


def _store(slot: InMemoryCacheSlot) -> RecordStore:
    return RecordStore(slot, clock=fixed_clock)


def test_load_empty_slot_returns_no_records(slot: InMemoryCacheSlot) -> None:
    assert _store(slot).load() == []
    assert slot.writes == []


def test_legacy_identifier_list_is_migrated_and_written_back(slot: InMemoryCacheSlot) -> None:
    slot.payload = json.dumps([policy_id(1), policy_id(2), policy_id(1)])

    records = _store(slot).load()

    assert [record.policy_id for record in records] == [policy_id(1), policy_id(2)]
    assert all(record.is_placeholder for record in records)
    assert all(record.created_at == "2025-03-01T12:00:00Z" for record in records)
    assert len(slot.writes) == 1
    persisted = json.loads(slot.writes[0])
    assert [entry["policyId"] for entry in persisted] == [policy_id(1), policy_id(2)]

    # second load sees the current format and does not write again
    assert _store(slot).load() == records
    assert len(slot.writes) == 1


def test_mixed_legacy_and_record_entries_keep_metadata(slot: InMemoryCacheSlot) -> None:
    record = PolicyRecord(policy_id=policy_id(3), flight_number="BA7", airline="British Airways")
    slot.payload = json.dumps([policy_id(4), record.to_payload()])

    records = _store(slot).load()

    assert records[1] == record
    assert records[0].is_placeholder
    assert len(slot.writes) == 1


@pytest.mark.parametrize("junk", ["", "   ", "0x1", policy_id(5).upper()])
def test_malformed_legacy_ids_are_dropped_and_survivors_reload(
    slot: InMemoryCacheSlot, junk: str
) -> None:
    slot.payload = json.dumps([junk, policy_id(1)])
    store = _store(slot)

    first = store.load()
    second = store.load()

    assert [record.policy_id for record in first] == [policy_id(1)]
    assert second == first
    assert json.loads(slot.payload) == [first[0].to_payload()]
    assert len(slot.writes) == 1


def test_legacy_list_of_only_junk_is_cleared(slot: InMemoryCacheSlot) -> None:
    slot.payload = json.dumps(["", "not-an-id"])

    assert _store(slot).load() == []
    assert slot.payload == "[]"


@pytest.mark.parametrize(
    "payload",
    ["{not json", json.dumps({"policyId": "0x1"}), json.dumps([1, 2]), json.dumps([{}])],
)
def test_corrupt_slot_is_treated_as_empty(slot: InMemoryCacheSlot, payload: str) -> None:
    slot.payload = payload

    assert _store(slot).load() == []
    assert slot.payload == payload


def test_save_deduplicates_by_policy_id(slot: InMemoryCacheSlot) -> None:
    first = PolicyRecord(policy_id=policy_id(5), flight_number="LH1")
    second = PolicyRecord(policy_id=policy_id(5), flight_number="LH2")

    store = _store(slot)
    store.save([first, second])

    assert store.load() == [second]


def test_add_and_get(slot: InMemoryCacheSlot) -> None:
    store = _store(slot)
    record = PolicyRecord(policy_id=policy_id(6), flight_number="AF10")

    store.add(record)

    assert store.get(policy_id(6)) == record
    assert store.get(policy_id(7)) is None


def test_upsert_status_updates_existing_record(slot: InMemoryCacheSlot) -> None:
    store = _store(slot)
    store.add(PolicyRecord(policy_id=policy_id(8)))

    store.upsert_status(policy_id(8), PolicyStatus.CLAIMED)

    record = store.get(policy_id(8))
    assert record is not None
    assert record.status is PolicyStatus.CLAIMED


def test_upsert_status_ignores_unknown_policy(slot: InMemoryCacheSlot) -> None:
    store = _store(slot)
    store.add(PolicyRecord(policy_id=policy_id(9)))
    writes_before = len(slot.writes)

    store.upsert_status(policy_id(10), PolicyStatus.CLAIMED)

    assert len(slot.writes) == writes_before
    assert store.get(policy_id(10)) is None
