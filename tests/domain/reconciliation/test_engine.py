from __future__ import annotations

import asyncio

from flightcover.domain.model import Divergence, PolicyRecord, PoolSnapshot
from flightcover.domain.reconciliation import (
    ExistenceVerifier,
    Reconciler,
    apply_plan,
    plan_reconciliation,
)

from tests.helpers.ledger import FIXED_NOW, POOL_ID, FakeLedgerReader, fixed_clock, policy_id


def _records(*ids: str) -> list[PolicyRecord]:
    return [PolicyRecord(policy_id=value, flight_number="AA1", airline="AA") for value in ids]


def _reconcile(reader: FakeLedgerReader, local: list[PolicyRecord]):
    pool = asyncio.run(reader.get_pool(POOL_ID))
    reconciler = Reconciler(ExistenceVerifier(reader), clock=fixed_clock)
    return asyncio.run(reconciler.reconcile(local, pool))


def test_plan_classifies_every_divergence() -> None:
    consistent, orphan, ghost, missing, corrupted = (policy_id(n) for n in range(1, 6))
    pool = PoolSnapshot(pool_id=POOL_ID, member_ids=(consistent, missing, corrupted))
    verified = {consistent: True, orphan: False, ghost: True, missing: True, corrupted: False}

    plan = plan_reconciliation(_records(consistent, orphan, ghost), pool, verified, now=FIXED_NOW)

    assert plan.classifications == {
        consistent: Divergence.CONSISTENT,
        orphan: Divergence.LOCAL_ONLY_ORPHAN,
        ghost: Divergence.LOCAL_ONLY_GHOST,
        missing: Divergence.POOL_ONLY_MISSING_LOCAL,
        corrupted: Divergence.POOL_ONLY_CORRUPTED,
    }
    assert [record.policy_id for record in plan.to_add] == [missing]
    assert plan.to_add[0].is_placeholder
    assert plan.to_add[0].created_at == "2025-03-01T12:00:00Z"
    assert plan.to_remove == frozenset({orphan})
    assert plan.corrupted_for_cleanup == frozenset({corrupted})
    assert plan.ghosts == (ghost,)


def test_plan_actions_are_disjoint_and_bounded_by_inputs() -> None:
    local_ids = [policy_id(n) for n in range(1, 8)]
    pool_ids = tuple(policy_id(n) for n in range(5, 12))
    verified = {value: int(value, 16) % 2 == 0 for value in {*local_ids, *pool_ids}}
    # keep the overlap verified so the inputs themselves are disjoint-compatible
    verified.update(dict.fromkeys(pool_ids[:3], True))
    pool = PoolSnapshot(pool_id=POOL_ID, member_ids=pool_ids)

    plan = plan_reconciliation(_records(*local_ids), pool, verified)

    added = {record.policy_id for record in plan.to_add}
    assert not added & plan.to_remove
    assert not added & plan.corrupted_for_cleanup
    assert not plan.to_remove & plan.corrupted_for_cleanup
    assert len(added) + len(plan.to_remove) + len(plan.corrupted_for_cleanup) <= len(
        set(local_ids) | set(pool_ids)
    )


def test_cached_pool_member_that_is_not_live_is_removed_and_cleaned_up() -> None:
    broken = policy_id(1)
    pool = PoolSnapshot(pool_id=POOL_ID, member_ids=(broken,))

    plan = plan_reconciliation(_records(broken), pool, {broken: False})

    assert plan.classifications == {broken: Divergence.POOL_ONLY_CORRUPTED}
    assert plan.to_remove == frozenset({broken})
    assert plan.corrupted_for_cleanup == frozenset({broken})


def test_unverified_ids_count_as_not_live() -> None:
    stale = policy_id(1)
    plan = plan_reconciliation(_records(stale), PoolSnapshot(pool_id=POOL_ID), {})

    assert plan.to_remove == frozenset({stale})


def test_reapplying_the_plan_is_idempotent(reader: FakeLedgerReader) -> None:
    kept = reader.add_policy(policy_id(1))
    missing = reader.add_policy(policy_id(2))
    reader.pool_members.append(policy_id(3))
    local = _records(kept, policy_id(4))

    first = _reconcile(reader, local)
    repaired = apply_plan(local, first)
    second = _reconcile(reader, repaired)

    assert [record.policy_id for record in repaired] == [kept, missing]
    assert second.to_add == ()
    assert second.to_remove == frozenset()
    assert second.corrupted_for_cleanup == first.corrupted_for_cleanup == frozenset(
        {policy_id(3)}
    )


def test_live_policy_missing_from_pool_is_kept_as_ghost(reader: FakeLedgerReader) -> None:
    ghost = reader.add_policy(policy_id(1), in_pool=False)

    plan = _reconcile(reader, _records(ghost))

    assert plan.classifications[ghost] is Divergence.LOCAL_ONLY_GHOST
    assert apply_plan(_records(ghost), plan) == _records(ghost)


def test_fresh_install_adopts_every_live_pool_member(reader: FakeLedgerReader) -> None:
    members = [reader.add_policy(policy_id(n)) for n in range(1, 4)]

    plan = _reconcile(reader, [])

    assert [record.policy_id for record in plan.to_add] == members
    assert plan.to_remove == frozenset()


def test_stale_cache_is_pruned_when_the_ledger_was_reset(reader: FakeLedgerReader) -> None:
    local = _records(policy_id(1), policy_id(2))

    plan = _reconcile(reader, local)

    assert plan.to_remove == frozenset({policy_id(1), policy_id(2)})
    assert apply_plan(local, plan) == []


def test_pool_member_unknown_locally_is_added_as_placeholder(reader: FakeLedgerReader) -> None:
    p1 = reader.add_policy(policy_id(1))
    p2 = reader.add_policy(policy_id(2))

    plan = _reconcile(reader, _records(p1))

    assert [record.policy_id for record in plan.to_add] == [p2]
    assert plan.to_add[0].is_placeholder
    assert plan.to_remove == frozenset()
    assert plan.corrupted_for_cleanup == frozenset()


def test_cached_policy_gone_from_ledger_is_removed(reader: FakeLedgerReader) -> None:
    plan = _reconcile(reader, _records(policy_id(1)))

    assert plan.to_add == ()
    assert plan.to_remove == frozenset({policy_id(1)})
    assert plan.corrupted_for_cleanup == frozenset()


def test_pool_member_that_is_not_a_policy_is_flagged_for_cleanup(
    reader: FakeLedgerReader,
) -> None:
    reader.pool_members.append(policy_id(3))

    plan = _reconcile(reader, [])

    assert plan.to_add == ()
    assert plan.to_remove == frozenset()
    assert plan.corrupted_for_cleanup == frozenset({policy_id(3)})
