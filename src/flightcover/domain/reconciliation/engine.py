"""Reconciler: compare the local cache with the pool and plan the repairs.

``plan_reconciliation`` is the pure core. It takes the already collected
verification results so that it can be re-run after every ledger mutation
without side effects. ``Reconciler.reconcile`` gathers those results first
(all of them, concurrently) and then delegates.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING

from flightcover.domain.model import Divergence, PolicyRecord, utcnow

from .plan import ReconciliationPlan

if TYPE_CHECKING:
    from flightcover.domain.model import PoolSnapshot

    from .verifier import ExistenceVerifier

log = getLogger(__name__)


def plan_reconciliation(
    local: Iterable[PolicyRecord],
    pool: PoolSnapshot,
    verified: Mapping[str, bool],
    *,
    now: datetime | None = None,
) -> ReconciliationPlan:
    """Classify every identifier in ``local | pool`` and derive the repair actions.

    Identifiers missing from ``verified`` count as not verified.
    """

    created_at = now or utcnow()
    local_ids = list(dict.fromkeys(record.policy_id for record in local))
    local_set = set(local_ids)
    pool_ids = list(dict.fromkeys(pool.member_ids))
    pool_set = set(pool_ids)

    classifications: dict[str, Divergence] = {}
    to_add: list[PolicyRecord] = []
    to_remove: set[str] = set()
    corrupted: set[str] = set()

    for policy_id in pool_ids:
        exists = verified.get(policy_id, False)
        if policy_id in local_set:
            if exists:
                classifications[policy_id] = Divergence.CONSISTENT
            else:
                # listed by the pool and cached locally, yet not a live policy
                classifications[policy_id] = Divergence.POOL_ONLY_CORRUPTED
                corrupted.add(policy_id)
                to_remove.add(policy_id)
        elif exists:
            classifications[policy_id] = Divergence.POOL_ONLY_MISSING_LOCAL
            to_add.append(PolicyRecord.placeholder(policy_id, created_at=created_at))
        else:
            classifications[policy_id] = Divergence.POOL_ONLY_CORRUPTED
            corrupted.add(policy_id)

    for policy_id in local_ids:
        if policy_id in pool_set:
            continue
        if verified.get(policy_id, False):
            classifications[policy_id] = Divergence.LOCAL_ONLY_GHOST
        else:
            classifications[policy_id] = Divergence.LOCAL_ONLY_ORPHAN
            to_remove.add(policy_id)

    return ReconciliationPlan(
        to_add=tuple(to_add),
        to_remove=frozenset(to_remove),
        corrupted_for_cleanup=frozenset(corrupted),
        classifications=classifications,
    )


class Reconciler:
    def __init__(
        self,
        verifier: ExistenceVerifier,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._verifier = verifier
        self._clock = clock

    async def reconcile(
        self,
        local: Iterable[PolicyRecord],
        pool: PoolSnapshot,
    ) -> ReconciliationPlan:
        records = list(local)
        candidates = [record.policy_id for record in records]
        candidates.extend(pool.member_ids)
        verified = await self._verifier.verify_many(candidates)
        plan = plan_reconciliation(records, pool, verified, now=self._clock())
        _log_plan(plan)
        return plan


def _log_plan(plan: ReconciliationPlan) -> None:
    counts = {label.value: total for label, total in plan.counts().items() if total}
    log.info(
        "Reconciliation plan: add=%s, remove=%s, cleanup=%s, classes=%s",
        len(plan.to_add),
        len(plan.to_remove),
        len(plan.corrupted_for_cleanup),
        counts,
    )
    for policy_id in plan.ghosts:
        log.warning(
            "Policy %s is live on the ledger but not registered in the pool; keeping it locally",
            policy_id,
        )
    for policy_id in sorted(plan.corrupted_for_cleanup):
        log.warning("Pool lists %s but it does not resolve to a live policy", policy_id)
