"""Pure application of a reconciliation plan to a list of records."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from flightcover.domain.model import PolicyRecord

    from .plan import ReconciliationPlan


def apply_plan(records: Iterable[PolicyRecord], plan: ReconciliationPlan) -> list[PolicyRecord]:
    """Drop ``plan.to_remove`` and append ``plan.to_add`` entries not already present."""

    kept = [record for record in records if record.policy_id not in plan.to_remove]
    present = {record.policy_id for record in kept}
    for record in plan.to_add:
        if record.policy_id not in present:
            kept.append(record)
            present.add(record.policy_id)
    return kept
