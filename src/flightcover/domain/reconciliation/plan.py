"""Reconciliation plan shared by the reconciler, the applier and the sync service.

A plan is computed from one local snapshot and one pool snapshot and carries
both the per-identifier classification and the repair actions derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flightcover.domain.model import Divergence, PolicyRecord


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationPlan:
    to_add: tuple[PolicyRecord, ...] = ()
    to_remove: frozenset[str] = frozenset()
    corrupted_for_cleanup: frozenset[str] = frozenset()
    classifications: dict[str, Divergence] = field(default_factory=dict["str", "Divergence"])

    def ids_with(self, divergence: Divergence) -> tuple[str, ...]:
        return tuple(
            policy_id for policy_id, label in self.classifications.items() if label is divergence
        )

    @property
    def ghosts(self) -> tuple[str, ...]:
        """Live policies missing from the pool; kept locally and flagged for follow-up."""

        return self.ids_with(Divergence.LOCAL_ONLY_GHOST)

    @property
    def has_local_changes(self) -> bool:
        return bool(self.to_add or self.to_remove)

    @property
    def is_empty(self) -> bool:
        return not (self.to_add or self.to_remove or self.corrupted_for_cleanup)

    def counts(self) -> dict[Divergence, int]:
        totals = dict.fromkeys(Divergence, 0)
        for label in self.classifications.values():
            totals[label] += 1
        return totals
