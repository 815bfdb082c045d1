"""Reconciliation between the local policy cache and the ledger pool.

Layered flow for one pass:
1) read the pool snapshot and the local records
2) verify every identifier in either source (concurrently)
3) classify each identifier and derive the repair plan (pure)
4) apply local repairs in one write, optionally batch the pool cleanup

The identifier resolver reuses the same verification to pick the id for a claim.
"""

from __future__ import annotations

from .apply import apply_plan
from .engine import Reconciler, plan_reconciliation
from .plan import ReconciliationPlan
from .resolve import IdentifierResolver, Resolution
from .verifier import ExistenceVerifier, VerificationResult

__all__ = [
    "ExistenceVerifier",
    "IdentifierResolver",
    "ReconciliationPlan",
    "Reconciler",
    "Resolution",
    "VerificationResult",
    "apply_plan",
    "plan_reconciliation",
]
