"""Domain model for cached policies and ledger views."""

from __future__ import annotations

from .amounts import (
    CLAIM_DELAY_THRESHOLD_MINUTES,
    MIST_PER_SUI,
    format_sui,
    from_mist,
    to_mist,
)
from .enums import (
    ClaimStatus,
    Divergence,
    PolicyStatus,
    ResolutionRationale,
    VerificationOutcome,
)
from .identifiers import POLICY_ID_LENGTH, is_well_formed_policy_id
from .policy import UNKNOWN, LedgerObject, PolicyRecord, PoolSnapshot, isoformat, utcnow

__all__ = [
    "CLAIM_DELAY_THRESHOLD_MINUTES",
    "MIST_PER_SUI",
    "POLICY_ID_LENGTH",
    "UNKNOWN",
    "ClaimStatus",
    "Divergence",
    "LedgerObject",
    "PolicyRecord",
    "PolicyStatus",
    "PoolSnapshot",
    "ResolutionRationale",
    "VerificationOutcome",
    "format_sui",
    "from_mist",
    "is_well_formed_policy_id",
    "isoformat",
    "to_mist",
    "utcnow",
]
