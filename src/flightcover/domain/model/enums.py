"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class PolicyStatus(StrEnum):
    ACTIVE = "active"
    CLAIMED = "claimed"
    EXPIRED = "expired"


class Divergence(StrEnum):
    """Where an identifier sits between the local cache and the pool."""

    CONSISTENT = "consistent"
    LOCAL_ONLY_ORPHAN = "local_only_orphan"
    LOCAL_ONLY_GHOST = "local_only_ghost"
    POOL_ONLY_MISSING_LOCAL = "pool_only_missing_local"
    POOL_ONLY_CORRUPTED = "pool_only_corrupted"


class VerificationOutcome(StrEnum):
    VERIFIED = "verified"
    MALFORMED_IDENTIFIER = "malformed_identifier"
    NOT_FOUND = "not_found"
    TYPE_MISMATCH = "type_mismatch"
    TRANSPORT_FAILURE = "transport_failure"
    RESPONSE_ERROR = "response_error"


class ResolutionRationale(StrEnum):
    DIRECT_HIT = "direct_hit"
    POOL_FALLBACK_DESPITE_VALID_CANDIDATE = "pool_fallback_despite_valid_candidate"
    CANDIDATE_ONLY_OPTION = "candidate_only_option"
    MOST_RECENT_POOL_MEMBER = "most_recent_pool_member"
    NO_VALID_POLICY_FOUND = "no_valid_policy_found"


class ClaimStatus(StrEnum):
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
