"""Pick the policy identifier to submit with a claim.

Precedence, first match wins:

1. candidate verifies and is in the pool -> candidate (``direct_hit``)
2. candidate verifies, is not in the pool, some pool member verifies
   -> first verified pool member (``pool_fallback_despite_valid_candidate``)
3. candidate verifies, no pool member verifies -> candidate
   (``candidate_only_option``)
4. no usable candidate, some pool member verifies -> last verified pool
   member (``most_recent_pool_member``)
5. nothing verifies -> empty (``no_valid_policy_found``)

Rule 4 assumes the pool only ever appends members. If members are reordered
or removed and re-inserted, "last" no longer means "most recent".
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from flightcover.domain.model import ResolutionRationale

if TYPE_CHECKING:
    from flightcover.domain.model import PoolSnapshot

    from .verifier import ExistenceVerifier

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    recommended: str
    rationale: ResolutionRationale
    candidate: str = ""

    @property
    def found(self) -> bool:
        return bool(self.recommended)

    @property
    def substitutes_candidate(self) -> bool:
        """True when the recommendation differs from a non-empty candidate."""

        return bool(self.candidate) and self.recommended != self.candidate

    def describe(self) -> str:
        match self.rationale:
            case ResolutionRationale.DIRECT_HIT:
                return f"Policy {self.recommended} is live and registered in the pool."
            case ResolutionRationale.POOL_FALLBACK_DESPITE_VALID_CANDIDATE:
                return (
                    f"Policy {self.candidate} exists but is not registered in the pool; "
                    f"the first registered policy is {self.recommended}."
                )
            case ResolutionRationale.CANDIDATE_ONLY_OPTION:
                return (
                    f"Policy {self.recommended} exists but is not registered in the pool, "
                    "and no pool member could be verified."
                )
            case ResolutionRationale.MOST_RECENT_POOL_MEMBER:
                prefix = (
                    f"Policy {self.candidate} could not be verified; "
                    if self.candidate
                    else "No policy id was given; "
                )
                return f"{prefix}the most recent known-good policy is {self.recommended}."
            case ResolutionRationale.NO_VALID_POLICY_FOUND:
                return "No valid policy was found on the ledger."


class IdentifierResolver:
    """Advisory and read-only; safe to call before every claim submission."""

    def __init__(self, verifier: ExistenceVerifier) -> None:
        self._verifier = verifier

    async def resolve(self, candidate: str | None, pool: PoolSnapshot) -> Resolution:
        candidate_id = (candidate or "").strip()
        to_check = [*pool.member_ids, candidate_id] if candidate_id else list(pool.member_ids)
        verified = await self._verifier.verify_many(to_check)

        candidate_ok = bool(candidate_id) and verified.get(candidate_id, False)
        verified_members = [member for member in pool.member_ids if verified.get(member, False)]

        if candidate_ok and candidate_id in pool.member_ids:
            resolution = Resolution(candidate_id, ResolutionRationale.DIRECT_HIT, candidate_id)
        elif candidate_ok and verified_members:
            resolution = Resolution(
                verified_members[0],
                ResolutionRationale.POOL_FALLBACK_DESPITE_VALID_CANDIDATE,
                candidate_id,
            )
        elif candidate_ok:
            resolution = Resolution(
                candidate_id, ResolutionRationale.CANDIDATE_ONLY_OPTION, candidate_id
            )
        elif verified_members:
            resolution = Resolution(
                verified_members[-1],
                ResolutionRationale.MOST_RECENT_POOL_MEMBER,
                candidate_id,
            )
        else:
            resolution = Resolution("", ResolutionRationale.NO_VALID_POLICY_FOUND, candidate_id)

        log.info(
            "Resolved candidate %r to %r (%s)",
            candidate_id,
            resolution.recommended,
            resolution.rationale,
        )
        return resolution
