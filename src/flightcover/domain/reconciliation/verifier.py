"""Existence checks for policy identifiers.

A check answers one question: does this identifier denote a live object of the
policy type? Every failure (not found, wrong type, exhausted transport retries,
an error payload from the node) folds into ``False`` for callers that only want
a boolean, while ``check`` keeps the distinction for diagnostics.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from flightcover.domain.errors import (
    LedgerError,
    MalformedIdentifierError,
    ObjectNotFoundError,
    TransportFailureError,
    TypeMismatchError,
)
from flightcover.domain.model import VerificationOutcome, is_well_formed_policy_id

if TYPE_CHECKING:
    from collections.abc import Iterable

    from flightcover.domain.ports.ledger import LedgerReader

log = getLogger(__name__)

DEFAULT_POLICY_TYPE = "flight_insurance::Policy"


@dataclass(frozen=True, slots=True)
class VerificationResult:
    policy_id: str
    outcome: VerificationOutcome
    type_tag: str | None = None
    error: LedgerError | None = None

    @property
    def exists(self) -> bool:
        return self.outcome is VerificationOutcome.VERIFIED


class ExistenceVerifier:
    def __init__(
        self,
        reader: LedgerReader,
        *,
        policy_type: str = DEFAULT_POLICY_TYPE,
        max_concurrency: int = 8,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._reader = reader
        self._policy_type = policy_type
        self._max_concurrency = max_concurrency

    @property
    def policy_type(self) -> str:
        return self._policy_type

    async def verify(self, policy_id: str) -> bool:
        return (await self.check(policy_id)).exists

    async def check(self, policy_id: str) -> VerificationResult:
        if not is_well_formed_policy_id(policy_id):
            result = VerificationResult(
                policy_id,
                VerificationOutcome.MALFORMED_IDENTIFIER,
                error=MalformedIdentifierError(policy_id),
            )
            _log_result(result)
            return result

        try:
            obj = await self._reader.get_object(policy_id)
        except LedgerError as exc:
            result = VerificationResult(policy_id, _failure_outcome(exc), error=exc)
            _log_result(result)
            return result

        if not obj.exists:
            result = VerificationResult(
                policy_id,
                VerificationOutcome.NOT_FOUND,
                error=ObjectNotFoundError(policy_id, code=obj.missing_reason),
            )
        elif obj.type_tag is None or self._policy_type not in obj.type_tag:
            result = VerificationResult(
                policy_id,
                VerificationOutcome.TYPE_MISMATCH,
                type_tag=obj.type_tag,
                error=TypeMismatchError(policy_id, expected=self._policy_type, actual=obj.type_tag),
            )
        else:
            result = VerificationResult(
                policy_id, VerificationOutcome.VERIFIED, type_tag=obj.type_tag
            )
        _log_result(result)
        return result

    async def check_many(self, policy_ids: Iterable[str]) -> dict[str, VerificationResult]:
        """Check every distinct id concurrently; returns once all results are in."""

        unique = list(dict.fromkeys(policy_ids))
        if not unique:
            return {}
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(policy_id: str) -> VerificationResult:
            async with semaphore:
                return await self.check(policy_id)

        results = await asyncio.gather(*(bounded(policy_id) for policy_id in unique))
        return {result.policy_id: result for result in results}

    async def verify_many(self, policy_ids: Iterable[str]) -> dict[str, bool]:
        results = await self.check_many(policy_ids)
        return {policy_id: result.exists for policy_id, result in results.items()}


def _failure_outcome(exc: LedgerError) -> VerificationOutcome:
    match exc:
        case TransportFailureError():
            return VerificationOutcome.TRANSPORT_FAILURE
        case ObjectNotFoundError():
            return VerificationOutcome.NOT_FOUND
        case TypeMismatchError():
            return VerificationOutcome.TYPE_MISMATCH
        case _:
            return VerificationOutcome.RESPONSE_ERROR


def _log_result(result: VerificationResult) -> None:
    match result.outcome:
        case VerificationOutcome.VERIFIED:
            log.debug("Policy %s verified (%s)", result.policy_id, result.type_tag)
        case VerificationOutcome.TRANSPORT_FAILURE:
            log.warning(
                "Could not reach the ledger for policy %s, treating as absent: %s",
                result.policy_id,
                result.error,
            )
        case VerificationOutcome.RESPONSE_ERROR:
            log.warning(
                "Ledger returned an error for policy %s, treating as absent: %s",
                result.policy_id,
                result.error,
            )
        case _:
            log.info("Policy %s failed verification: %s", result.policy_id, result.outcome)
