"""Application services around the policy cache and the insurance pool.

``PolicySyncService`` owns the reconciliation pass (guarded, atomic apply),
the claim path (fresh resolution right before submission), policy creation and
pool funding. Collaborators are injected; nothing here reaches for globals.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from flightcover.domain.errors import (
    ClaimNeedsConfirmationError,
    ClaimRejectedError,
    ClaimSubmissionError,
    LedgerError,
    PolicyInputError,
    ReconciliationAbortedError,
    ReconciliationInProgressError,
    SubmissionError,
)
from flightcover.domain.model import (
    CLAIM_DELAY_THRESHOLD_MINUTES,
    ClaimStatus,
    PolicyRecord,
    PolicyStatus,
    ResolutionRationale,
    format_sui,
    isoformat,
    to_mist,
    utcnow,
)
from flightcover.domain.ports.transactions import CreatePolicyArgs
from flightcover.domain.reconciliation import (
    IdentifierResolver,
    ReconciliationPlan,
    Reconciler,
    Resolution,
    apply_plan,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from flightcover.domain.model import PoolSnapshot
    from flightcover.domain.ports.ledger import LedgerReader
    from flightcover.domain.ports.transactions import ClaimOutcome
    from flightcover.domain.reconciliation import ExistenceVerifier
    from flightcover.domain.record_store import RecordStore
    from flightcover.domain.submission import ActionSubmitter

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationReport:
    """Outcome of one pass. ``error`` is set when the pool could not be read."""

    plan: ReconciliationPlan = field(default_factory=ReconciliationPlan)
    pool: PoolSnapshot | None = None
    applied: bool = False
    cleanup_digest: str | None = None
    cleanup_error: str | None = None
    error: str | None = None


@dataclass(slots=True, kw_only=True)
class PolicyDraft:
    flight_number: str
    airline: str
    departure_time: datetime
    coverage_amount: str
    premium: str


@dataclass(slots=True)
class ClaimReceipt:
    policy_id: str
    digest: str
    resolution: Resolution
    outcome: ClaimOutcome | None
    message: str


class PolicySyncService:
    def __init__(
        self,
        *,
        store: RecordStore,
        reader: LedgerReader,
        verifier: ExistenceVerifier,
        pool_id: str,
        submitter: ActionSubmitter | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.reader = reader
        self.pool_id = pool_id
        self.submitter = submitter
        self.reconciler = Reconciler(verifier, clock=clock)
        self.resolver = IdentifierResolver(verifier)
        self._clock = clock
        self._pass_guard = asyncio.Lock()

    async def run_pass(
        self,
        *,
        apply: bool = True,
        submit_cleanup: bool = False,
        should_abort: Callable[[], bool] | None = None,
    ) -> ReconciliationReport:
        """Reconcile the cache with the pool once.

        Only one pass may run at a time. Ledger and submission failures are
        reported on the returned report; ``should_abort`` is consulted before
        each write and abandons the pass without touching the store.
        """

        if self._pass_guard.locked():
            raise ReconciliationInProgressError("A reconciliation pass is already running")
        async with self._pass_guard, self.reader_session():
            return await self._run_pass(
                apply=apply, submit_cleanup=submit_cleanup, should_abort=should_abort
            )

    @asynccontextmanager
    async def reader_session(self) -> AsyncIterator[None]:
        """Hold the reader's connection open so its reads share one rate limit."""

        if isinstance(self.reader, AbstractAsyncContextManager):
            async with self.reader:
                yield
        else:
            yield

    async def _run_pass(
        self,
        *,
        apply: bool,
        submit_cleanup: bool,
        should_abort: Callable[[], bool] | None,
    ) -> ReconciliationReport:
        try:
            pool = await self.reader.get_pool(self.pool_id)
        except LedgerError as exc:
            log.exception("Could not read pool %s; skipping reconciliation", self.pool_id)
            return ReconciliationReport(error=str(exc))

        local = self.store.load()
        plan = await self.reconciler.reconcile(local, pool)
        report = ReconciliationReport(plan=plan, pool=pool)

        if apply and plan.has_local_changes:
            _check_abort(should_abort)
            self.store.save(apply_plan(local, plan))
            report.applied = True
            log.info(
                "Applied reconciliation: added=%s, removed=%s",
                len(plan.to_add),
                len(plan.to_remove),
            )

        if submit_cleanup and plan.corrupted_for_cleanup:
            _check_abort(should_abort)
            if self.submitter is None:
                report.cleanup_error = "No transaction executor configured for cleanup"
                log.warning(report.cleanup_error)
                return report
            try:
                report.cleanup_digest = await self.submitter.submit_cleanup(
                    plan.corrupted_for_cleanup
                )
            except (SubmissionError, LedgerError) as exc:
                log.exception("Cleanup of corrupted pool entries failed")
                report.cleanup_error = str(exc)

        return report

    async def pool_status(self) -> PoolSnapshot:
        return await self.reader.get_pool(self.pool_id)

    async def resolve_claim_target(self, candidate: str | None) -> Resolution:
        async with self.reader_session():
            pool = await self.reader.get_pool(self.pool_id)
            return await self.resolver.resolve(candidate, pool)

    async def submit_claim(
        self,
        candidate: str | None,
        delay_minutes: int,
        *,
        accept_recommendation: bool = False,
    ) -> ClaimReceipt:
        """Resolve the identifier against fresh ledger state and submit the claim.

        A recommendation that differs from ``candidate`` is never submitted
        silently: pass ``accept_recommendation=True`` after showing it to the user.
        """

        if delay_minutes < 0:
            raise PolicyInputError("Delay minutes must not be negative")
        submitter = self._require_submitter()

        try:
            resolution = await self.resolve_claim_target(candidate)
        except LedgerError as exc:
            resolution = Resolution(
                "", ResolutionRationale.NO_VALID_POLICY_FOUND, (candidate or "").strip()
            )
            raise ClaimRejectedError(
                f"Could not read the insurance pool to check your policy: {exc}",
                resolution=resolution,
            ) from exc

        if not resolution.found:
            raise ClaimRejectedError(resolution.describe(), resolution=resolution)
        if resolution.substitutes_candidate and not accept_recommendation:
            raise ClaimNeedsConfirmationError(
                f"{resolution.describe()} Confirm to claim against {resolution.recommended}.",
                resolution=resolution,
            )

        policy_id = resolution.recommended
        try:
            result = await submitter.process_claim(policy_id, delay_minutes)
        except (SubmissionError, LedgerError) as exc:
            raise ClaimSubmissionError(
                f"Claim for policy {policy_id} failed: {exc}. {resolution.describe()}",
                resolution=resolution,
            ) from exc

        outcome = result.claim
        if outcome is None:
            message = "Claim processed successfully!"
        elif outcome.status is ClaimStatus.APPROVED:
            self.store.upsert_status(policy_id, PolicyStatus.CLAIMED)
            message = f"Claim approved! Payout: {format_sui(outcome.payout_mist)} SUI"
        else:
            message = (
                f"Claim rejected. Delay was {delay_minutes} minutes, but threshold is "
                f"{CLAIM_DELAY_THRESHOLD_MINUTES} minutes (24 hours)"
            )
        log.info("Claim for %s: %s", policy_id, message)
        return ClaimReceipt(
            policy_id=policy_id,
            digest=result.digest,
            resolution=resolution,
            outcome=outcome,
            message=message,
        )

    async def create_policy(self, draft: PolicyDraft) -> PolicyRecord | None:
        """Create a policy on the ledger and cache it once the creation is confirmed.

        Returns ``None`` when the ledger did not report the new identifier; the
        next reconciliation pass picks the policy up from the pool.
        """

        arguments = _validate_draft(draft)
        submitter = self._require_submitter()
        result = await submitter.create_policy(arguments)

        if result.created_policy_id is None:
            log.warning(
                "Policy creation %s did not report a policy id; it will be recovered "
                "by the next reconciliation pass",
                result.digest,
            )
            return None

        record = PolicyRecord(
            policy_id=result.created_policy_id,
            flight_number=arguments.flight_number,
            airline=arguments.airline,
            departure_time=isoformat(draft.departure_time),
            coverage_amount=draft.coverage_amount.strip(),
            premium=draft.premium.strip(),
            status=PolicyStatus.ACTIVE,
            created_at=isoformat(self._clock()),
        )
        self.store.add(record)
        log.info("Created policy %s for flight %s", record.policy_id, record.flight_number)
        return record

    async def add_funds(self, amount: str) -> str:
        amount_mist = _positive_mist(amount, field_name="Funding amount")
        result = await self._require_submitter().add_funds(amount_mist)
        return result.digest

    def _require_submitter(self) -> ActionSubmitter:
        if self.submitter is None:
            raise SubmissionError("No transaction executor configured")
        return self.submitter


def _check_abort(should_abort: Callable[[], bool] | None) -> None:
    if should_abort is not None and should_abort():
        log.info("Reconciliation pass abandoned before writing")
        raise ReconciliationAbortedError("Reconciliation pass abandoned")


def _positive_mist(amount: str, *, field_name: str) -> int:
    try:
        mist = to_mist(amount)
    except ValueError as exc:
        raise PolicyInputError(f"{field_name}: {exc}") from exc
    if mist <= 0:
        raise PolicyInputError(f"{field_name} must be greater than zero")
    return mist


def _validate_draft(draft: PolicyDraft) -> CreatePolicyArgs:
    flight_number = draft.flight_number.strip()
    airline = draft.airline.strip()
    if not flight_number or not airline:
        raise PolicyInputError("Flight number and airline are required")
    departure = draft.departure_time
    if departure.tzinfo is None:
        departure = departure.replace(tzinfo=UTC)
    return CreatePolicyArgs(
        flight_number=flight_number,
        airline=airline,
        departure_timestamp=int(departure.timestamp()),
        coverage_mist=_positive_mist(draft.coverage_amount, field_name="Coverage amount"),
        premium_mist=_positive_mist(draft.premium, field_name="Premium"),
    )
