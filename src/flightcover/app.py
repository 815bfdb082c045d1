"""Application orchestration entry points.

Each function wires the configured default adapters (SQLite cache slot, Sui
JSON-RPC reader) unless collaborators are injected, and drives the async domain
services with ``asyncio.run``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from logging import getLogger
from typing import TYPE_CHECKING

from flightcover.adapters.aviationstack import AviationStackLookup
from flightcover.adapters.sqlalchemy import SqlAlchemyCacheSlot, is_started, startup
from flightcover.adapters.sui import SuiLedgerReader, SuiTransactionExecutor
from flightcover.config import (
    MissingConfigurationError,
    get_aviationstack_config,
    get_ledger_config,
    get_storage_config,
)
from flightcover.domain.model import utcnow
from flightcover.domain.policy_sync import PolicySyncService
from flightcover.domain.reconciliation import ExistenceVerifier
from flightcover.domain.record_store import RecordStore
from flightcover.domain.submission import ActionSubmitter

if TYPE_CHECKING:
    from datetime import datetime

    from flightcover.adapters.sui import TransactionSigner
    from flightcover.config import LedgerConfig
    from flightcover.domain.model import PolicyRecord, PoolSnapshot
    from flightcover.domain.policy_sync import ClaimReceipt, PolicyDraft, ReconciliationReport
    from flightcover.domain.ports import (
        CacheSlot,
        FlightInfo,
        FlightLookup,
        LedgerReader,
        TransactionExecutor,
    )
    from flightcover.domain.reconciliation import Resolution

log = getLogger(__name__)


def default_cache_slot() -> CacheSlot:
    """Return the SQLite-backed slot holding the policy cache."""

    if not is_started():
        startup()
    return SqlAlchemyCacheSlot(get_storage_config().policy_slot)


def build_policy_sync_service(
    *,
    ledger_config: LedgerConfig | None = None,
    slot: CacheSlot | None = None,
    reader: LedgerReader | None = None,
    executor: TransactionExecutor | None = None,
    signer: TransactionSigner | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> PolicySyncService:
    """Compose the policy service from injected or configured adapters.

    Without an ``executor`` or ``signer`` the service is read-only: creation,
    claims, funding and cleanup raise ``SubmissionError``.
    """

    config = ledger_config or get_ledger_config()
    effective_reader = reader or SuiLedgerReader(config=config)
    if executor is None and signer is not None:
        executor = SuiTransactionExecutor(config=config, signer=signer)

    verifier = ExistenceVerifier(
        effective_reader,
        policy_type=config.policy_type_name,
        max_concurrency=config.verify_concurrency,
    )
    return PolicySyncService(
        store=RecordStore(slot or default_cache_slot(), clock=clock),
        reader=effective_reader,
        verifier=verifier,
        pool_id=config.pool_id,
        submitter=ActionSubmitter(executor) if executor is not None else None,
        clock=clock,
    )


def reconcile_policies(
    *,
    apply: bool = True,
    submit_cleanup: bool = False,
    service: PolicySyncService | None = None,
    signer: TransactionSigner | None = None,
) -> ReconciliationReport:
    """Run one reconciliation pass between the policy cache and the pool."""

    effective = service or build_policy_sync_service(signer=signer)
    log.info("Starting reconciliation: apply=%s, submit_cleanup=%s", apply, submit_cleanup)
    report = asyncio.run(effective.run_pass(apply=apply, submit_cleanup=submit_cleanup))
    counts = ", ".join(
        f"{label}={total}" for label, total in report.plan.counts().items() if total
    )
    log.info(
        f"Finished reconciliation: applied={report.applied}, to_add={len(report.plan.to_add)}, "
        f"to_remove={len(report.plan.to_remove)}, "
        f"corrupted={len(report.plan.corrupted_for_cleanup)}, classes=[{counts}]"
    )
    return report


def resolve_policy_id(
    candidate: str | None = None,
    *,
    service: PolicySyncService | None = None,
) -> Resolution:
    effective = service or build_policy_sync_service()
    return asyncio.run(effective.resolve_claim_target(candidate))


def list_policies(*, slot: CacheSlot | None = None) -> list[PolicyRecord]:
    return RecordStore(slot or default_cache_slot()).load()


def pool_status(*, service: PolicySyncService | None = None) -> PoolSnapshot:
    effective = service or build_policy_sync_service()
    return asyncio.run(effective.pool_status())


def create_policy(
    draft: PolicyDraft,
    *,
    service: PolicySyncService | None = None,
    signer: TransactionSigner | None = None,
) -> PolicyRecord | None:
    effective = service or build_policy_sync_service(signer=signer)
    return asyncio.run(effective.create_policy(draft))


def process_claim(
    candidate: str | None,
    delay_minutes: int,
    *,
    accept_recommendation: bool = False,
    service: PolicySyncService | None = None,
    signer: TransactionSigner | None = None,
) -> ClaimReceipt:
    effective = service or build_policy_sync_service(signer=signer)
    return asyncio.run(
        effective.submit_claim(
            candidate, delay_minutes, accept_recommendation=accept_recommendation
        )
    )


def add_funds(
    amount: str,
    *,
    service: PolicySyncService | None = None,
    signer: TransactionSigner | None = None,
) -> str:
    effective = service or build_policy_sync_service(signer=signer)
    return asyncio.run(effective.add_funds(amount))


def lookup_flight(flight_iata: str, *, lookup: FlightLookup | None = None) -> FlightInfo | None:
    """Prefill data for a flight; ``None`` whenever the lookup is unavailable."""

    if lookup is None:
        try:
            lookup = AviationStackLookup(config=get_aviationstack_config())
        except MissingConfigurationError as exc:
            log.warning("Flight lookup disabled: %s", exc)
            return None
    return asyncio.run(_lookup_in_session(lookup, flight_iata))


async def _lookup_in_session(lookup: FlightLookup, flight_iata: str) -> FlightInfo | None:
    if isinstance(lookup, AbstractAsyncContextManager):
        async with lookup:
            return await lookup(flight_iata)
    return await lookup(flight_iata)
