"""Action submitter: the only path from the domain to ledger-mutating operations."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from flightcover.domain.ports.transactions import (
    AddFundsArgs,
    CleanupCorruptedArgs,
    CreatePolicyArgs,
    LedgerOperation,
    OperationName,
    ProcessClaimArgs,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from flightcover.domain.ports.transactions import ExecutionResult, TransactionExecutor

log = getLogger(__name__)


class ActionSubmitter:
    def __init__(self, executor: TransactionExecutor) -> None:
        self._executor = executor

    async def submit_cleanup(self, policy_ids: Iterable[str]) -> str | None:
        """Purge corrupted pool entries in one transaction; returns its digest.

        An empty set is a no-op and returns ``None`` without touching the ledger.
        """

        batch = tuple(sorted(set(policy_ids)))
        if not batch:
            return None
        log.info("Submitting cleanup of %s corrupted pool entr(y/ies)", len(batch))
        result = await self._submit(
            LedgerOperation(
                OperationName.CLEANUP_CORRUPTED, CleanupCorruptedArgs(policy_ids=batch)
            )
        )
        return result.digest

    async def create_policy(self, arguments: CreatePolicyArgs) -> ExecutionResult:
        return await self._submit(LedgerOperation(OperationName.CREATE_POLICY, arguments))

    async def process_claim(self, policy_id: str, delay_minutes: int) -> ExecutionResult:
        return await self._submit(
            LedgerOperation(
                OperationName.PROCESS_CLAIM,
                ProcessClaimArgs(policy_id=policy_id, delay_minutes=delay_minutes),
            )
        )

    async def add_funds(self, amount_mist: int) -> ExecutionResult:
        return await self._submit(
            LedgerOperation(OperationName.ADD_FUNDS, AddFundsArgs(amount_mist=amount_mist))
        )

    async def _submit(self, operation: LedgerOperation) -> ExecutionResult:
        result = await self._executor.execute(operation)
        log.info("%s executed in transaction %s", operation.name, result.digest)
        return result
