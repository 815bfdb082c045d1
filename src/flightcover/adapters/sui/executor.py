"""Transaction executor backed by ``sui_executeTransactionBlock``."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from flightcover.domain.errors import LedgerResponseError, SubmissionRejectedError

from .client import SuiRpcClient
from .schema import TransactionBlockResponse
from .transactions import build_move_call
from .translator import parse_execution

if TYPE_CHECKING:
    from collections.abc import Callable

    from flightcover.adapters.http_resilience import ResilientClient
    from flightcover.config.http_resilience import ResilienceConfig
    from flightcover.config.ledger import LedgerConfig
    from flightcover.domain.ports.transactions import ExecutionResult, LedgerOperation

    from .transactions import TransactionSigner

log = getLogger(__name__)

_EXECUTE_OPTIONS = {"showEffects": True, "showEvents": True, "showObjectChanges": True}


class SuiTransactionExecutor:
    def __init__(
        self,
        *,
        config: LedgerConfig,
        signer: TransactionSigner,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._signer = signer
        self._rpc = SuiRpcClient(
            url=config.rpc_url,
            resilience=config.executor_resilience,
            client_factory=client_factory,
        )

    async def execute(self, operation: LedgerOperation) -> ExecutionResult:
        call = build_move_call(operation, self._config)
        signed = await self._signer.sign(call)
        log.debug("Executing %s", call.target)
        try:
            result = await self._rpc.call(
                "sui_executeTransactionBlock",
                [signed.tx_bytes, list(signed.signatures), _EXECUTE_OPTIONS, "WaitForLocalExecution"],
            )
        except LedgerResponseError as exc:
            raise SubmissionRejectedError(str(exc)) from exc

        try:
            response = TransactionBlockResponse.model_validate(result)
        except ValidationError as exc:
            raise LedgerResponseError("Unexpected sui_executeTransactionBlock payload") from exc
        return parse_execution(
            response,
            policy_created_event=self._config.event_type("PolicyCreated"),
            claim_processed_event=self._config.event_type("ClaimProcessed"),
        )
