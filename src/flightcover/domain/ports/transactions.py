"""Port for submitting ledger-mutating operations.

Operations are named and carry typed arguments; how a wallet turns them into a
signed transaction is the adapter's business.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flightcover.domain.model import ClaimStatus


class OperationName(StrEnum):
    CREATE_POLICY = "create_policy"
    PROCESS_CLAIM = "process_claim"
    ADD_FUNDS = "add_funds"
    CLEANUP_CORRUPTED = "cleanup_corrupted"


@dataclass(frozen=True, slots=True, kw_only=True)
class CreatePolicyArgs:
    flight_number: str
    airline: str
    departure_timestamp: int
    coverage_mist: int
    premium_mist: int


@dataclass(frozen=True, slots=True, kw_only=True)
class ProcessClaimArgs:
    policy_id: str
    delay_minutes: int


@dataclass(frozen=True, slots=True, kw_only=True)
class AddFundsArgs:
    amount_mist: int


@dataclass(frozen=True, slots=True, kw_only=True)
class CleanupCorruptedArgs:
    policy_ids: tuple[str, ...]


type OperationArgs = CreatePolicyArgs | ProcessClaimArgs | AddFundsArgs | CleanupCorruptedArgs

_ARGS_BY_OPERATION: dict[OperationName, type[object]] = {
    OperationName.CREATE_POLICY: CreatePolicyArgs,
    OperationName.PROCESS_CLAIM: ProcessClaimArgs,
    OperationName.ADD_FUNDS: AddFundsArgs,
    OperationName.CLEANUP_CORRUPTED: CleanupCorruptedArgs,
}


@dataclass(frozen=True, slots=True)
class LedgerOperation:
    name: OperationName
    arguments: OperationArgs

    def __post_init__(self) -> None:
        expected = _ARGS_BY_OPERATION[self.name]
        if not isinstance(self.arguments, expected):
            raise TypeError(
                f"{self.name} expects {expected.__name__}, got {type(self.arguments).__name__}"
            )


@dataclass(frozen=True, slots=True)
class ClaimOutcome:
    status: ClaimStatus
    payout_mist: int = 0


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    digest: str
    created_policy_id: str | None = None
    claim: ClaimOutcome | None = None


@runtime_checkable
class TransactionExecutor(Protocol):
    """Sign and execute one operation; raise ``SubmissionRejectedError`` on failure."""

    async def execute(self, operation: LedgerOperation) -> ExecutionResult: ...
