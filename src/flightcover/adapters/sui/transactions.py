"""Move call descriptions handed to the wallet for signing.

Building and signing the transaction bytes is the signer's job; this module
only decides which entry function is called with which arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from flightcover.domain.ports.transactions import (
    AddFundsArgs,
    CleanupCorruptedArgs,
    CreatePolicyArgs,
    ProcessClaimArgs,
)

if TYPE_CHECKING:
    from flightcover.config.ledger import LedgerConfig
    from flightcover.domain.ports.transactions import LedgerOperation


class ArgumentKind(StrEnum):
    OBJECT = "object"
    PURE = "pure"
    # a coin of ``value`` MIST split from the gas coin
    GAS_SPLIT = "gas_split"


@dataclass(frozen=True, slots=True)
class CallArgument:
    kind: ArgumentKind
    value: object
    type_tag: str | None = None


@dataclass(frozen=True, slots=True)
class MoveCall:
    target: str
    arguments: tuple[CallArgument, ...]


@dataclass(frozen=True, slots=True)
class SignedTransaction:
    tx_bytes: str
    signatures: tuple[str, ...]


@runtime_checkable
class TransactionSigner(Protocol):
    """Wallet collaborator: build, sign and serialise a transaction for ``call``."""

    async def sign(self, call: MoveCall) -> SignedTransaction: ...


def _pool(config: LedgerConfig) -> CallArgument:
    return CallArgument(ArgumentKind.OBJECT, config.pool_id)


def _u64(value: int) -> CallArgument:
    return CallArgument(ArgumentKind.PURE, value, "u64")


def _bytes(value: str) -> CallArgument:
    return CallArgument(ArgumentKind.PURE, list(value.encode("utf-8")), "vector<u8>")


def build_move_call(operation: LedgerOperation, config: LedgerConfig) -> MoveCall:
    target = config.move_target(operation.name.value)
    match operation.arguments:
        case CreatePolicyArgs() as args:
            arguments = (
                _pool(config),
                _bytes(args.flight_number),
                _bytes(args.airline),
                _u64(args.departure_timestamp),
                _u64(args.coverage_mist),
                CallArgument(ArgumentKind.GAS_SPLIT, args.premium_mist),
            )
        case ProcessClaimArgs() as args:
            arguments = (
                _pool(config),
                CallArgument(ArgumentKind.PURE, args.policy_id, "0x2::object::ID"),
                _u64(args.delay_minutes),
            )
        case AddFundsArgs() as args:
            arguments = (_pool(config), CallArgument(ArgumentKind.GAS_SPLIT, args.amount_mist))
        case CleanupCorruptedArgs() as args:
            arguments = (
                _pool(config),
                CallArgument(ArgumentKind.PURE, list(args.policy_ids), "vector<0x2::object::ID>"),
            )
    return MoveCall(target=target, arguments=arguments)
