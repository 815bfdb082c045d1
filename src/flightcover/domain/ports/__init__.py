"""Domain port definitions for adapters."""

from __future__ import annotations

from .cache import CacheSlot
from .flights import FlightInfo, FlightLookup
from .ledger import LedgerReader
from .transactions import (
    AddFundsArgs,
    ClaimOutcome,
    CleanupCorruptedArgs,
    CreatePolicyArgs,
    ExecutionResult,
    LedgerOperation,
    OperationName,
    ProcessClaimArgs,
    TransactionExecutor,
)

__all__ = [
    "AddFundsArgs",
    "CacheSlot",
    "ClaimOutcome",
    "CleanupCorruptedArgs",
    "CreatePolicyArgs",
    "ExecutionResult",
    "FlightInfo",
    "FlightLookup",
    "LedgerOperation",
    "LedgerReader",
    "OperationName",
    "ProcessClaimArgs",
    "TransactionExecutor",
]
