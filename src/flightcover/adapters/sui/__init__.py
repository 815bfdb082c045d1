"""Public interface for the Sui ledger adapter."""

from __future__ import annotations

from .client import SuiRpcClient
from .executor import SuiTransactionExecutor
from .reader import SuiLedgerReader
from .transactions import (
    ArgumentKind,
    CallArgument,
    MoveCall,
    SignedTransaction,
    TransactionSigner,
    build_move_call,
)

__all__ = [
    "ArgumentKind",
    "CallArgument",
    "MoveCall",
    "SignedTransaction",
    "SuiLedgerReader",
    "SuiRpcClient",
    "SuiTransactionExecutor",
    "TransactionSigner",
    "build_move_call",
]
