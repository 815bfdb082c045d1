"""Read-only port onto the authoritative ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flightcover.domain.model import LedgerObject, PoolSnapshot


@runtime_checkable
class LedgerReader(Protocol):
    """Query objects and the insurance pool. Implementations never mutate the ledger.

    A missing object is reported as ``LedgerObject(exists=False)``; only transport
    or protocol problems raise, as ``LedgerError`` subclasses.
    """

    async def get_object(self, object_id: str) -> LedgerObject: ...

    async def get_pool(self, pool_id: str) -> PoolSnapshot: ...
