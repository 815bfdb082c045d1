"""Ledger reader backed by ``sui_getObject``."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from flightcover.domain.errors import LedgerResponseError

from .client import SuiRpcClient
from .schema import ObjectResponse
from .translator import parse_ledger_object, parse_pool

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from flightcover.adapters.http_resilience import ResilientClient
    from flightcover.config.http_resilience import ResilienceConfig
    from flightcover.config.ledger import LedgerConfig
    from flightcover.domain.model import LedgerObject, PoolSnapshot

log = getLogger(__name__)

_OBJECT_OPTIONS = {"showType": True, "showContent": True, "showOwner": False}


class SuiLedgerReader:
    def __init__(
        self,
        *,
        config: LedgerConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._rpc = SuiRpcClient(
            url=config.rpc_url,
            resilience=config.reader_resilience,
            client_factory=client_factory,
        )

    async def __aenter__(self) -> SuiLedgerReader:
        await self._rpc.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self._rpc.__aexit__(exc_type, exc, tb)

    async def get_object(self, object_id: str) -> LedgerObject:
        response = await self._fetch_object(object_id)
        return parse_ledger_object(object_id, response)

    async def get_pool(self, pool_id: str) -> PoolSnapshot:
        response = await self._fetch_object(pool_id)
        snapshot = parse_pool(
            pool_id,
            response,
            members_field=self._config.pool_members_field,
            balance_field=self._config.pool_balance_field,
        )
        log.debug(
            "Pool %s: %s member(s), balance %s MIST",
            pool_id,
            len(snapshot.member_ids),
            snapshot.balance_mist,
        )
        return snapshot

    async def _fetch_object(self, object_id: str) -> ObjectResponse:
        result = await self._rpc.call("sui_getObject", [object_id, _OBJECT_OPTIONS])
        try:
            return ObjectResponse.model_validate(result)
        except ValidationError as exc:
            raise LedgerResponseError(f"Unexpected sui_getObject payload for {object_id}") from exc
