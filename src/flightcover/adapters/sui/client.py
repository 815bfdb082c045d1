"""Minimal Sui JSON-RPC client on top of the resilient HTTP client."""

from __future__ import annotations

import itertools
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from flightcover.adapters.http_resilience import ResilientClient
from flightcover.domain.errors import LedgerResponseError, TransportFailureError

from .schema import RpcEnvelope

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

    from flightcover.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


def _is_transient_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class SuiRpcClient:
    """Issue JSON-RPC calls against a Sui fullnode.

    Used as an async context manager it keeps one HTTP client open for every
    call in the block; otherwise each call opens and closes its own. Blocks may
    nest: the client closes when the outermost one exits.
    """

    def __init__(
        self,
        *,
        url: str,
        resilience: ResilienceConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._url = url
        self._resilience = resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None
        self._sessions = 0
        self._request_ids = itertools.count(1)

    async def __aenter__(self) -> SuiRpcClient:
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        self._sessions += 1
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._sessions -= 1
        if self._sessions == 0 and self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    async def call(self, method: str, params: Sequence[object]) -> object:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": list(params),
        }
        if self._client is not None:
            response = await self._post(self._client, method, payload)
        else:
            async with self._client_factory(self._resilience) as client:
                response = await self._post(client, method, payload)

        try:
            envelope = RpcEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise LedgerResponseError(f"{method}: unexpected response payload") from exc
        if envelope.error is not None:
            log.error(
                "Sui RPC error %s in %s: %s", envelope.error.code, method, envelope.error.message
            )
            raise LedgerResponseError(envelope.error.message, code=envelope.error.code)
        return envelope.result

    async def _post(
        self,
        client: ResilientClient,
        method: str,
        payload: dict[str, object],
    ) -> httpx.Response:
        try:
            response = await client.post_json(self._url, payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if _is_transient_status(status_code):
                raise TransportFailureError(
                    f"{method}: ledger unavailable (HTTP {status_code})"
                ) from exc
            raise LedgerResponseError(
                f"{method}: ledger refused the request (HTTP {status_code})", code=status_code
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportFailureError(f"{method}: {exc.__class__.__name__}: {exc}") from exc
        return response
