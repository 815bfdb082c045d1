"""AviationStack flight lookup used to prefill the policy form."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from flightcover.adapters.http_resilience import ResilientClient
from flightcover.domain.ports.flights import FlightInfo

from .schema import FlightEntry, FlightsResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from flightcover.config.aviationstack import AviationStackConfig
    from flightcover.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


class AviationStackLookup:
    """Callable flight lookup; every failure is logged and reported as ``None``.

    The HTTP client, with its response cache and rate limit, is opened on the
    first lookup and kept until ``aclose`` (or the end of an ``async with``
    block), so repeated lookups share both.
    """

    def __init__(
        self,
        *,
        config: AviationStackConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> AviationStackLookup:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    async def __call__(self, flight_iata: str) -> FlightInfo | None:
        code = flight_iata.strip().upper()
        if not code:
            return None
        params = {"access_key": self._config.api_key, "flight_iata": code}
        try:
            response = await self._session().get("flights", params=params)
            response.raise_for_status()
            payload = FlightsResponse.model_validate(response.json())
        except httpx.HTTPError as exc:
            log.warning("Flight lookup for %s failed: %s", code, exc)
            return None
        except (ValueError, ValidationError):
            log.warning("Flight lookup for %s returned an unreadable payload", code)
            return None

        if payload.error is not None:
            log.warning(
                "AviationStack rejected lookup for %s: %s (%s)",
                code,
                payload.error.message,
                payload.error.code,
            )
            return None
        if not payload.data:
            log.info("No flight found for %s", code)
            return None
        return _to_flight_info(payload.data[0], requested=code)

    def _session(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self._client


def _to_flight_info(entry: FlightEntry, *, requested: str) -> FlightInfo:
    flight = entry.flight
    departure = entry.departure
    arrival = entry.arrival
    airline = entry.airline
    return FlightInfo(
        flight_number=(flight.iata if flight and flight.iata else requested),
        flight_iata=flight.iata if flight else None,
        airline=(airline.name if airline and airline.name else ""),
        departure_airport=departure.airport if departure else None,
        arrival_airport=arrival.airport if arrival else None,
        scheduled_departure=departure.scheduled if departure else None,
        departure_delay_minutes=departure.delay if departure else None,
        status=entry.flight_status,
    )
