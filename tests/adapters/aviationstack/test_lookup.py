from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import httpx
import pytest

from flightcover.adapters.aviationstack import AviationStackLookup
from flightcover.adapters.http_resilience import ResilientClient
from flightcover.config.aviationstack import AviationStackConfig
from flightcover.config.http_resilience import ResilienceConfig
from flightcover.domain.ports import FlightInfo

from tests.helpers.http import Handler, make_client_factory

CONFIG = AviationStackConfig(
    api_key="secret",
    resilience=ResilienceConfig(
        name="aviationstack-test", base_url="http://api.aviationstack.com/v1", cache=None
    ),
)

FLIGHT = {
    "flight_date": "2025-05-01",
    "flight_status": "scheduled",
    "departure": {
        "airport": "John F Kennedy International",
        "iata": "JFK",
        "scheduled": "2025-05-01T10:00:00+00:00",
        "delay": 45,
    },
    "arrival": {"airport": "Heathrow", "iata": "LHR", "scheduled": None, "delay": None},
    "airline": {"name": "American Airlines", "iata": "AA"},
    "flight": {"number": "100", "iata": "AA100", "icao": "AAL100"},
}


def _lookup(handler: Handler) -> AviationStackLookup:
    return AviationStackLookup(config=CONFIG, client_factory=make_client_factory(handler))


def _lookup_once(handler: Handler, flight_iata: str) -> FlightInfo | None:
    async def run() -> FlightInfo | None:
        async with _lookup(handler) as lookup:
            return await lookup(flight_iata)

    return asyncio.run(run())


def test_lookup_returns_first_match() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"pagination": {"total": 2}, "data": [FLIGHT, {}]})

    info = _lookup_once(handler, " aa100 ")

    assert info is not None
    assert info.flight_number == "AA100"
    assert info.airline == "American Airlines"
    assert info.departure_airport == "John F Kennedy International"
    assert info.arrival_airport == "Heathrow"
    assert info.scheduled_departure == datetime(2025, 5, 1, 10, 0, tzinfo=UTC)
    assert info.departure_delay_minutes == 45
    assert info.status == "scheduled"
    assert seen[0].url.path == "/v1/flights"
    assert seen[0].url.params["flight_iata"] == "AA100"
    assert seen[0].url.params["access_key"] == "secret"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"data": []}),
        httpx.Response(200, json={"error": {"code": "invalid_access_key", "message": "bad key"}}),
        httpx.Response(200, text="not json"),
        httpx.Response(500, text="boom"),
    ],
)
def test_lookup_failures_yield_none(response: httpx.Response) -> None:
    assert _lookup_once(lambda _request: response, "AA100") is None


def test_blank_code_is_not_looked_up() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _lookup_once(handler, "   ") is None


def test_lookups_share_one_client_until_closed() -> None:
    created: list[ResilientClient] = []
    factory = make_client_factory(lambda _request: httpx.Response(200, json={"data": [FLIGHT]}))

    def counting_factory(resilience: ResilienceConfig) -> ResilientClient:
        client = factory(resilience)
        created.append(client)
        return client

    lookup = AviationStackLookup(config=CONFIG, client_factory=counting_factory)

    async def run() -> None:
        async with lookup:
            assert await lookup("AA100") is not None
            assert await lookup("AA100") is not None
            assert await lookup("BA7") is not None
        assert await lookup("AA100") is not None
        await lookup.aclose()

    asyncio.run(run())

    assert len(created) == 2
