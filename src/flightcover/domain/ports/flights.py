"""Port for the optional flight-schedule lookup used to prefill policy forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class FlightInfo:
    flight_number: str
    flight_iata: str | None
    airline: str
    departure_airport: str | None = None
    arrival_airport: str | None = None
    scheduled_departure: datetime | None = None
    departure_delay_minutes: int | None = None
    status: str | None = None


@runtime_checkable
class FlightLookup(Protocol):
    """Return the first flight matching an IATA flight code, or ``None``."""

    async def __call__(self, flight_iata: str) -> FlightInfo | None: ...
