"""AviationStack ``/flights`` response schemas (only the fields we read)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AviationStackModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ApiError(AviationStackModel):
    code: str | int | None = None
    message: str = ""


class Endpoint(AviationStackModel):
    airport: str | None = None
    iata: str | None = None
    scheduled: datetime | None = None
    delay: int | None = None


class Airline(AviationStackModel):
    name: str | None = None
    iata: str | None = None


class FlightCode(AviationStackModel):
    number: str | None = None
    iata: str | None = None


class FlightEntry(AviationStackModel):
    flight_status: str | None = None
    departure: Endpoint | None = None
    arrival: Endpoint | None = None
    airline: Airline | None = None
    flight: FlightCode | None = None


class FlightsResponse(AviationStackModel):
    data: list[FlightEntry] | None = None
    error: ApiError | None = None
