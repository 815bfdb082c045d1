"""AviationStack flight lookup adapter."""

from __future__ import annotations

from .client import AviationStackLookup
from .schema import FlightsResponse

__all__ = ["AviationStackLookup", "FlightsResponse"]
