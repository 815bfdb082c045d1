"""Port for the single persisted slot holding the policy cache."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheSlot(Protocol):
    """A named slot holding one serialized payload; each write replaces it atomically."""

    @property
    def name(self) -> str: ...

    def read(self) -> str | None: ...

    def write(self, payload: str) -> None: ...
