"""SQLAlchemy adapter package for the local policy cache."""

from __future__ import annotations

from .cache_slot import SqlAlchemyCacheSlot
from .mappings import cache_slot_table, create_all_tables, metadata
from .state import StartupError, configured_engine, is_started, shutdown, startup

__all__ = [
    "SqlAlchemyCacheSlot",
    "StartupError",
    "cache_slot_table",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
