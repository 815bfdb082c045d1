"""SQLAlchemy table metadata for the local policy cache."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, Dialect, MetaData, String, Table, Text, TypeDecorator

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

cache_slot_table = Table(
    "cache_slots",
    metadata,
    Column("name", String(64), primary_key=True),
    Column("payload", Text, nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)


def create_all_tables(engine: Engine) -> None:
    """Create the cache tables if they do not exist yet."""

    log.debug("Creating cache tables on %s", engine.url)
    metadata.create_all(engine, checkfirst=True)
