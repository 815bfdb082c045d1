"""Cache slot stored as one row of the ``cache_slots`` table."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import select, update

from .mappings import cache_slot_table
from .state import session_factory as default_session_factory

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class SqlAlchemyCacheSlot:
    """Each write replaces the whole payload inside a single transaction."""

    def __init__(
        self,
        name: str,
        *,
        session_factory: sessionmaker[Session] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._name = name
        self._session_factory = session_factory or default_session_factory()
        self._clock = clock

    @property
    def name(self) -> str:
        return self._name

    def read(self) -> str | None:
        with self._session_factory() as session:
            return session.execute(
                select(cache_slot_table.c.payload).where(cache_slot_table.c.name == self._name)
            ).scalar_one_or_none()

    def write(self, payload: str) -> None:
        now = self._clock()
        with self._session_factory() as session, session.begin():
            result = session.execute(
                update(cache_slot_table)
                .where(cache_slot_table.c.name == self._name)
                .values(payload=payload, updated_at=now)
            )
            if result.rowcount == 0:
                session.execute(
                    cache_slot_table.insert().values(
                        name=self._name, payload=payload, updated_at=now
                    )
                )
        log.debug("Wrote %s characters to cache slot %r", len(payload), self._name)
