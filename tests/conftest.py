from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from flightcover.adapters.sqlalchemy import create_all_tables, shutdown

from tests.helpers.ledger import FakeLedgerReader, InMemoryCacheSlot

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=sqlite_engine, expire_on_commit=False)


@pytest.fixture(autouse=True)
def reset_adapter_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


@pytest.fixture
def reader() -> FakeLedgerReader:
    return FakeLedgerReader()


@pytest.fixture
def slot() -> InMemoryCacheSlot:
    return InMemoryCacheSlot()
