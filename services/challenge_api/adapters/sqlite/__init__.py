# services/challenge_api/adapters/sqlite/__init__.py
from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    event,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

RSVP_COUNTER = "rsvp"

# ---- Engine (SQLite) with WAL & pragmas -------------------------------------

def _ensure_dir(path: str):
    d = os.path.dirname(path)
    if d and not os.path.isdir(d):
        os.makedirs(d, exist_ok=True)

def make_engine(db_url: str) -> Engine:
    # Create data dir if sqlite file
    if db_url.startswith("sqlite:///"):
        file_path = db_url.replace("sqlite:///", "", 1)
        _ensure_dir(file_path)

    engine = create_engine(db_url, future=True, pool_pre_ping=True)

    # Apply pragmas per-connection
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # type: ignore
        if isinstance(dbapi_connection, sqlite3.Connection):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA synchronous=NORMAL;")
            cursor.close()

    return engine

# ---- Schema via SQLAlchemy Core ---------------------------------------------

def _utcnow() -> datetime:
    # naive UTC, the column has no timezone
    return datetime.now(timezone.utc).replace(tzinfo=None)


metadata = MetaData()

counters = Table(
    "counters",
    metadata,
    Column("name", String, primary_key=True),
    Column("value", Integer, nullable=False, default=0),
    Column("updated_at", DateTime, nullable=False, default=_utcnow),
)

# ---- Adapter implementation --------------------------------------------------

@dataclass(frozen=True)
class SqliteCounter:
    """
    One row in the `counters` table. Increments are a single
    `UPDATE ... SET value = value + 1`, so they do not lose updates.
    """
    engine: Engine
    name: str = RSVP_COUNTER

    @classmethod
    def from_url(cls, db_url: str = "sqlite:///data/challenge.db", name: str = RSVP_COUNTER) -> "SqliteCounter":
        eng = make_engine(db_url)
        metadata.create_all(eng)
        counter = cls(engine=eng, name=name)
        counter._ensure_row()
        return counter

    def _ensure_row(self) -> None:
        with self.engine.begin() as conn:
            existing = conn.execute(select(counters.c.name).where(counters.c.name == self.name)).first()
            if existing:
                return
            try:
                conn.execute(
                    insert(counters).values(name=self.name, value=0, updated_at=_utcnow())
                )
            except IntegrityError:
                # another worker created it first
                pass

    def get(self) -> int:
        with self.engine.begin() as conn:
            value = conn.execute(
                select(counters.c.value).where(counters.c.name == self.name)
            ).scalar()
        return int(value or 0)

    def increment(self) -> int:
        with self.engine.begin() as conn:
            conn.execute(
                update(counters)
                .where(counters.c.name == self.name)
                .values(value=counters.c.value + 1, updated_at=_utcnow())
            )
            value = conn.execute(
                select(counters.c.value).where(counters.c.name == self.name)
            ).scalar()
        return int(value or 0)

    def reset(self) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                update(counters)
                .where(counters.c.name == self.name)
                .values(value=0, updated_at=_utcnow())
            )

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()

    def dispose(self) -> None:
        self.engine.dispose()
