"""
core/db.py -- Process-wide SQLAlchemy engine factory.

One Engine (and therefore one connection pool) is created by the API lifespan
or the seed command and shared by UserStore and PetStore. The owner of the
engine calls engine.dispose() on shutdown.

SQLite specifics:
  check_same_thread=False -- FastAPI runs sync route handlers on a thread
      pool, so a pooled connection may be used from a thread other than the
      one that opened it.
  PRAGMA foreign_keys=ON -- SQLite ignores REFERENCES clauses unless this is
      set on every connection. The pet_tags cascade and the category RESTRICT
      rule depend on it.
  PRAGMA journal_mode=WAL -- readers proceed while a write is in flight.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or petstore/.
"""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Apply per-connection PRAGMAs. They are not inherited from the pool."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_db_engine(db_url: str) -> Engine:
    """Create the shared Engine for db_url.

    Usage:
        engine = create_db_engine("sqlite:///petstore.db")
        engine = create_db_engine("postgresql://user:pw@host/petstore")
    """
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine
