"""Engines for PODIUM databases.

Always build engines through `make_engine`. SQLite connections are tuned on
connect: WAL so readers do not block the writer, and a busy timeout so two
concurrent bookings queue for the write lock instead of failing at once.

SQLite transactions start with ``BEGIN IMMEDIATE``. A deferred transaction
that reads and then writes can not wait for the write lock, it fails with
"database is locked" as soon as another connection holds it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

from podium.adapters.db.dialects import DialectName

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

SQLITE_BUSY_TIMEOUT_MS = 5000

SQLITE_PRAGMAS = (
    "foreign_keys=ON",
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "temp_store=MEMORY",
    f"busy_timeout={SQLITE_BUSY_TIMEOUT_MS}",
)


def is_sqlite(url: str | URL) -> bool:
    return make_url(str(url)).get_backend_name() == DialectName.SQLITE.value


def _tune_sqlite(dbapi_conn, _record) -> None:
    # pysqlite's own BEGIN handling is off; _begin_immediate emits it
    dbapi_conn.isolation_level = None
    cursor = dbapi_conn.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(f"PRAGMA {pragma}")
    finally:
        cursor.close()


def _begin_immediate(conn: Connection) -> None:
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create an engine for `url`; ``echo=True`` logs every statement."""
    engine = create_engine(url, echo=echo)
    if is_sqlite(url):
        event.listen(engine, "connect", _tune_sqlite)
        event.listen(engine, "begin", _begin_immediate)
    return engine
