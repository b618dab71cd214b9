"""StreamIndex on the ``stream_index`` table.

`reserve` never lets a duplicate key raise inside the transaction: it inserts
with ``ON CONFLICT DO NOTHING`` and, when no row was written, reads the
existing binding to tell an idempotent repeat from a clash. A failed INSERT
would abort the whole Postgres transaction, events included.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from podium.adapters.db.dialects import DialectName
from podium.adapters.eventstore.schema import stream_index
from podium.interfaces.stream_index import (
    IndexEntrySnapshot,
    NaturalKey,
    NaturalKeyAlreadyBound,
    StreamIndex,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

_UPSERT_INSERT = {DialectName.POSTGRES: pg_insert, DialectName.SQLITE: sqlite_insert}


class SqlAlchemyStreamIndex(StreamIndex):
    """StreamIndex bound to one connection; the caller owns the transaction."""

    def __init__(self, connection: Connection):
        self.connection = connection
        self.dialect = DialectName.from_sqlalchemy(connection)

    def lookup(self, natural_key: NaturalKey) -> IndexEntrySnapshot | None:
        row = self.connection.execute(
            select(stream_index.c.stream_id, stream_index.c.version).where(
                stream_index.c.kind == natural_key.kind,
                stream_index.c.key == natural_key.key,
            )
        ).first()
        if row is None:
            return None
        return IndexEntrySnapshot(natural_key, row.stream_id, int(row.version))

    def reserve(self, natural_key: NaturalKey, stream_id: str) -> None:
        insert = _UPSERT_INSERT[self.dialect]
        stmt = (
            insert(stream_index)
            .values(
                kind=natural_key.kind,
                key=natural_key.key,
                stream_id=stream_id,
                # a new key for a known stream starts at that stream's fence
                version=self._stream_version(stream_id),
            )
            .on_conflict_do_nothing()
        )
        if self.connection.execute(stmt).rowcount == 1:  # pragma: no mutate
            return

        existing = self.lookup(natural_key)
        if existing is None:  # pragma: no cover
            raise RuntimeError(f"{natural_key} neither inserted nor found")
        if existing.stream_id != stream_id:
            raise NaturalKeyAlreadyBound(natural_key, existing.stream_id)

    def update_version(self, stream_id: str, version: int) -> None:
        self.connection.execute(
            update(stream_index)
            .where(
                stream_index.c.stream_id == stream_id,
                stream_index.c.version < version,  # pragma: no mutate
            )
            .values(version=version)
        )

    def _stream_version(self, stream_id: str) -> int:
        """Highest fence across the stream's keys; 0 for an unindexed stream."""
        return int(
            self.connection.execute(
                select(func.max(stream_index.c.version)).where(
                    stream_index.c.stream_id == stream_id
                )
            ).scalar()
            or 0
        )
