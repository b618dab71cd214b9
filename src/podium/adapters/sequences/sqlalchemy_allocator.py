"""SQLAlchemy-backed SequenceAllocator.

Allocation is a compare-and-set loop on the ``document_sequences`` row:

1. insert the ``(name, period)`` row with ``last_value = 0`` unless it exists;
2. read ``last_value``;
3. ``UPDATE ... SET last_value = n + 1 WHERE last_value = n``.

If another writer moved the counter between steps 2 and 3 the update touches
no row and the loop retries. On Postgres the update blocks on the other
writer's row lock, so the loser sees the committed value on its next read.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from podium.adapters.db.dialects import DialectName
from podium.interfaces.sequences import SequenceAllocator, SequenceContentionError

from .schema import document_sequences

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection
    from sqlalchemy.sql.dml import Insert

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10


class SqlAlchemySequenceAllocator(SequenceAllocator):
    """Per-period counters stored in the ``document_sequences`` table."""

    def __init__(self, connection: Connection, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.connection = connection
        self.max_attempts = max_attempts

    def next_value(self, name: str, period: int) -> int:
        self.connection.execute(self._build_ensure_row(name, period))

        for attempt in range(1, self.max_attempts + 1):
            current = self.connection.execute(
                select(document_sequences.c.last_value).where(
                    document_sequences.c.name == name,
                    document_sequences.c.period == period,
                )
            ).scalar_one()

            claimed = self.connection.execute(
                update(document_sequences)
                .where(
                    document_sequences.c.name == name,
                    document_sequences.c.period == period,
                    document_sequences.c.last_value == current,
                )
                .values(last_value=current + 1)
            )
            if claimed.rowcount == 1:
                return current + 1

            logger.debug(
                "Sequence %s/%s moved past %s; retrying (attempt %d of %d)",
                name,
                period,
                current,
                attempt,
                self.max_attempts,
            )

        raise SequenceContentionError(name, period, self.max_attempts)

    def _build_ensure_row(self, name: str, period: int) -> Insert:
        values = {"name": name, "period": period, "last_value": 0}
        if DialectName.from_sqlalchemy(self.connection) is DialectName.POSTGRES:
            return (
                pg_insert(document_sequences).values(**values).on_conflict_do_nothing()
            )
        return (
            sqlite_insert(document_sequences).values(**values).on_conflict_do_nothing()
        )
