"""EventStore on the ``event_store`` table.

An append first compares the batch against ``max(version)`` of its stream.
A writer that passes that check but loses the race to a concurrent commit
hits ``UNIQUE(stream_id, version)`` on insert instead; both cases surface
as `VersionConflictError`, which the service layer turns into a concurrency
conflict for the caller to retry.
"""

from collections.abc import Iterable, Sequence
from typing import NoReturn

from sqlalchemy import RowMapping, Select, func, insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError

from podium.adapters.eventstore.schema import event_store
from podium.interfaces.eventstore import (
    DuplicateEventIdError,
    EventEnvelope,
    EventEnvelopeBatch,
    EventStore,
    InvalidEnvelopeError,
    StoreUnavailableError,
    VersionConflictError,
    check_since_args,
    check_stream_range,
)

# Driver messages differ between SQLite and Postgres; a violation is
# recognised when every keyword of one group appears in it.
EVENT_ID_TAKEN = ("event_id", "unique")  # pragma: no mutate
STREAM_VERSION_TAKEN = ("stream_id", "version", "unique")  # pragma: no mutate


class SqlAlchemyEventStore(EventStore):
    """EventStore bound to one connection; the caller owns the transaction."""

    def __init__(self, connection: Connection):
        self.connection = connection

    def append(
        self, events: Sequence[EventEnvelope] | EventEnvelopeBatch
    ) -> Sequence[EventEnvelope]:
        batch = EventEnvelopeBatch.coerce(events)

        expected = (self._fetch_stream_tip(batch.stream_id) or 0) + 1
        if batch.starting_version != expected:
            raise VersionConflictError(
                f"expected first version {expected}, got {batch.starting_version}"
            )

        try:
            stored = self._insert_returning(batch)
        except IntegrityError as e:
            _raise_for_integrity_error(e)
        except DataError as e:
            raise InvalidEnvelopeError(str(e)) from e
        except DBAPIError as e:
            raise StoreUnavailableError(str(e)) from e

        return [EventEnvelope(**row) for row in stored]

    def read_stream(
        self, stream_id: str, from_version: int = 1, to_version: int | None = None
    ) -> Iterable[EventEnvelope]:
        check_stream_range(from_version, to_version)

        stmt: Select = select(event_store).where(
            event_store.c.stream_id == stream_id, event_store.c.version >= from_version
        )
        if to_version is not None:
            stmt = stmt.where(event_store.c.version <= to_version)

        yield from self._envelopes(stmt.order_by(event_store.c.version))

    def read_since(
        self, global_seq: int = 0, limit: int | None = None
    ) -> Iterable[EventEnvelope]:
        check_since_args(global_seq, limit)

        stmt: Select = (
            select(event_store)
            .where(event_store.c.global_seq > global_seq)
            .order_by(event_store.c.global_seq)
            .limit(limit)
        )
        yield from self._envelopes(stmt)

    def _envelopes(self, stmt: Select) -> list[EventEnvelope]:
        return [EventEnvelope(**row) for row in self.connection.execute(stmt).mappings()]

    def _fetch_stream_tip(self, stream_id: str) -> int | None:
        """Highest stored version of `stream_id`; None for a new stream."""
        return self.connection.execute(
            select(func.max(event_store.c.version)).where(
                event_store.c.stream_id == stream_id
            )
        ).scalar_one_or_none()

    def _insert_returning(self, batch: EventEnvelopeBatch) -> Sequence[RowMapping]:
        """Insert the batch in one statement; rows come back in input order."""
        stmt = (
            insert(event_store)
            .values([event.as_insertable_row() for event in batch.events])
            .returning(event_store)
        )
        return self.connection.execute(stmt).mappings().all()


def _raise_for_integrity_error(error: IntegrityError) -> NoReturn:
    """Re-raise `error` as the event store error its constraint stands for."""
    msg = str(error.orig) if error.orig else str(error)
    lowered = msg.lower()

    if all(word in lowered for word in EVENT_ID_TAKEN):
        raise DuplicateEventIdError(msg) from error
    if all(word in lowered for word in STREAM_VERSION_TAKEN):
        raise VersionConflictError(msg) from error
    raise InvalidEnvelopeError(msg) from error
