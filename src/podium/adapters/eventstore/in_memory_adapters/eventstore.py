"""EventStore kept in process memory.

Used by the in-memory unit of work and the handler tests. One lock covers
the tip check and the write, so threads sharing an instance race the same
way two database connections do.
"""

import threading
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from podium.interfaces.eventstore import (
    DuplicateEventIdError,
    EventEnvelope,
    EventEnvelopeBatch,
    EventStore,
    VersionConflictError,
    check_since_args,
    check_stream_range,
)


class InMemoryEventStore(EventStore):
    """Non-durable EventStore; everything is lost with the instance."""

    def __init__(self):
        self._log: list[EventEnvelope] = []
        self._streams: dict[str, list[EventEnvelope]] = {}
        self._event_ids: set[str] = set()
        self._lock = threading.Lock()

    def append(
        self, events: Sequence[EventEnvelope] | EventEnvelopeBatch
    ) -> Sequence[EventEnvelope]:
        batch = EventEnvelopeBatch.coerce(events)

        with self._lock:
            stream = self._streams.get(batch.stream_id, [])
            expected = len(stream) + 1
            if batch.starting_version != expected:
                raise VersionConflictError(
                    f"expected first version {expected}, got {batch.starting_version}"
                )
            taken = [e.event_id for e in batch.events if e.event_id in self._event_ids]
            if taken:
                raise DuplicateEventIdError(f"event_id already stored: {taken[0]}")

            now = datetime.now(timezone.utc)
            stored = [
                EventEnvelope(
                    **event.as_insertable_row()
                    | {"global_seq": len(self._log) + n, "recorded_at": now}
                )
                for n, event in enumerate(batch.events, start=1)
            ]
            self._log.extend(stored)
            self._streams.setdefault(batch.stream_id, []).extend(stored)
            self._event_ids.update(e.event_id for e in stored)
        return stored

    def read_stream(
        self, stream_id: str, from_version: int = 1, to_version: int | None = None
    ) -> Iterable[EventEnvelope]:
        check_stream_range(from_version, to_version)
        with self._lock:
            stream = list(self._streams.get(stream_id, ()))
        # versions are 1-based and gap-free, so they index the list directly
        yield from stream[from_version - 1 : to_version]

    def read_since(
        self, global_seq: int = 0, limit: int | None = None
    ) -> Iterable[EventEnvelope]:
        check_since_args(global_seq, limit)
        with self._lock:
            end = None if limit is None else global_seq + limit
            selected = self._log[global_seq:end]
        yield from selected
