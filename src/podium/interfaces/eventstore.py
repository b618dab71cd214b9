"""The event store port: envelopes, batches and the append/read contract.

Every aggregate in PODIUM (speakers with their blocks and bookings,
contracts with their payments, event pricing) lives in exactly one stream.
A save appends one `EventEnvelopeBatch` to that stream, and the batch must
start right after the stream's current tip. That single rule is what keeps
two concurrent try-book calls from both committing.

Append guarantees
-----------------
- One stream per batch, all or nothing.
- The store assigns ``global_seq`` and stamps ``recorded_at`` in UTC.
- The returned envelopes come back in the order given.

Errors
------
``InvalidEnvelopeError``
    The envelope or batch is malformed; the caller has a bug.
``VersionConflictError``
    Another writer appended first, detected either by the tip check or by
    the ``(stream_id, version)`` unique constraint.
``DuplicateEventIdError``
    An ``event_id`` already exists anywhere in the store.
``StoreUnavailableError``
    The database could not be reached or timed out; retrying may help.

Reads
-----
``read_stream`` walks one stream by version (bounds inclusive) and
``read_since`` walks the whole store by ``global_seq``. Both yield nothing
for an empty range and raise `ValueError` for an impossible one.
"""

import abc
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

ULID_LENGTH = 26


class EventStoreError(Exception):
    """Base class for event store failures."""


class VersionConflictError(EventStoreError):
    """The stream's tip is not where the writer expected it."""


class DuplicateEventIdError(EventStoreError):
    """An event with the same event_id is already stored."""


class InvalidEnvelopeError(EventStoreError):
    """An envelope or batch breaks its construction rules."""


class StoreUnavailableError(EventStoreError):
    """Connection or timeout trouble; the append may be retried."""


def _blank(value: str) -> bool:
    return not value.strip()


@dataclass(frozen=True, slots=True)
class EventEnvelope:
    """One stored event, as the store sees it.

    ``payload`` is the event body as JSON-friendly primitives; ``metadata``
    records who asked for the change (command name, actor id). ``global_seq``
    and ``recorded_at`` are filled in by the store.
    """

    # pylint: disable=too-many-instance-attributes

    stream_id: str
    stream_type: str
    version: int
    event_id: str
    event_type: str
    payload: dict[str, Any]
    metadata: dict[str, Any] | None = None
    recorded_at: datetime | None = None
    global_seq: int | None = None

    def __post_init__(self) -> None:
        if len(self.event_id) != ULID_LENGTH:
            raise InvalidEnvelopeError(f"event_id must be {ULID_LENGTH} characters long.")
        if self.version < 1:
            raise InvalidEnvelopeError("version starts at 1.")
        if self.global_seq is not None and self.global_seq < 1:
            raise InvalidEnvelopeError("global_seq starts at 1.")
        if _blank(self.stream_id) or _blank(self.stream_type) or _blank(self.event_type):
            raise InvalidEnvelopeError("stream_id, stream_type and event_type are required.")
        if self.recorded_at is not None:
            offset = self.recorded_at.utcoffset()
            if offset is None:
                raise InvalidEnvelopeError("recorded_at has no timezone.")
            if offset != timedelta(0):
                raise InvalidEnvelopeError("recorded_at is not in UTC.")

    def as_insertable_row(self) -> dict[str, Any]:
        """Column values for a new ``event_store`` row.

        ``global_seq`` is always left to the store, ``recorded_at`` unless the
        caller pinned it.
        """
        row: dict[str, Any] = {
            "stream_id": self.stream_id,
            "stream_type": self.stream_type,
            "version": self.version,
            "event_id": self.event_id,
            "event_type": self.event_type,
            "payload": self.payload,
            "metadata": self.metadata,
        }
        if self.recorded_at is not None:
            row["recorded_at"] = self.recorded_at
        return row


@dataclass(frozen=True, slots=True)
class EventEnvelopeBatch:
    """Unsaved events for one stream, in version order with no gaps."""

    stream_id: str
    stream_type: str
    events: Sequence[EventEnvelope]

    def __post_init__(self) -> None:
        if not self.events:
            raise InvalidEnvelopeError("A batch needs at least one event.")
        if any(
            (e.stream_id, e.stream_type) != (self.stream_id, self.stream_type)
            for e in self.events
        ):
            raise InvalidEnvelopeError("A batch may only target one stream.")
        if any(e.global_seq is not None for e in self.events):
            raise InvalidEnvelopeError("global_seq is assigned by the store.")
        if len({e.event_id for e in self.events}) != len(self.events):
            raise InvalidEnvelopeError("event_id repeated within the batch.")
        first = self.events[0].version
        if [e.version for e in self.events] != list(range(first, first + len(self.events))):
            raise InvalidEnvelopeError("Batch versions must be consecutive and ascending.")

    @property
    def starting_version(self) -> int:
        return self.events[0].version

    @classmethod
    def from_events(cls, events: Sequence[EventEnvelope]) -> "EventEnvelopeBatch":
        """Batch `events`, taking the stream from the first one."""
        if not events:
            raise InvalidEnvelopeError("A batch needs at least one event.")
        head = events[0]
        return cls(stream_id=head.stream_id, stream_type=head.stream_type, events=events)

    @classmethod
    def coerce(cls, events: "EventEnvelopeBatch | Sequence[EventEnvelope]") -> "EventEnvelopeBatch":
        """`events` as a batch, validating a bare sequence on the way."""
        return events if isinstance(events, cls) else cls.from_events(events)


def check_stream_range(from_version: int, to_version: int | None) -> None:
    """Raise `ValueError` unless the bounds describe a possible version range."""
    if from_version < 1:
        raise ValueError("from_version must be >= 1")
    if to_version is not None and to_version < from_version:
        raise ValueError("to_version must be >= from_version")


def check_since_args(global_seq: int, limit: int | None) -> None:
    """Raise `ValueError` for a negative cursor or a non-positive limit."""
    if global_seq < 0:
        raise ValueError("global_seq must be >= 0")
    if limit is not None and limit < 1:
        raise ValueError("limit must be >= 1")


class EventStore(abc.ABC):
    """Append-only storage for event streams."""

    @abc.abstractmethod
    def append(
        self, events: EventEnvelopeBatch | Sequence[EventEnvelope]
    ) -> Sequence[EventEnvelope]:
        """Store one stream's new events atomically.

        Returns:
            The stored envelopes, with ``global_seq`` and ``recorded_at`` set.

        Raises:
            InvalidEnvelopeError: The batch breaks its construction rules.
            VersionConflictError: The batch does not start at tip + 1.
            DuplicateEventIdError: An event_id is already taken.
            StoreUnavailableError: The backend could not be reached.
        """

    @abc.abstractmethod
    def read_stream(
        self, stream_id: str, from_version: int = 1, to_version: int | None = None
    ) -> Iterable[EventEnvelope]:
        """Events of `stream_id` between the two versions, inclusive.

        Raises:
            ValueError: ``from_version < 1`` or ``to_version < from_version``.
        """

    @abc.abstractmethod
    def read_since(
        self, global_seq: int = 0, limit: int | None = None
    ) -> Iterable[EventEnvelope]:
        """Events of every stream after `global_seq`, oldest first.

        Raises:
            ValueError: ``global_seq < 0`` or ``limit < 1``.
        """
