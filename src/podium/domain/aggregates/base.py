"""Event-sourced aggregate root shared by speakers, contracts and event pricing.

State changes are never assigned directly: a command method builds a
`DomainEvent`, passes it to `_enqueue`, and the subclass's `_apply` folds it
into state. The same `_apply` rebuilds the aggregate from its stored stream,
so live and replayed state cannot drift apart.
"""

import abc
from collections.abc import Sequence
from typing import ClassVar, TypeVar

from podium.domain.errors import AggregateIdMismatchError
from podium.domain.events import DomainEvent

A = TypeVar("A", bound="Aggregate")


class Aggregate(abc.ABC):
    """Root of one event stream.

    `version` counts the events already persisted; events raised since the
    last save wait in a pending queue until the repository dequeues them.
    """

    STREAM_TYPE: ClassVar[str]
    """Stream label written next to every event (``"Speaker"``, ``"Contract"``, ...)."""

    def __init__(self, aggregate_id: str) -> None:
        self.aggregate_id: str = aggregate_id
        self._version: int = 0
        self._pending_events: list[DomainEvent] = []

    @classmethod
    def rehydrate(cls: type[A], aggregate_id: str, event_stream: Sequence[DomainEvent]) -> A:
        """Replay `event_stream` onto a fresh instance.

        Raises:
            AggregateIdMismatchError: An event belongs to another aggregate.
            ValueError: The subclass has no branch for an event type.
        """
        aggregate = cls(aggregate_id)
        for event in event_stream:
            aggregate._apply_checked(event)
        aggregate._version = len(event_stream)
        return aggregate

    @property
    def version(self) -> int:
        """Number of persisted events; the optimistic-concurrency fence."""
        return self._version

    @property
    def has_pending_events(self) -> bool:
        return bool(self._pending_events)

    def dequeue_uncommitted(self) -> list[DomainEvent]:
        """Hand over the pending events and start a new, empty queue."""
        pending, self._pending_events = self._pending_events, []
        return pending

    def mark_persisted(self, count: int) -> None:
        """Move the fence past `count` events the store has accepted."""
        self._version += count

    def _enqueue(self, event: DomainEvent) -> None:
        self._apply_checked(event)
        self._pending_events.append(event)

    def _apply_checked(self, event: DomainEvent) -> None:
        if event.aggregate_id != self.aggregate_id:
            raise AggregateIdMismatchError(self.aggregate_id, event.aggregate_id)
        self._apply(event)

    @abc.abstractmethod
    def _apply(self, event: DomainEvent) -> None:
        """Fold one event into state; unknown types raise `ValueError`."""
