"""Event-sourced repositories: an aggregate is the fold of its stream."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from podium.domain.aggregates import Aggregate, Contract, EventPricing, Speaker
from podium.interfaces.eventstore import EventStore
from podium.interfaces.id_generator import IdGenerator

from .errors import AggregateNotFoundError
from .event_mapper import EventMapper

# pylint: disable=too-few-public-methods

T = TypeVar("T", bound=Aggregate)


class EventSourcedRepository(Generic[T]):
    """Loads and saves one aggregate type through an event store.

    Saving appends right after the version the aggregate was loaded at. If
    another writer got there first the store raises `VersionConflictError`
    and nothing from this save is kept.

    Subclasses pin `aggregate_cls`; the generic class takes it as a keyword.
    """

    aggregate_cls: type[Any]

    def __init__(
        self,
        event_store: EventStore,
        event_id_generator: IdGenerator,
        event_mapper: EventMapper | None = None,
        *,
        aggregate_cls: type[T] | None = None,
    ) -> None:
        self.event_store = event_store
        self.event_id_generator = event_id_generator
        self.event_mapper = event_mapper or EventMapper()
        if aggregate_cls is not None:
            self.aggregate_cls = aggregate_cls

    def load(self, aggregate_id: str) -> T:
        """Replay the stream of `aggregate_id`.

        Raises:
            AggregateNotFoundError: The stream is empty.
        """
        envelopes = list(self.event_store.read_stream(aggregate_id))
        if not envelopes:
            raise AggregateNotFoundError(self.aggregate_cls.__name__, aggregate_id)
        return self.aggregate_cls.rehydrate(
            aggregate_id, [self.event_mapper.to_domain_event(e) for e in envelopes]
        )

    def store_events(self, aggregate: T, metadata: dict[str, Any] | None = None) -> int:
        """Append whatever `aggregate` has pending and return how many events.

        Raises:
            VersionConflictError: The stream moved on since `aggregate` was loaded.
        """
        pending = aggregate.dequeue_uncommitted()
        if not pending:
            return 0

        base = aggregate.version
        self.event_store.append(
            [
                self.event_mapper.to_envelope(
                    stream_id=aggregate.aggregate_id,
                    stream_type=aggregate.STREAM_TYPE,
                    version=base + offset,
                    event_id=self.event_id_generator.new_id(),
                    event=event,
                    metadata=metadata,
                )
                for offset, event in enumerate(pending, start=1)
            ]
        )
        aggregate.mark_persisted(len(pending))
        return len(pending)


class SpeakerRepository(EventSourcedRepository[Speaker]):
    aggregate_cls = Speaker


class ContractRepository(EventSourcedRepository[Contract]):
    aggregate_cls = Contract


class EventPricingRepository(EventSourcedRepository[EventPricing]):
    aggregate_cls = EventPricing
