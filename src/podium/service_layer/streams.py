"""Locating, loading and saving aggregate streams.

Aggregates are addressed by natural keys (a speaker's external id, a contract
number, a payment id, an event id) that the stream index maps to stream ids.
Every write goes through `save`, which appends at the loaded version and
turns a lost race into a `ConcurrencyConflictError`. Listings that cross
streams (all contracts of a speaker, all bookings of an event) use
`read_all`, which replays the whole log.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from podium.domain.errors import AlreadyExistsError, ConcurrencyConflictError, NotFoundError
from podium.interfaces.eventstore import VersionConflictError
from podium.interfaces.stream_index import NaturalKey, NaturalKeyAlreadyBound

from .repositories import AggregateNotFoundError, EventMapper

if TYPE_CHECKING:
    from podium.domain.aggregates import Aggregate
    from podium.domain.events import DomainEvent
    from podium.interfaces.stream_index import StreamIndex
    from podium.interfaces.unit_of_work import AbstractUnitOfWork

    from .commands import Command
    from .repositories import EventSourcedRepository

A = TypeVar("A", bound="Aggregate")

SPEAKER = "Speaker"
CONTRACT = "Contract"
PAYMENT = "Payment"
EVENT_PRICING = "EventPricing"


def speaker_key(speaker_id: str) -> NaturalKey:
    """Natural key of a speaker stream."""
    return NaturalKey(kind=SPEAKER, key=speaker_id)


def contract_key(contract_number: str) -> NaturalKey:
    """Natural key of a contract stream, by contract number."""
    return NaturalKey(kind=CONTRACT, key=contract_number)


def payment_key(payment_id: str) -> NaturalKey:
    """Natural key of the contract stream that owns a payment."""
    return NaturalKey(kind=PAYMENT, key=payment_id)


def pricing_key(event_id: str) -> NaturalKey:
    """Natural key of an event's pricing stream."""
    return NaturalKey(kind=EVENT_PRICING, key=event_id)


def locate(
    stream_index: StreamIndex,
    natural_key: NaturalKey,
    not_found: Callable[[str], NotFoundError],
) -> str:
    """Return the stream id bound to `natural_key`.

    Raises:
        NotFoundError: The `not_found` error, if the key is unbound.
    """
    if (entry := stream_index.lookup(natural_key)) is None:
        raise not_found(natural_key.key)
    return entry.stream_id


def load(
    uow: AbstractUnitOfWork,
    repo: EventSourcedRepository[A],
    natural_key: NaturalKey,
    not_found: Callable[[str], NotFoundError],
) -> A:
    """Load the aggregate behind a natural key for a write."""
    stream_id = locate(uow.stream_index, natural_key, not_found)
    try:
        return repo.load(stream_id)
    except AggregateNotFoundError as e:
        raise not_found(natural_key.key) from e


def read(
    uow: AbstractUnitOfWork,
    aggregate_cls: type[A],
    natural_key: NaturalKey,
    not_found: Callable[[str], NotFoundError],
    event_mapper: EventMapper | None = None,
) -> A:
    """Rehydrate the aggregate behind a natural key for a read-only view."""
    mapper = event_mapper if event_mapper is not None else EventMapper()
    stream_id = locate(uow.stream_index, natural_key, not_found)
    if not (envelopes := list(uow.eventstore.read_stream(stream_id))):
        raise not_found(natural_key.key)
    return aggregate_cls.rehydrate(
        stream_id, [mapper.to_domain_event(envelope) for envelope in envelopes]
    )


def read_all(
    uow: AbstractUnitOfWork,
    aggregate_cls: type[A],
    event_mapper: EventMapper | None = None,
) -> list[A]:
    """Rehydrate every stream of one aggregate type in a single pass over the log.

    Aggregates come back in the order their streams were started.
    """
    mapper = event_mapper if event_mapper is not None else EventMapper()
    by_stream: dict[str, list[DomainEvent]] = {}
    for envelope in uow.eventstore.read_since():
        if envelope.stream_type == aggregate_cls.STREAM_TYPE:
            by_stream.setdefault(envelope.stream_id, []).append(
                mapper.to_domain_event(envelope)
            )
    return [aggregate_cls.rehydrate(sid, events) for sid, events in by_stream.items()]


def bind(
    uow: AbstractUnitOfWork, natural_key: NaturalKey, aggregate: Aggregate, entity: str
) -> None:
    """Point `natural_key` at the aggregate's stream.

    Raises:
        AlreadyExistsError: If the key already belongs to another stream.
    """
    try:
        uow.stream_index.reserve(natural_key, aggregate.aggregate_id)
    except NaturalKeyAlreadyBound as e:
        raise AlreadyExistsError(entity, natural_key.key) from e


def save(
    uow: AbstractUnitOfWork,
    repo: EventSourcedRepository[A],
    aggregate: A,
    cmd: Command,
    actor_id: str | None = None,
) -> int:
    """Append pending events and advance the index fence.

    Raises:
        ConcurrencyConflictError: If another writer appended to the stream
            after it was loaded.
    """
    metadata = {"command": type(cmd).__name__, "actor_id": actor_id}
    try:
        count = repo.store_events(aggregate, metadata=metadata)
    except VersionConflictError as e:
        raise ConcurrencyConflictError(aggregate.STREAM_TYPE, aggregate.aggregate_id) from e
    if count:
        uow.stream_index.update_version(aggregate.aggregate_id, aggregate.version)
    return count
