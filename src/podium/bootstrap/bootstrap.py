"""Wiring of handlers, unit of work and collaborators into a message bus."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from podium import config
from podium.adapters.clock import SystemClock
from podium.adapters.db.engine import make_engine
from podium.adapters.id_generators import ULIDGenerator
from podium.adapters.unit_of_work import (
    InMemoryStores,
    InMemoryUnitOfWork,
    SqlAlchemyUnitOfWork,
)
from podium.interfaces.unit_of_work import AbstractUnitOfWork
from podium.service_layer.handlers import COMMAND_HANDLERS
from podium.service_layer.messagebus import MessageBus

if TYPE_CHECKING:
    from podium.interfaces.clock import Clock
    from podium.interfaces.id_generator import IdGenerator
    from podium.service_layer.commands import Command

Handlers = Mapping[type["Command"], Callable[..., Any]]


@dataclass(frozen=True)
class AppContainer:
    """The bus together with the unit of work it writes through."""

    message_bus: MessageBus
    uow: AbstractUnitOfWork


def build_write_uow(url: str) -> AbstractUnitOfWork:
    return SqlAlchemyUnitOfWork(make_engine(url))


def inject_dependencies(
    handler: Callable[..., Any], dependencies: Mapping[str, object]
) -> Callable[..., Any]:
    """Bind the collaborators `handler` names in its signature.

    The result takes the command as its only argument. Collaborators the
    handler does not ask for are left out.
    """
    wanted = inspect.signature(handler).parameters
    return functools.partial(
        handler, **{name: dep for name, dep in dependencies.items() if name in wanted}
    )


def build_message_bus(  # pylint: disable=too-many-arguments
    uow: AbstractUnitOfWork,
    command_handlers: Handlers,
    *,
    event_id_generator: IdGenerator | None = None,
    aggregate_id_generator: IdGenerator | None = None,
    entity_id_generator: IdGenerator | None = None,
    clock: Clock | None = None,
) -> MessageBus:
    """A bus over `uow`; id generators default to ULIDs, the clock to UTC now."""
    collaborators = {
        "uow": uow,
        "clock": clock or SystemClock(),
        "event_id_generator": event_id_generator or ULIDGenerator(),
        "aggregate_id_generator": aggregate_id_generator or ULIDGenerator(),
        "entity_id_generator": entity_id_generator or ULIDGenerator(),
    }
    bound = {
        command_type: inject_dependencies(handler, collaborators)
        for command_type, handler in command_handlers.items()
    }
    return MessageBus(uow, command_handlers=bound)


def bootstrap(db_url: str | None = None) -> AppContainer:
    """The production container; without `db_url`, ``PODIUM_DB_URL`` is read."""
    uow = build_write_uow(db_url or config.get_db_url())
    return AppContainer(message_bus=build_message_bus(uow, COMMAND_HANDLERS), uow=uow)


def build_in_memory_bus(
    stores: InMemoryStores | None = None,
    *,
    clock: Clock | None = None,
    event_id_generator: IdGenerator | None = None,
    aggregate_id_generator: IdGenerator | None = None,
    entity_id_generator: IdGenerator | None = None,
) -> AppContainer:
    """Every handler over in-memory stores.

    Containers built on the same `stores` see each other's writes.
    """
    uow = InMemoryUnitOfWork(stores)
    bus = build_message_bus(
        uow,
        COMMAND_HANDLERS,
        event_id_generator=event_id_generator,
        aggregate_id_generator=aggregate_id_generator,
        entity_id_generator=entity_id_generator,
        clock=clock,
    )
    return AppContainer(message_bus=bus, uow=uow)
