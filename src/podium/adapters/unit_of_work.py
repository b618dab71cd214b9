"""Unit of Work implementations for PODIUM.

- `SqlAlchemyUnitOfWork` opens one connection per `with` block; the event
  store, stream index and sequence allocator all share its transaction.
  The open transaction lives in a context variable, so one instance can
  serve every thread of a process: each thread's block has its own
  connection.
- `InMemoryUnitOfWork` shares thread-safe in-memory stores between every
  unit built from the same `InMemoryStores`. Writes are visible immediately;
  commit and rollback only record what happened.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from podium.adapters.eventstore.in_memory_adapters import (
    InMemoryEventStore,
    InMemoryStreamIndex,
)
from podium.adapters.eventstore.sqlalchemy_adapters import (
    SqlAlchemyEventStore,
    SqlAlchemyStreamIndex,
)
from podium.adapters.sequences import (
    InMemorySequenceAllocator,
    SqlAlchemySequenceAllocator,
)
from podium.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class UnitOfWorkNotStartedError(RuntimeError):
    """A store was requested outside a ``with uow:`` block."""


@dataclass(frozen=True)
class _OpenTransaction:
    connection: Connection
    eventstore: SqlAlchemyEventStore
    stream_index: SqlAlchemyStreamIndex
    sequences: SqlAlchemySequenceAllocator

    @classmethod
    def begin(cls, engine: Engine) -> _OpenTransaction:
        connection = engine.connect()
        return cls(
            connection=connection,
            eventstore=SqlAlchemyEventStore(connection),
            stream_index=SqlAlchemyStreamIndex(connection),
            sequences=SqlAlchemySequenceAllocator(connection),
        )


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work, safe to share between threads."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._current: ContextVar[_OpenTransaction | None] = ContextVar(
            f"podium_uow_{id(self):x}", default=None
        )

    def _open(self) -> _OpenTransaction:
        current = self._current.get()
        if current is None:
            raise UnitOfWorkNotStartedError("unit of work used outside a with block")
        return current

    @property
    def connection(self) -> Connection:
        return self._open().connection

    @property
    def eventstore(self) -> SqlAlchemyEventStore:  # type: ignore[override]
        return self._open().eventstore

    @property
    def stream_index(self) -> SqlAlchemyStreamIndex:  # type: ignore[override]
        return self._open().stream_index

    @property
    def sequences(self) -> SqlAlchemySequenceAllocator:  # type: ignore[override]
        return self._open().sequences

    def __enter__(self):
        self._current.set(_OpenTransaction.begin(self.engine))
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self.connection.close()
            self._current.set(None)

    def commit(self):
        self.connection.commit()

    def rollback(self):
        self.connection.rollback()


@dataclass
class InMemoryStores:
    """The shared state behind in-memory units of work."""

    eventstore: InMemoryEventStore = field(default_factory=InMemoryEventStore)
    stream_index: InMemoryStreamIndex = field(default_factory=InMemoryStreamIndex)
    sequences: InMemorySequenceAllocator = field(
        default_factory=InMemorySequenceAllocator
    )


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Unit of Work over in-memory stores."""

    def __init__(self, stores: InMemoryStores | None = None):
        self.stores = stores if stores is not None else InMemoryStores()
        self.eventstore = self.stores.eventstore
        self.stream_index = self.stores.stream_index
        self.sequences = self.stores.sequences
        self.committed = False

    def commit(self):
        self.committed = True

    def rollback(self):
        pass
