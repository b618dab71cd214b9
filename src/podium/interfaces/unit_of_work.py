"""The unit of work port.

A command handler does all of its reads and writes through one unit of
work: the event store for streams, the stream index for natural keys and
the sequence allocator for contract and payment numbers. On a transactional
backend all three share one transaction, so a booking and its index fence
commit together or not at all.
"""

from __future__ import annotations

import abc

from podium.interfaces.stream_index import StreamIndex

from .eventstore import EventStore
from .sequences import SequenceAllocator


class AbstractUnitOfWork(abc.ABC):
    """Context manager around one command's writes.

    Leaving the block without `commit` rolls back.
    """

    eventstore: EventStore
    stream_index: StreamIndex
    sequences: SequenceAllocator

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *args):
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Make every write since `__enter__` durable."""

    @abc.abstractmethod
    def rollback(self):
        """Discard uncommitted writes; a no-op after `commit`."""
