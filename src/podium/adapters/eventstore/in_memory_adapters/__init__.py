"""In-memory event store adapters.

Fast, ephemeral implementations of the event store and stream index for unit
tests, demos and the in-process bus. Both are safe to share between threads;
everything is lost when the instance is discarded.
"""

from .eventstore import InMemoryEventStore
from .stream_index import InMemoryStreamIndex

__all__ = ["InMemoryEventStore", "InMemoryStreamIndex"]
