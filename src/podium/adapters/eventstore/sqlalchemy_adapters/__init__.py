"""SQLAlchemy event store adapters.

Durable implementations of the event store and stream index on Postgres or
SQLite, running on the connection owned by the unit of work.
"""

from .eventstore import SqlAlchemyEventStore
from .stream_index import SqlAlchemyStreamIndex

__all__ = [
    "SqlAlchemyEventStore",
    "SqlAlchemyStreamIndex",
]
