"""Document number sequence allocators (in-memory and SQLAlchemy)."""

from .in_memory import InMemorySequenceAllocator
from .sqlalchemy_allocator import SqlAlchemySequenceAllocator

__all__ = ["InMemorySequenceAllocator", "SqlAlchemySequenceAllocator"]
