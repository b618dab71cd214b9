"""The database backends PODIUM runs on: Postgres and SQLite."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

_POSTGRES_ALIASES = frozenset({"postgresql", "postgres", "pg"})


class UnsupportedDialect(Exception):
    """A backend other than Postgres or SQLite."""


class DialectName(str, Enum):
    """SQLAlchemy dialect names of the supported backends."""

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, dialect_str: str | None) -> DialectName:
        """Map ``postgres``, ``postgresql+psycopg``, `` SQLite `` and the like.

        Raises:
            UnsupportedDialect: Not a supported backend.
        """
        backend = (dialect_str or "").strip().lower().partition("+")[0]
        if backend in _POSTGRES_ALIASES:
            return cls.POSTGRES
        if backend == cls.SQLITE.value:
            return cls.SQLITE
        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")

    @classmethod
    def from_sqlalchemy(cls, obj: Engine | Connection) -> DialectName:
        """The backend of an engine or connection, without connecting."""
        dialect = getattr(obj, "dialect", None)
        if dialect is None:
            raise UnsupportedDialect(f"{type(obj).__name__} has no SQLAlchemy dialect")
        return cls.from_string(dialect.name)
