"""Column types the PODIUM tables and migrations share.

``BIGINT_PK``
    BIGINT on Postgres; INTEGER on SQLite, where only an INTEGER primary
    key aliases the rowid and autoincrements.
``PORTABLE_JSON``
    JSONB on Postgres, JSON elsewhere. Python ``None`` is stored as SQL NULL
    rather than the JSON literal ``null``.
``UTCDateTime``
    Timestamps that are aware UTC on the way in and on the way out.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, BigInteger, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import DateTime, TypeDecorator

from podium.adapters.db.dialects import DialectName

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

__all__ = ["BIGINT_PK", "PORTABLE_JSON", "UTCDateTime"]

_SQLITE = DialectName.SQLITE.value

BIGINT_PK = BigInteger().with_variant(Integer(), _SQLITE)
PORTABLE_JSON = JSON(none_as_null=True).with_variant(
    JSONB(none_as_null=True), DialectName.POSTGRES.value
)


def _as_utc(value: datetime) -> datetime:
    # naive values are read as UTC, never as local time
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator[datetime]):  # pylint: disable=too-many-ancestors
    """TIMESTAMPTZ on Postgres; naive UTC text on SQLite, re-tagged on read."""

    impl = DateTime(timezone=True)
    cache_ok = True

    @property
    def python_type(self) -> type[datetime]:
        return datetime

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> Any:
        if value is None:
            return value
        utc = _as_utc(value)
        return utc.replace(tzinfo=None) if dialect.name == _SQLITE else utc

    process_literal_param = process_bind_param

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        return _as_utc(value) if isinstance(value, datetime) else value
