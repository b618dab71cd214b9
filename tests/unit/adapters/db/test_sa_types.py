"""Unit tests for the portable column types in podium.adapters.db.sa_types.

No database is touched: the types are exercised through dialect objects and
literal SQL compilation only.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import dialect as PostgresDialect
from sqlalchemy.dialects.sqlite import dialect as SQLiteDialect

from podium.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

# pylint: disable=magic-value-comparison

MOUNTAIN = timezone(timedelta(hours=-7))
NOON_UTC = datetime(2025, 5, 1, 12, tzinfo=timezone.utc)

DIALECTS = pytest.mark.parametrize(
    "dialect", [SQLiteDialect(), PostgresDialect()], ids=["sqlite", "postgres"]
)


class TestUTCDateTime:
    """Bind and result processing for UTCDateTime."""

    @staticmethod
    @DIALECTS
    def test_none_passes_through(dialect) -> None:
        """NULLs stay NULL in both directions."""
        col = UTCDateTime()
        assert col.process_bind_param(None, dialect) is None
        assert col.process_result_value(None, dialect) is None

    @staticmethod
    def test_sqlite_binds_naive_utc() -> None:
        """SQLite receives the UTC wall time without an offset."""
        bound = UTCDateTime().process_bind_param(
            datetime(2025, 5, 1, 5, tzinfo=MOUNTAIN), SQLiteDialect()
        )
        assert bound == datetime(2025, 5, 1, 12)
        assert bound.tzinfo is None

    @staticmethod
    def test_postgres_binds_aware_utc() -> None:
        """Postgres receives an aware UTC datetime."""
        bound = UTCDateTime().process_bind_param(
            datetime(2025, 5, 1, 5, tzinfo=MOUNTAIN), PostgresDialect()
        )
        assert bound == NOON_UTC
        assert bound.utcoffset() == timedelta(0)

    @staticmethod
    @DIALECTS
    def test_naive_input_read_as_utc(dialect) -> None:
        """Naive values are taken to be UTC already."""
        bound = UTCDateTime().process_bind_param(datetime(2025, 5, 1, 12), dialect)
        assert bound.replace(tzinfo=timezone.utc) == NOON_UTC

    @staticmethod
    @DIALECTS
    def test_results_come_back_aware(dialect) -> None:
        """Whatever the driver returns, callers get aware UTC datetimes."""
        col = UTCDateTime()
        naive = col.process_result_value(datetime(2025, 5, 1, 12), dialect)
        shifted = col.process_result_value(datetime(2025, 5, 1, 5, tzinfo=MOUNTAIN), dialect)
        assert naive == shifted == NOON_UTC
        assert naive.tzinfo is timezone.utc and shifted.tzinfo is timezone.utc

    @staticmethod
    def test_literal_compiles_to_utc_wall_time() -> None:
        """Literal binds go through the same normalization."""
        stmt = sa.select(sa.literal(datetime(2025, 5, 1, 5, tzinfo=MOUNTAIN), UTCDateTime()))
        sql = str(stmt.compile(dialect=SQLiteDialect(), compile_kwargs={"literal_binds": True}))
        assert "2025-05-01 12:00:00" in sql

    @staticmethod
    def test_python_type() -> None:
        """The Python type is datetime."""
        assert UTCDateTime().python_type is datetime


def test_bigint_pk_is_integer_on_sqlite():
    """SQLite only autoincrements INTEGER primary keys."""
    assert BIGINT_PK.compile(dialect=SQLiteDialect()) == "INTEGER"
    assert BIGINT_PK.compile(dialect=PostgresDialect()) == "BIGINT"


def test_portable_json_is_jsonb_on_postgres():
    """Payloads use JSONB on Postgres and plain JSON elsewhere."""
    assert PORTABLE_JSON.compile(dialect=PostgresDialect()) == "JSONB"
    assert PORTABLE_JSON.compile(dialect=SQLiteDialect()) == "JSON"
