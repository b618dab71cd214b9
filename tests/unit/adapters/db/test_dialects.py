"""Unit tests for database dialect detection."""

import pytest
from sqlalchemy import create_engine

from podium.adapters.db.dialects import DialectName, UnsupportedDialect

# pylint: disable=too-few-public-methods


@pytest.mark.parametrize(
    "name, expected",
    [
        ("postgresql", DialectName.POSTGRES),
        ("postgres", DialectName.POSTGRES),
        ("pg", DialectName.POSTGRES),
        ("PostgreSQL+psycopg", DialectName.POSTGRES),
        ("sqlite", DialectName.SQLITE),
        (" sqlite+pysqlite ", DialectName.SQLITE),
    ],
)
def test_from_string(name, expected):
    """Aliases, driver suffixes, case and padding are all accepted."""
    assert DialectName.from_string(name) is expected


@pytest.mark.parametrize("name", [None, "", "mysql", "mssql+pyodbc"])
def test_from_string_unsupported(name):
    """Anything else is rejected."""
    with pytest.raises(UnsupportedDialect):
        DialectName.from_string(name)


def test_from_sqlalchemy_engine():
    """A real engine is recognized without connecting."""
    engine = create_engine("sqlite://")
    assert DialectName.from_sqlalchemy(engine) is DialectName.SQLITE


def test_from_sqlalchemy_without_dialect():
    """Objects without ``.dialect.name`` are unsupported."""

    class Plain:
        """No dialect here."""

    with pytest.raises(UnsupportedDialect, match="Plain has no SQLAlchemy dialect"):
        DialectName.from_sqlalchemy(Plain())  # type: ignore[arg-type]
