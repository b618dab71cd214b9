"""The ``document_sequences`` table.

A row per ``(name, period)``, created on the first allocation of that year.
``last_value`` is the number most recently handed out.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    PrimaryKeyConstraint,
    String,
    Table,
)

from podium.adapters.db.metadata import metadata

__all__ = ["document_sequences"]

document_sequences = Table(
    "document_sequences",
    metadata,
    Column("name", String(16), nullable=False, comment="CTR or PAY."),
    Column("period", Integer, nullable=False, comment="Calendar year."),
    Column(
        "last_value",
        Integer,
        nullable=False,
        server_default="0",
        comment="Highest number handed out so far.",
    ),
    PrimaryKeyConstraint("name", "period"),
    CheckConstraint("last_value >= 0", name="non_negative_last_value"),
    comment="Yearly counters for contract and payment numbers.",
)
