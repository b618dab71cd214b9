"""Tables behind the event store and the stream index.

``event_store`` holds every event of every speaker, contract and pricing
stream. Two writers that loaded the same speaker at the same version both
try to insert ``(stream_id, version + 1)``; the unique constraint lets one
through. Rows are never updated or deleted; the migrations add triggers
that refuse both.

``stream_index`` resolves the keys callers use (``spk-42``,
``CTR-2025-0001``, a payment id, an event id) to stream ids, and carries
the version each stream was last saved at.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    Identity,
    Index,
    Integer,
    PrimaryKeyConstraint,
    String,
    Table,
    UniqueConstraint,
    text,
)

from podium.adapters.db.metadata import metadata
from podium.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

__all__ = ["event_store", "stream_index"]

event_store = Table(
    "event_store",
    metadata,
    # BIGINT IDENTITY on Postgres, rowid alias on SQLite
    Column(
        "global_seq",
        BIGINT_PK,
        Identity(start=1),
        primary_key=True,
        nullable=False,
        comment="Position in the store-wide log, assigned on insert.",
    ),
    Column("stream_id", String(200), nullable=False, comment="Owning aggregate id."),
    Column("stream_type", String(100), nullable=False, comment="Aggregate kind."),
    Column("version", Integer, nullable=False, comment="1-based, per stream."),
    Column("event_id", String(26), nullable=False, unique=True, comment="ULID."),
    Column("event_type", String(120), nullable=False, comment="Event class name."),
    Column(
        "recorded_at",
        UTCDateTime(),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the store accepted the event, UTC.",
    ),
    Column("payload", PORTABLE_JSON, nullable=False, comment="Event fields."),
    Column("metadata", PORTABLE_JSON, nullable=True, comment="Command and actor."),
    UniqueConstraint("stream_id", "version"),
    CheckConstraint("version >= 1", name="positive_version"),
    CheckConstraint("length(event_id) = 26", name="event_id_26_char"),
    Index(None, "stream_type", "event_type"),
    Index(None, "stream_id", "global_seq"),
    Index(None, "event_type"),
    comment="Append-only log of domain events.",
)

stream_index = Table(
    "stream_index",
    metadata,
    Column("kind", String(64), nullable=False, comment="Key kind."),
    Column("key", String(512), nullable=False, comment="Caller-facing id."),
    Column("stream_id", String(26), nullable=False, comment="Target stream."),
    Column(
        "version",
        Integer,
        nullable=False,
        server_default="0",
        comment="Stream version at the last save.",
    ),
    PrimaryKeyConstraint("kind", "key"),
    Index(None, "stream_id"),
    comment="Natural keys of event streams.",
)
