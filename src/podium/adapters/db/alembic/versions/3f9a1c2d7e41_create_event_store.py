"""create event_store table

Revision ID: 3f9a1c2d7e41
Revises:
Create Date: 2025-11-03

"""

# pylint: disable=invalid-name,no-member

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from podium.adapters.db.dialects import DialectName
from podium.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

revision: str = "3f9a1c2d7e41"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Postgres: one row-level trigger for both operations, SQLSTATE 0A000
# (feature not supported). SQLite: one ABORT trigger per operation.
APPEND_ONLY = {
    DialectName.POSTGRES: (
        """
        CREATE OR REPLACE FUNCTION event_store_refuse_change() RETURNS trigger
        LANGUAGE plpgsql AS $$
        BEGIN
          RAISE EXCEPTION 'event_store is append-only: % refused', TG_OP
          USING ERRCODE = '0A000';
        END;
        $$;
        """,
        """
        CREATE TRIGGER tr_event_store_append_only
        BEFORE UPDATE OR DELETE ON event_store
        FOR EACH ROW EXECUTE FUNCTION event_store_refuse_change();
        """,
    ),
    DialectName.SQLITE: tuple(
        f"""
        CREATE TRIGGER tr_event_store_no_{op_name.lower()}
        BEFORE {op_name} ON event_store
        BEGIN
          SELECT RAISE(ABORT, 'event_store is append-only: {op_name} refused');
        END;
        """
        for op_name in ("UPDATE", "DELETE")
    ),
}

DROP_APPEND_ONLY = {
    DialectName.POSTGRES: (
        "DROP TRIGGER IF EXISTS tr_event_store_append_only ON event_store",
        "DROP FUNCTION IF EXISTS event_store_refuse_change()",
    ),
    DialectName.SQLITE: (
        "DROP TRIGGER IF EXISTS tr_event_store_no_delete",
        "DROP TRIGGER IF EXISTS tr_event_store_no_update",
    ),
}

INDEXES = {
    "ix_event_store_event_store_event_type": ["event_type"],
    "ix_event_store_event_store_stream_id_event_store_global_seq": [
        "stream_id",
        "global_seq",
    ],
    "ix_event_store_event_store_stream_type_event_store_event_type": [
        "stream_type",
        "event_type",
    ],
}


def _dialect() -> DialectName:
    # the migration context also works offline (``--sql``), a bind does not
    return DialectName.from_string(op.get_context().dialect.name)


def upgrade() -> None:
    op.create_table(
        "event_store",
        sa.Column(
            "global_seq",
            BIGINT_PK,
            sa.Identity(always=False, start=1),
            nullable=False,
            comment="Position in the store-wide log, assigned on insert.",
        ),
        sa.Column(
            "stream_id", sa.String(200), nullable=False, comment="Owning aggregate id."
        ),
        sa.Column(
            "stream_type", sa.String(100), nullable=False, comment="Aggregate kind."
        ),
        sa.Column(
            "version", sa.Integer(), nullable=False, comment="1-based, per stream."
        ),
        sa.Column("event_id", sa.String(26), nullable=False, comment="ULID."),
        sa.Column(
            "event_type", sa.String(120), nullable=False, comment="Event class name."
        ),
        sa.Column(
            "recorded_at",
            UTCDateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the store accepted the event, UTC.",
        ),
        sa.Column("payload", PORTABLE_JSON, nullable=False, comment="Event fields."),
        sa.Column(
            "metadata", PORTABLE_JSON, nullable=True, comment="Command and actor."
        ),
        sa.CheckConstraint(
            "length(event_id) = 26", name=op.f("ck_event_store_event_id_26_char")
        ),
        sa.CheckConstraint(
            "version >= 1", name=op.f("ck_event_store_positive_version")
        ),
        sa.PrimaryKeyConstraint("global_seq", name=op.f("pk_event_store")),
        sa.UniqueConstraint("event_id", name=op.f("uq_event_store_event_id")),
        sa.UniqueConstraint(
            "stream_id", "version", name=op.f("uq_event_store_stream_id_version")
        ),
        comment="Append-only log of domain events.",
    )
    for name, columns in INDEXES.items():
        op.create_index(op.f(name), "event_store", columns)

    for statement in APPEND_ONLY[_dialect()]:
        op.execute(statement)


def downgrade() -> None:
    for statement in DROP_APPEND_ONLY[_dialect()]:
        op.execute(statement)
    for name in reversed(list(INDEXES)):
        op.drop_index(op.f(name), table_name="event_store")
    op.drop_table("event_store")
