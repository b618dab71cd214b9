"""add stream_index table

Revision ID: 8b27d5e0a9c3
Revises: 3f9a1c2d7e41
Create Date: 2025-11-03

"""

# pylint: disable=invalid-name,no-member

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "8b27d5e0a9c3"
down_revision: str | Sequence[str] | None = "3f9a1c2d7e41"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

STREAM_ID_INDEX = "ix_stream_index_stream_index_stream_id"


def upgrade() -> None:
    op.create_table(
        "stream_index",
        sa.Column("kind", sa.String(64), nullable=False, comment="Key kind."),
        sa.Column("key", sa.String(512), nullable=False, comment="Caller-facing id."),
        sa.Column("stream_id", sa.String(26), nullable=False, comment="Target stream."),
        sa.Column(
            "version",
            sa.Integer(),
            nullable=False,
            server_default="0",
            comment="Stream version at the last save.",
        ),
        sa.PrimaryKeyConstraint("kind", "key", name=op.f("pk_stream_index")),
        comment="Natural keys of event streams.",
    )
    op.create_index(op.f(STREAM_ID_INDEX), "stream_index", ["stream_id"])


def downgrade() -> None:
    op.drop_index(op.f(STREAM_ID_INDEX), table_name="stream_index")
    op.drop_table("stream_index")
