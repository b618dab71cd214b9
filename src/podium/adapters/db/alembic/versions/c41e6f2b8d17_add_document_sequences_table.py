"""add document_sequences table

Revision ID: c41e6f2b8d17
Revises: 8b27d5e0a9c3
Create Date: 2025-11-05

"""

# pylint: disable=invalid-name,no-member

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "c41e6f2b8d17"
down_revision: str | Sequence[str] | None = "8b27d5e0a9c3"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "document_sequences",
        sa.Column("name", sa.String(16), nullable=False, comment="CTR or PAY."),
        sa.Column("period", sa.Integer(), nullable=False, comment="Calendar year."),
        sa.Column(
            "last_value",
            sa.Integer(),
            nullable=False,
            server_default="0",
            comment="Highest number handed out so far.",
        ),
        sa.CheckConstraint(
            "last_value >= 0",
            name=op.f("ck_document_sequences_non_negative_last_value"),
        ),
        sa.PrimaryKeyConstraint("name", "period", name=op.f("pk_document_sequences")),
        comment="Yearly counters for contract and payment numbers.",
    )


def downgrade() -> None:
    op.drop_table("document_sequences")
