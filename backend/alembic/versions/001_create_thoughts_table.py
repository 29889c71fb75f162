"""Create thoughts table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `thoughts` table and its created_at DESC index.
Rollback: downgrade() drops the table (destructive, all thoughts lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the thoughts table; mirrors happy_thoughts/models/thought.py."""
    op.create_table(
        "thoughts",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("message", sa.String(140), nullable=False),
        sa.Column(
            "hearts",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Both listing paths ORDER BY created_at DESC
    op.create_index(
        "idx_thoughts_created_at",
        "thoughts",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_thoughts_created_at", table_name="thoughts")
    op.drop_table("thoughts")
