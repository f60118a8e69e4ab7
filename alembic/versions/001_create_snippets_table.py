"""Create snippets table

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `snippets` table and its `created` index.
How:   Portable column types, so the same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops the table (all snippets are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the snippets table. Column docs live in snippetbox/models/snippet.py."""
    op.create_table(
        "snippets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "created",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When this snippet was inserted (UTC)",
        ),
        sa.Column(
            "expires",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="After this instant the snippet is no longer readable",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_snippets_created", "snippets", ["created"])


def downgrade() -> None:
    op.drop_index("idx_snippets_created", table_name="snippets")
    op.drop_table("snippets")
