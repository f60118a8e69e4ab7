"""
Snippetbox — Snippet SQLAlchemy Model
=======================================

What:  ORM model representing the `snippets` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used only by SnippetModel. Handlers never see ORM rows; they receive
       immutable SnippetRecord schemas instead.

Table Design:
    - id: integer autoincrement, assigned by the database on insert
    - title: at most 100 characters (the create form enforces the same limit)
    - content: unbounded text, may span many lines
    - created / expires: UTC timestamps; expires = created + N days

    Index on created:
        Supports ordering and range scans over recent snippets.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base

TITLE_MAX_LENGTH = 100

# Largest value the 32-bit `id` column can hold
ID_MAX = 2**31 - 1


class Snippet(Base):
    """
    A stored text snippet.

    Lifecycle:
        1. Inserted with created = now, expires = now + expires_days
        2. Readable through SnippetModel.get/latest while expires > now
        3. Never updated or deleted; after expiry the row is simply inert
    """

    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    # ── Timestamps (UTC) ──────────────────────────────────────────────────
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When this snippet was inserted (UTC)",
    )
    expires: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="After this instant the snippet is no longer readable",
    )

    __table_args__ = (
        Index("idx_snippets_created", "created"),
    )

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title={self.title!r}, expires='{self.expires}')>"
