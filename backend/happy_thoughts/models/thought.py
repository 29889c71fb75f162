"""
Happy Thoughts API — Thought SQLAlchemy Model
===============================================

What:  ORM model for the `thoughts` table.
Who:   Used by ThoughtService for all reads and writes, and by Alembic.

Table Design:
    - id: UUID generated in Python at insert, portable across PostgreSQL and SQLite
    - message: VARCHAR(140); the 5..140 rule is enforced by the service on the
      trimmed value before insert
    - hearts: only ever changed by `hearts = hearts + 1`
    - created_at: UTC with timezone, written once at creation

    Index on created_at DESC serves both the recency feed and offset pages.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from happy_thoughts.database import Base

MESSAGE_MIN_LENGTH = 5
MESSAGE_MAX_LENGTH = 140


class Thought(Base):
    """
    A short message with a like counter.

    Lifecycle:
        1. Created by POST /thoughts (hearts = 0, created_at = now)
        2. hearts incremented by PATCH /thoughts/{id}/like
        3. Never updated otherwise, never deleted
    """

    __tablename__ = "thoughts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    message: Mapped[str] = mapped_column(
        String(MESSAGE_MAX_LENGTH),
        nullable=False,
    )

    hearts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_thoughts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Thought(id={self.id}, hearts={self.hearts}, created_at='{self.created_at}')>"
