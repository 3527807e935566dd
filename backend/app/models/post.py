"""
Postboard Backend: Post SQLAlchemy Model
=========================================

What:  ORM model for the `posts` table.
Who:   Written by PostService; read by Alembic for migrations.

Column notes:
    - id:          UUID assigned in Python at insert time, never reassigned
    - title, body: TEXT NOT NULL, the database refuses a post without either
    - created_at:  UTC, set once at insert
    - updated_at:  UTC, starts equal to created_at and moves on every UPDATE
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _same_as_created_at(context) -> datetime:
    # Reuse the INSERT's created_at so both timestamps match exactly
    return context.get_current_parameters()["created_at"]


class Post(Base):
    """
    A title/body pair with an identifier and timestamps.

    Lifecycle:
        Created by PostService.create(); there is no update or delete path
        in the API.
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    body: Mapped[str] = mapped_column(Text, nullable=False)

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_same_as_created_at,
        onupdate=utcnow,
    )

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title={self.title!r}, created_at='{self.created_at}')>"
