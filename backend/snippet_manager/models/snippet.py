"""
Snippet Manager Backend — Snippet SQLAlchemy Model
====================================================

What:  ORM model for the `snippets` table in the hosted Postgres datastore.
Why:   Lets the service layer build typed filter/sort/insert/update
       statements instead of raw SQL strings.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for
       migrations. Row-level security policies on the table (see migration
       001) restrict every statement to rows where `user_id = auth.uid()`.
Who:   Queried by SnippetService; shaped into SnippetResponse by
       `to_snippet_response`.

Table Design Rationale:
    - UUID primary key assigned by the datastore (gen_random_uuid())
    - user_id: owner, immutable, references the auth provider's users table
    - tags: text[] so the list query can use the array overlap operator (&&)
    - updated_at: refreshed by a BEFORE UPDATE trigger, never by the app
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, CheckConstraint, Index, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from snippet_manager.constants import LANGUAGE_MAX_LENGTH, TITLE_MAX_LENGTH
from snippet_manager.database import Base


class Snippet(Base):
    """
    A user-owned code snippet.

    Query Patterns:
        - List a user's snippets, newest first:
          WHERE user_id = :uid ORDER BY created_at DESC LIMIT :n OFFSET :m
          → idx_snippets_user_id + idx_snippets_created_at
        - Tag filter: WHERE tags && :tags → GIN idx_snippets_tags
        - Search: to_tsvector(...) @@ websearch_to_tsquery(...) → GIN idx_snippets_search
    """

    __tablename__ = "snippets"

    # ── Identity ──────────────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        comment="Owner; the auth provider's user id",
    )

    # ── Content ───────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    code: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(String(LANGUAGE_MAX_LENGTH), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Machine-generated, written back by the client after an AI assist call
    ai_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_explanation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    tags: Mapped[List[str]] = mapped_column(
        ARRAY(Text),
        nullable=True,
        server_default=text("'{}'"),
    )
    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=True,
        server_default=text("false"),
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

    __table_args__ = (
        CheckConstraint("length(trim(title)) > 0", name="title_not_empty"),
        CheckConstraint("length(trim(code)) > 0", name="code_not_empty"),
        Index("idx_snippets_user_id", "user_id"),
        Index("idx_snippets_language", "language"),
        Index("idx_snippets_tags", "tags", postgresql_using="gin"),
        Index("idx_snippets_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, language='{self.language}', title='{self.title[:30]}')>"
