"""
Blog API — Post SQLAlchemy Models
===================================

What:  ORM models for the `posts` and `post_tags` tables.
Why:   Maps Python objects to database rows for type-safe queries.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by PostService for listing and CRUD, and by Alembic.

Table Design Rationale:
    - UUID primary key: assigned on insert, globally unique, never reused
    - title: required, non-empty (enforced in the service layer)
    - author / contents: optional free text
    - tags: one row per tag in `post_tags`, with a position column so the
      original order survives a round trip. A separate table lets the
      "posts tagged X" query use an index on any backend (PostgreSQL or
      SQLite) instead of scanning array/JSON columns.
    - created_at / updated_at: UTC with timezone

Query Patterns:
    - List newest first: ORDER BY created_at DESC → idx_posts_created_at
    - By author:         WHERE author = :author    → idx_posts_author
    - By tag:            WHERE EXISTS (post_tags.name = :tag) → idx_post_tags_name
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogapi.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PostTag(Base):
    """A single tag label attached to a post, at a fixed position."""

    __tablename__ = "post_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Maintained by ordering_list on Post.tag_links
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_post_tags_name", "name"),
        Index("idx_post_tags_post_id", "post_id"),
    )

    def __init__(self, name: str, **kwargs):
        super().__init__(name=name, **kwargs)

    def __repr__(self) -> str:
        return f"<PostTag(post_id={self.post_id}, name='{self.name}', position={self.position})>"


class Post(Base):
    """
    A blog entry.

    Lifecycle:
        1. Created with title (required), author, contents, tags
        2. Updated by field-level merge; updated_at refreshed each time
        3. Deleted by id (tags go with it); no soft delete
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, assigned on insert",
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Post title (required, non-empty)",
    )

    author: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        default=None,
    )

    contents: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this post was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this post was last modified (UTC)",
    )

    # selectin: tags are fetched with the posts in the same awaited call,
    # lazy loading is not available under asyncio
    tag_links: Mapped[List[PostTag]] = relationship(
        PostTag,
        order_by=PostTag.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # Plain list-of-strings view over tag_links
    tags: AssociationProxy[List[str]] = association_proxy("tag_links", "name")

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
        Index("idx_posts_author", "author"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', author='{self.author}')>"
