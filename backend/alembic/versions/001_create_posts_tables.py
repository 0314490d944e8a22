"""Create posts and post_tags tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema: `posts` plus one `post_tags` row per tag, ordered
       by `position`. See blogapi/models/post.py for column notes.

Rollback: downgrade() drops both tables (all posts are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), nullable=False, comment="Unique identifier, assigned on insert"),
        sa.Column("title", sa.String(255), nullable=False, comment="Post title (required, non-empty)"),
        sa.Column("author", sa.String(255), nullable=True),
        sa.Column("contents", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this post was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this post was last modified (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Default listing is newest first
    op.create_index("idx_posts_created_at", "posts", [sa.text("created_at DESC")])
    op.create_index("idx_posts_author", "posts", ["author"])

    op.create_table(
        "post_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_post_tags_name", "post_tags", ["name"])
    op.create_index("idx_post_tags_post_id", "post_tags", ["post_id"])


def downgrade() -> None:
    op.drop_index("idx_post_tags_post_id", table_name="post_tags")
    op.drop_index("idx_post_tags_name", table_name="post_tags")
    op.drop_table("post_tags")
    op.drop_index("idx_posts_author", table_name="posts")
    op.drop_index("idx_posts_created_at", table_name="posts")
    op.drop_table("posts")
