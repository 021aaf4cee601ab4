"""Initial schema — articles, likes, attachments.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "articles",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("author_id", sa.String(64), nullable=False),
        sa.Column("original_article_id", sa.String(26), nullable=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
    )
    op.create_index("ix_articles_author_id", "articles", ["author_id"])
    op.create_index("ix_articles_original_article_id", "articles", ["original_article_id"])
    op.create_index("ix_articles_created_at_id", "articles", ["created_at", "id"])

    op.create_table(
        "likes",
        sa.Column("author_id", sa.String(64), primary_key=True),
        sa.Column("article_id", sa.String(26), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_likes_article_id", "likes", ["article_id"])

    op.create_table(
        "attachments",
        sa.Column("storage_key", sa.String(255), primary_key=True),
        sa.Column("article_id", sa.String(26), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_attachments_article_id", "attachments", ["article_id"])


def downgrade() -> None:
    op.drop_index("ix_attachments_article_id", table_name="attachments")
    op.drop_table("attachments")
    op.drop_index("ix_likes_article_id", table_name="likes")
    op.drop_table("likes")
    op.drop_index("ix_articles_created_at_id", table_name="articles")
    op.drop_index("ix_articles_original_article_id", table_name="articles")
    op.drop_index("ix_articles_author_id", table_name="articles")
    op.drop_table("articles")
