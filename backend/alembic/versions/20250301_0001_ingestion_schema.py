"""ingestion schema

Revision ID: 20250301_0001
Revises:
Create Date: 2025-03-01

Creates the three tables the ingestion pipeline works with:
1. users: identity records owned by user management, read-only here
2. user_knowledge_base: one row per ingested source instance, unique on
   (user_id, source_type, source_url) so re-ingestion updates in place
3. user_info: per-user aggregate statistics, one JSON blob per source
"""

from alembic import op
import sqlalchemy as sa


revision = "20250301_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("github_username", sa.String(length=255), nullable=False),
        sa.Column("github_token", sa.String(length=512), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_github_username", "users", ["github_username"], unique=True)

    op.create_table(
        "user_knowledge_base",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("source_type", sa.String(length=20), nullable=False),
        sa.Column("source_url", sa.String(length=1024), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("embedding", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "source_type", "source_url", name="uq_knowledge_base_user_source_url"
        ),
    )
    op.create_index(
        "ix_user_knowledge_base_user_id", "user_knowledge_base", ["user_id"], unique=False
    )
    op.create_index(
        "ix_user_knowledge_base_source_type", "user_knowledge_base", ["source_type"], unique=False
    )

    op.create_table(
        "user_info",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("github_stats", sa.JSON(), nullable=True),
        sa.Column("leetcode_stats", sa.JSON(), nullable=True),
        sa.Column("resume_summary", sa.JSON(), nullable=True),
        sa.Column("last_ingested_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    op.drop_table("user_info")
    op.drop_index("ix_user_knowledge_base_source_type", table_name="user_knowledge_base")
    op.drop_index("ix_user_knowledge_base_user_id", table_name="user_knowledge_base")
    op.drop_table("user_knowledge_base")
    op.drop_index("ix_users_github_username", table_name="users")
    op.drop_table("users")
