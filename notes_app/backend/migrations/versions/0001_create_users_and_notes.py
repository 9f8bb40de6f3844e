"""Create users and notes tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _tags_type(dialect_name: str) -> sa.types.TypeEngine:
    if dialect_name == "postgresql":
        return postgresql.JSONB()
    if dialect_name == "mysql":
        return sa.JSON()
    return sa.Text()


def upgrade() -> None:
    dialect_name = op.get_context().dialect.name

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "notes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("tags", _tags_type(dialect_name), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notes_user_archived", "notes", ["user_id", "is_archived"])

    if dialect_name == "postgresql":
        op.execute(
            "CREATE INDEX ix_notes_search ON notes USING gin "
            "(to_tsvector('english'::regconfig, title || ' ' || content))"
        )
    elif dialect_name == "mysql":
        op.create_index(
            "ix_notes_fulltext",
            "notes",
            ["title", "content"],
            mysql_prefix="FULLTEXT",
        )


def downgrade() -> None:
    dialect_name = op.get_context().dialect.name

    if dialect_name == "postgresql":
        op.drop_index("ix_notes_search", table_name="notes")
    elif dialect_name == "mysql":
        op.drop_index("ix_notes_fulltext", table_name="notes")
    op.drop_index("ix_notes_user_archived", table_name="notes")
    op.drop_table("notes")
    op.drop_table("users")
