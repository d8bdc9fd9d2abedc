"""add_content_briefs

Revision ID: 9a3c6f0e4b71
Revises: 7d2b5e8f1a64
Create Date: 2026-10-19 15:27:09.663580

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "9a3c6f0e4b71"
down_revision: str | Sequence[str] | None = "7d2b5e8f1a64"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the content_briefs table."""
    op.create_table(
        "content_briefs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("project_id", sa.UUID(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("topic", sa.String(length=200), nullable=False),
        sa.Column("target_audience", sa.String(length=300), nullable=False, server_default=""),
        sa.Column(
            "content_outline",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="[]",
        ),
        sa.Column(
            "key_points",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="[]",
        ),
        sa.Column("tone_style", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("word_count", sa.String(length=50), nullable=False, server_default=""),
        sa.Column(
            "target_keywords",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="[]",
        ),
        sa.Column(
            "seo_tips",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="[]",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_content_briefs_user_updated",
        "content_briefs",
        ["user_id", "updated_at"],
        unique=False,
    )
    op.create_index("ix_content_briefs_project_id", "content_briefs", ["project_id"], unique=False)


def downgrade() -> None:
    """Drop the content_briefs table."""
    op.drop_index("ix_content_briefs_project_id", table_name="content_briefs")
    op.drop_index("ix_content_briefs_user_updated", table_name="content_briefs")
    op.drop_table("content_briefs")
