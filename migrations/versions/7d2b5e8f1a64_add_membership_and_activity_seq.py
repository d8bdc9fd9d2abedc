"""add_membership_and_activity_seq

Revision ID: 7d2b5e8f1a64
Revises: 4c1e7a9b2d3f
Create Date: 2026-10-19 14:03:51.407112

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7d2b5e8f1a64"
down_revision: str | Sequence[str] | None = "4c1e7a9b2d3f"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Key project_members and activity_log by an insertion sequence.

    Existing rows are numbered by the identity column when it is added.
    Listings order by timestamp first and use ``seq`` to break ties.
    """
    op.add_column(
        "project_members",
        sa.Column("seq", sa.BigInteger(), sa.Identity(always=False), nullable=False),
    )
    op.drop_constraint("project_members_pkey", "project_members", type_="primary")
    op.create_primary_key("project_members_pkey", "project_members", ["seq"])
    op.create_unique_constraint(
        "uq_project_members", "project_members", ["project_id", "user_id"]
    )

    op.add_column(
        "activity_log",
        sa.Column("seq", sa.BigInteger(), sa.Identity(always=False), nullable=False),
    )
    op.drop_constraint("activity_log_pkey", "activity_log", type_="primary")
    op.create_primary_key("activity_log_pkey", "activity_log", ["seq"])
    op.create_unique_constraint("activity_log_id_key", "activity_log", ["id"])


def downgrade() -> None:
    """Restore the natural primary keys and drop the sequence columns."""
    op.drop_constraint("activity_log_id_key", "activity_log", type_="unique")
    op.drop_constraint("activity_log_pkey", "activity_log", type_="primary")
    op.create_primary_key("activity_log_pkey", "activity_log", ["id"])
    op.drop_column("activity_log", "seq")

    op.drop_constraint("uq_project_members", "project_members", type_="unique")
    op.drop_constraint("project_members_pkey", "project_members", type_="primary")
    op.create_primary_key("project_members_pkey", "project_members", ["project_id", "user_id"])
    op.drop_column("project_members", "seq")
