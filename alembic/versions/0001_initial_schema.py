"""Initial schema: users and append-only status entries

Revision ID: 0001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(50), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True)),
        sa.CheckConstraint("role IN ('admin', 'viewer')", name="user_role"),
    )

    op.create_table(
        "status_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("last_water_intake", sa.DateTime(timezone=True)),
        sa.Column("altitude", sa.Integer()),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "altitude IS NULL OR (altitude >= 1 AND altitude <= 10)", name="ck_status_altitude_range"
        ),
    )
    op.create_index("ix_status_entries_user_created", "status_entries", ["user_id", "created_at", "id"])


def downgrade() -> None:
    op.drop_index("ix_status_entries_user_created", table_name="status_entries")
    op.drop_table("status_entries")
    op.drop_table("users")
