"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_PK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    """Create users, reference data, groups, members and schedules."""
    op.create_table(
        "users",
        sa.Column("id", _PK, primary_key=True),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("telegram_username", sa.Text(), nullable=True),
        sa.Column("telegram_chat_id", sa.BigInteger(), nullable=True),
        sa.Column(
            "role",
            sa.Enum("student", "leader", "admin", name="user_role", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("notification_delay", sa.Integer(), nullable=False),
        sa.Column("notifications_enabled", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("telegram_chat_id"),
    )
    op.create_table(
        "faculties",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "programs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column(
            "faculty_id",
            sa.Integer(),
            sa.ForeignKey("faculties.id", ondelete="RESTRICT"),
            nullable=False,
        ),
    )
    op.create_index("ix_programs_faculty_id", "programs", ["faculty_id"])
    op.create_table(
        "buildings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
    )
    op.create_table(
        "subject_types",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "groups",
        sa.Column("id", _PK, primary_key=True),
        sa.Column("leader_id", _PK, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "faculty_id",
            sa.Integer(),
            sa.ForeignKey("faculties.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "program_id",
            sa.Integer(),
            sa.ForeignKey("programs.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("short_name", sa.Text(), nullable=False),
        sa.Column("code", sa.String(length=16), nullable=False),
        sa.Column("people_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("exists_schedule", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("people_count >= 0", name="ck_groups_people_count"),
        sa.UniqueConstraint("short_name"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "members",
        sa.Column("id", _PK, primary_key=True),
        sa.Column("user_id", _PK, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("group_id", _PK, sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("ix_members_group_id", "members", ["group_id"])
    op.create_table(
        "schedules",
        sa.Column("id", _PK, primary_key=True),
        sa.Column("group_id", _PK, sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "building_id",
            sa.Integer(),
            sa.ForeignKey("buildings.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "subject_type_id",
            sa.Integer(),
            sa.ForeignKey("subject_types.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("subject_name", sa.Text(), nullable=False),
        sa.Column("teacher", sa.Text(), nullable=False),
        sa.Column("room", sa.Text(), nullable=False),
        sa.Column("is_even", sa.Boolean(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Text(), nullable=False),
        sa.Column("end_time", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_schedules_group_id", "schedules", ["group_id"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_schedules_group_id", table_name="schedules")
    op.drop_table("schedules")
    op.drop_index("ix_members_group_id", table_name="members")
    op.drop_table("members")
    op.drop_table("groups")
    op.drop_table("subject_types")
    op.drop_table("buildings")
    op.drop_index("ix_programs_faculty_id", table_name="programs")
    op.drop_table("programs")
    op.drop_table("faculties")
    op.drop_table("users")
