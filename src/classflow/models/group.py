"""SQLAlchemy models for groups and their memberships."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from classflow.db.session import Base
from classflow.db.time import utcnow
from classflow.models.catalog import Faculty, Program

_PK = BigInteger().with_variant(Integer, "sqlite")


class Group(Base):
    """Cohort of students sharing one timetable."""

    __tablename__ = "groups"
    __table_args__ = (CheckConstraint("people_count >= 0", name="ck_groups_people_count"),)

    id: Mapped[int] = mapped_column(_PK, primary_key=True)
    leader_id: Mapped[int | None] = mapped_column(
        _PK, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    faculty_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("faculties.id", ondelete="RESTRICT"), nullable=False
    )
    program_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("programs.id", ondelete="RESTRICT"), nullable=False
    )
    short_name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    # Maintained by the group engine; always equals the number of member rows.
    people_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    exists_schedule: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    faculty: Mapped[Faculty] = relationship()
    program: Mapped[Program] = relationship()


class Member(Base):
    """Exclusive relation of one user to one group."""

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(_PK, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        _PK, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    group_id: Mapped[int] = mapped_column(
        _PK, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
