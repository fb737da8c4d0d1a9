"""SQLAlchemy model for timetable entries."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from classflow.db.session import Base
from classflow.db.time import utcnow

_PK = BigInteger().with_variant(Integer, "sqlite")


class ScheduleEntry(Base):
    """One class occurrence; written once per group in a single batch."""

    __tablename__ = "schedules"

    id: Mapped[int] = mapped_column(_PK, primary_key=True)
    group_id: Mapped[int] = mapped_column(
        _PK, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    building_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("buildings.id", ondelete="RESTRICT"), nullable=False
    )
    subject_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("subject_types.id", ondelete="RESTRICT"), nullable=False
    )
    subject_name: Mapped[str] = mapped_column(Text, nullable=False)
    teacher: Mapped[str] = mapped_column(Text, nullable=False)
    room: Mapped[str] = mapped_column(Text, nullable=False)
    is_even: Mapped[bool] = mapped_column(Boolean, nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    # Opaque "HH:MM" strings, never parsed.
    start_time: Mapped[str] = mapped_column(Text, nullable=False)
    end_time: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
