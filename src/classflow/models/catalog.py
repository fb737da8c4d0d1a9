"""Read-only reference data: faculties, programs, buildings, subject types."""

from __future__ import annotations

from sqlalchemy import Float, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from classflow.db.session import Base


class Faculty(Base):
    __tablename__ = "faculties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    programs: Mapped[list[Program]] = relationship(back_populates="faculty")


class Program(Base):
    """Study program offered by exactly one faculty."""

    __tablename__ = "programs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    faculty_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("faculties.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    faculty: Mapped[Faculty] = relationship(back_populates="programs")


class Building(Base):
    __tablename__ = "buildings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)


class SubjectType(Base):
    """Kind of class (lecture, seminar, lab)."""

    __tablename__ = "subject_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
