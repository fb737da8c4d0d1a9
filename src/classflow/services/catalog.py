"""Reference data provider backed by the catalog tables."""
from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from classflow.core.errors import (
    BuildingNotFound,
    FacultyNotFound,
    ProgramNotFound,
    SubjectTypeNotFound,
)
from classflow.models.catalog import Building, Faculty, Program, SubjectType

__all__ = ["ReferenceDataProvider", "CatalogService"]


class ReferenceDataProvider(Protocol):
    """Read-only lookups the group engine performs against reference data."""

    def get_faculty(self, faculty_id: int) -> Faculty: ...

    def get_program(self, program_id: int) -> Program: ...

    def get_building(self, building_id: int) -> Building: ...

    def get_subject_type(self, type_id: int) -> SubjectType: ...


class CatalogService:
    """Faculties, programs, buildings and subject types.

    The by-id getters raise the matching ``*NotFound`` error instead of
    returning ``None`` so callers can fail fast.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_faculty(self, faculty_id: int) -> Faculty:
        faculty = self.session.get(Faculty, faculty_id)
        if faculty is None:
            raise FacultyNotFound()
        return faculty

    def get_program(self, program_id: int) -> Program:
        program = self.session.get(Program, program_id)
        if program is None:
            raise ProgramNotFound()
        return program

    def get_building(self, building_id: int) -> Building:
        building = self.session.get(Building, building_id)
        if building is None:
            raise BuildingNotFound()
        return building

    def get_subject_type(self, type_id: int) -> SubjectType:
        subject_type = self.session.get(SubjectType, type_id)
        if subject_type is None:
            raise SubjectTypeNotFound()
        return subject_type

    def list_faculties(self) -> list[Faculty]:
        return list(self.session.scalars(select(Faculty).order_by(Faculty.id)))

    def list_programs(self, faculty_id: int) -> list[Program]:
        """Return the programs of one faculty, failing when it does not exist."""
        self.get_faculty(faculty_id)
        stmt = select(Program).where(Program.faculty_id == faculty_id).order_by(Program.id)
        return list(self.session.scalars(stmt))

    def list_buildings(self) -> list[Building]:
        return list(self.session.scalars(select(Building).order_by(Building.id)))

    def list_subject_types(self) -> list[SubjectType]:
        return list(self.session.scalars(select(SubjectType).order_by(SubjectType.id)))
