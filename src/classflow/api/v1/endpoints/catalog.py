"""Reference data endpoints: faculties, programs, buildings, subject types."""

from __future__ import annotations

from fastapi import APIRouter

from classflow.api.v1.dependencies import SessionDep
from classflow.models import Building, Faculty, Program, SubjectType
from classflow.schemas.catalog import (
    BuildingResponse,
    FacultyResponse,
    ProgramResponse,
    SubjectTypeResponse,
)
from classflow.services.catalog import CatalogService

router = APIRouter(prefix="/edu", tags=["edu"])


@router.get("/buildings", response_model=list[BuildingResponse])
def list_buildings(db: SessionDep) -> list[Building]:
    return CatalogService(db).list_buildings()


@router.get("/types_of_subject", response_model=list[SubjectTypeResponse])
def list_subject_types(db: SessionDep) -> list[SubjectType]:
    return CatalogService(db).list_subject_types()


@router.get("/faculties", response_model=list[FacultyResponse])
def list_faculties(db: SessionDep) -> list[Faculty]:
    return CatalogService(db).list_faculties()


@router.get("/faculties/{faculty_id}/programs", response_model=list[ProgramResponse])
def list_programs(faculty_id: int, db: SessionDep) -> list[Program]:
    """List the programs of one faculty; 404 when the faculty is unknown."""
    return CatalogService(db).list_programs(faculty_id)
