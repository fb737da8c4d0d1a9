# src/classflow/api/v1/endpoints/groups.py
"""Group lifecycle, membership and schedule endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from classflow.api.v1.dependencies import AdminDep, EngineDep, MemberDep, PrincipalDep
from classflow.core.dto import (
    GroupDetails,
    GroupFilter,
    GroupSummary,
    ParityFilter,
    ScheduleEntryView,
)
from classflow.schemas.group import (
    AssignLeaderRequest,
    GroupCreate,
    GroupCreated,
    GroupDetailsResponse,
    GroupSummaryResponse,
    JoinGroupRequest,
)
from classflow.schemas.schedule import ScheduleEntryResponse, ScheduleUpload, ScheduleUploaded

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=GroupCreated, status_code=status.HTTP_201_CREATED)
def create_group(
    payload: GroupCreate,
    principal: PrincipalDep,
    engine: EngineDep,
) -> GroupCreated:
    """Create a group.

    Administrators may attach a leader; anyone else becomes the leader of the
    group they create.
    """
    group_id = engine.create_group(
        principal,
        faculty_id=payload.faculty_id,
        program_id=payload.program_id,
        short_name=payload.short_name,
        leader_id=payload.leader_id,
    )
    return GroupCreated(group_id=group_id)


@router.get("", response_model=list[GroupSummaryResponse])
def list_groups(
    principal: PrincipalDep,
    engine: EngineDep,
    faculty: str | None = None,
    program: str | None = None,
) -> list[GroupSummary]:
    """List group summaries, optionally narrowed by faculty and program name."""
    return engine.get_group_summaries(
        principal,
        GroupFilter(faculty=faculty or None, program=program or None),
    )


@router.get("/me", response_model=GroupDetailsResponse)
def get_current_group(principal: MemberDep, engine: EngineDep) -> GroupDetails:
    return engine.get_current_group(principal)


@router.post("/leave", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def leave_group(principal: MemberDep, engine: EngineDep) -> Response:
    engine.leave_group(principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}", response_model=GroupDetailsResponse)
def get_group(group_id: int, principal: PrincipalDep, engine: EngineDep) -> GroupDetails:
    return engine.get_group(principal, group_id)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_group(group_id: int, principal: AdminDep, engine: EngineDep) -> Response:
    engine.delete_group(principal, group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{group_id}/join")
def join_group(
    group_id: int,
    payload: JoinGroupRequest,
    principal: MemberDep,
    engine: EngineDep,
) -> dict[str, str]:
    """Join a group using its code."""
    engine.join_group(principal, group_id, payload.code)
    return {"message": "success"}


@router.post("/{group_id}/leader")
def assign_leader(
    group_id: int,
    payload: AssignLeaderRequest,
    principal: AdminDep,
    engine: EngineDep,
) -> dict[str, str]:
    engine.assign_leader(principal, group_id, payload.user_id)
    return {"message": "success"}


@router.post(
    "/{group_id}/schedule",
    response_model=ScheduleUploaded,
    status_code=status.HTTP_201_CREATED,
)
def upload_schedule(
    group_id: int,
    payload: ScheduleUpload,
    principal: PrincipalDep,
    engine: EngineDep,
) -> ScheduleUploaded:
    """Upload a group's timetable; only once per group."""
    written = engine.upload_schedule(principal, group_id, payload.to_entries())
    return ScheduleUploaded(entries=written)


@router.get("/{group_id}/schedule", response_model=list[ScheduleEntryResponse])
def get_schedule(
    group_id: int,
    principal: PrincipalDep,
    engine: EngineDep,
    week_even: str | None = None,
) -> list[ScheduleEntryView]:
    """Return a group's timetable.

    ``week_even`` accepts ``true``/``even`` or ``false``/``odd``; anything
    else returns both weeks.
    """
    return engine.get_schedule(principal, group_id, ParityFilter.parse(week_even))
