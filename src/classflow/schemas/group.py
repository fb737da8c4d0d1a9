"""Group-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GroupCreate(BaseModel):
    """Schema for creating a new group.

    ``leader_id`` is only honoured for administrators; other callers lead the
    group they create.
    """

    faculty_id: int = Field(ge=1)
    program_id: int = Field(ge=1)
    short_name: str = Field(min_length=4, max_length=12)
    leader_id: int | None = Field(default=None, ge=1)


class GroupCreated(BaseModel):
    group_id: int


class JoinGroupRequest(BaseModel):
    code: str = Field(min_length=1, max_length=16)


class AssignLeaderRequest(BaseModel):
    user_id: int = Field(ge=1)


class GroupSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    group_id: int = Field(validation_alias="id")
    faculty: str
    program: str
    short_name: str
    number_of_people: int = Field(validation_alias="people_count")
    exists_schedule: bool


class GroupDetailsResponse(BaseModel):
    """Schema for a single group; ``code`` is null unless the caller may see it."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    group_id: int = Field(validation_alias="id")
    leader_id: int | None
    faculty: str
    program: str
    short_name: str
    number_of_people: int = Field(validation_alias="people_count")
    exists_schedule: bool
    created_at: datetime
    code: str | None = None
