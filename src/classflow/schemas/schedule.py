"""Schedule upload and read schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from classflow.core.dto import ScheduleEntryInput
from classflow.schemas.catalog import BuildingResponse


class SubjectRequest(BaseModel):
    name: str = Field(min_length=1)
    room: str = Field(min_length=1)
    teacher: str = Field(min_length=1)
    type_id: int = Field(ge=1)
    building_id: int = Field(ge=1)
    start_time: str = Field(min_length=1)
    end_time: str = Field(min_length=1)


class DayRequest(BaseModel):
    day_number: int = Field(ge=1, le=7)
    subjects: list[SubjectRequest]


class WeekRequest(BaseModel):
    is_even: bool
    days: list[DayRequest] = Field(min_length=1, max_length=7)


class ScheduleUpload(BaseModel):
    """A timetable of one week, or of an even and an odd week."""

    weeks: list[WeekRequest] = Field(min_length=1, max_length=2)

    @model_validator(mode="after")
    def _check_parity(self) -> "ScheduleUpload":
        if len(self.weeks) == 2 and self.weeks[0].is_even == self.weeks[1].is_even:
            raise ValueError("two weeks must have different parity")
        return self

    def to_entries(self) -> list[ScheduleEntryInput]:
        """Flatten weeks and days into entries carrying their parity and day."""
        return [
            ScheduleEntryInput(
                subject_name=subject.name,
                teacher=subject.teacher,
                room=subject.room,
                type_id=subject.type_id,
                building_id=subject.building_id,
                is_even=week.is_even,
                day_of_week=day.day_number,
                start_time=subject.start_time,
                end_time=subject.end_time,
            )
            for week in self.weeks
            for day in week.days
            for subject in day.subjects
        ]


class ScheduleUploaded(BaseModel):
    entries: int


class ScheduleEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    type: str = Field(validation_alias="type_name")
    subject_name: str
    teacher: str
    room: str
    is_even: bool
    day_of_week: int
    start_time: str
    end_time: str
    building: BuildingResponse
