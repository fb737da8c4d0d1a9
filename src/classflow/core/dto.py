"""Value objects exchanged between the API layer and the group engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from classflow.models.user import Role


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller on whose behalf an engine operation runs."""

    user_id: int
    role: Role


class ParityFilter(str, Enum):
    ANY = "any"
    EVEN = "even"
    ODD = "odd"

    @classmethod
    def parse(cls, raw: str | None) -> ParityFilter:
        """Map a query-string value onto a filter.

        Unknown values fall back to :attr:`ANY` instead of failing.
        """
        value = (raw or "").strip().lower()
        if value in ("even", "true"):
            return cls.EVEN
        if value in ("odd", "false"):
            return cls.ODD
        return cls.ANY


@dataclass(frozen=True, slots=True)
class GroupFilter:
    faculty: str | None = None
    program: str | None = None


@dataclass(frozen=True, slots=True)
class ScheduleEntryInput:
    """One class occurrence as submitted for upload."""

    subject_name: str
    teacher: str
    room: str
    type_id: int
    building_id: int
    is_even: bool
    day_of_week: int
    start_time: str
    end_time: str


@dataclass(frozen=True, slots=True)
class BuildingView:
    id: int
    name: str
    latitude: float
    longitude: float
    address: str


@dataclass(frozen=True, slots=True)
class ScheduleEntryView:
    id: int
    type_name: str
    subject_name: str
    teacher: str
    room: str
    is_even: bool
    day_of_week: int
    start_time: str
    end_time: str
    building: BuildingView


@dataclass(frozen=True, slots=True)
class GroupSummary:
    id: int
    faculty: str
    program: str
    short_name: str
    people_count: int
    exists_schedule: bool


@dataclass(frozen=True, slots=True)
class GroupDetails:
    id: int
    leader_id: int | None
    faculty: str
    program: str
    short_name: str
    people_count: int
    exists_schedule: bool
    created_at: datetime
    # None when the caller may not see the join code.
    code: str | None
