"""Schedule store: append-once timetable rows per group."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import Session

from classflow.db.time import utcnow
from classflow.models.catalog import Building, SubjectType
from classflow.models.schedule import ScheduleEntry
from classflow.core.dto import BuildingView, ParityFilter, ScheduleEntryInput, ScheduleEntryView

__all__ = ["ScheduleRepository"]


class ScheduleRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def bulk_insert(self, group_id: int, entries: Sequence[ScheduleEntryInput]) -> int:
        """Insert every entry in one statement and return how many were written."""
        created_at = utcnow()
        rows = [
            {
                "group_id": group_id,
                "building_id": entry.building_id,
                "subject_type_id": entry.type_id,
                "subject_name": entry.subject_name,
                "teacher": entry.teacher,
                "room": entry.room,
                "is_even": entry.is_even,
                "day_of_week": entry.day_of_week,
                "start_time": entry.start_time,
                "end_time": entry.end_time,
                "created_at": created_at,
            }
            for entry in entries
        ]
        if rows:
            self.session.execute(insert(ScheduleEntry), rows)
        return len(rows)

    def list_for_group(self, group_id: int, parity: ParityFilter) -> list[ScheduleEntryView]:
        """Return a group's entries joined with building and subject type data.

        Ordered by day, parity, start time and id so repeated reads agree.
        """
        stmt = (
            select(ScheduleEntry, SubjectType.name, Building)
            .join(SubjectType, SubjectType.id == ScheduleEntry.subject_type_id)
            .join(Building, Building.id == ScheduleEntry.building_id)
            .where(ScheduleEntry.group_id == group_id)
        )
        if parity is ParityFilter.EVEN:
            stmt = stmt.where(ScheduleEntry.is_even.is_(True))
        elif parity is ParityFilter.ODD:
            stmt = stmt.where(ScheduleEntry.is_even.is_(False))
        stmt = stmt.order_by(
            ScheduleEntry.day_of_week,
            ScheduleEntry.is_even,
            ScheduleEntry.start_time,
            ScheduleEntry.id,
        )

        views: list[ScheduleEntryView] = []
        for entry, type_name, building in self.session.execute(stmt):
            views.append(
                ScheduleEntryView(
                    id=entry.id,
                    type_name=type_name,
                    subject_name=entry.subject_name,
                    teacher=entry.teacher,
                    room=entry.room,
                    is_even=entry.is_even,
                    day_of_week=entry.day_of_week,
                    start_time=entry.start_time,
                    end_time=entry.end_time,
                    building=BuildingView(
                        id=building.id,
                        name=building.name,
                        latitude=building.latitude,
                        longitude=building.longitude,
                        address=building.address,
                    ),
                )
            )
        return views

    def delete_for_group(self, group_id: int) -> int:
        """Drop a group's entries; only used when the group itself is deleted."""
        result = self.session.execute(
            delete(ScheduleEntry)
            .where(ScheduleEntry.group_id == group_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def count(self, group_id: int) -> int:
        return self.session.scalar(
            select(func.count()).select_from(ScheduleEntry).where(ScheduleEntry.group_id == group_id)
        ) or 0
