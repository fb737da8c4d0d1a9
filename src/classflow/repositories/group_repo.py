"""Data access helpers for group rows."""
from __future__ import annotations

from sqlalchemy import delete, exists, select, update
from sqlalchemy.orm import Session

from classflow.models.catalog import Faculty, Program
from classflow.models.group import Group
from classflow.core.dto import GroupFilter, GroupSummary

__all__ = ["GroupRepository"]


class GroupRepository:
    """Thin wrapper around database access for group entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def short_name_exists(self, short_name: str) -> bool:
        return bool(self.session.scalar(select(exists().where(Group.short_name == short_name))))

    def code_exists(self, code: str) -> bool:
        return bool(self.session.scalar(select(exists().where(Group.code == code))))

    def get(self, group_id: int) -> Group | None:
        """Return a group by identifier."""
        return self.session.get(Group, group_id)

    def get_for_update(self, group_id: int) -> Group | None:
        """Re-read a group under a row lock, bypassing the identity map."""
        stmt = (
            select(Group)
            .where(Group.id == group_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.scalars(stmt).first()

    def insert(
        self,
        *,
        faculty_id: int,
        program_id: int,
        short_name: str,
        code: str,
        leader_id: int | None,
    ) -> Group:
        """Insert a new group and flush so its id is assigned.

        The people counter starts at one when a leader is attached, since the
        leader becomes the first member in the same transaction.
        """
        group = Group(
            faculty_id=faculty_id,
            program_id=program_id,
            short_name=short_name,
            code=code,
            leader_id=leader_id,
            people_count=1 if leader_id is not None else 0,
            exists_schedule=False,
        )
        self.session.add(group)
        self.session.flush()
        return group

    def adjust_people_count(self, group_id: int, delta: int) -> None:
        """Atomically add ``delta`` to the people counter."""
        self.session.execute(
            update(Group)
            .where(Group.id == group_id)
            .values(people_count=Group.people_count + delta)
            .execution_options(synchronize_session=False)
        )

    def set_leader(self, group_id: int, leader_id: int | None) -> None:
        self.session.execute(
            update(Group)
            .where(Group.id == group_id)
            .values(leader_id=leader_id)
            .execution_options(synchronize_session=False)
        )

    def mark_schedule_exists(self, group_id: int) -> bool:
        """Flip the schedule flag; False when it was already set."""
        result = self.session.execute(
            update(Group)
            .where(Group.id == group_id, Group.exists_schedule.is_(False))
            .values(exists_schedule=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def delete(self, group_id: int) -> None:
        self.session.execute(
            delete(Group)
            .where(Group.id == group_id)
            .execution_options(synchronize_session=False)
        )

    def summaries(self, group_filter: GroupFilter) -> list[GroupSummary]:
        """Return group summaries narrowed by exact faculty/program names."""
        stmt = (
            select(
                Group.id,
                Faculty.name,
                Program.name,
                Group.short_name,
                Group.people_count,
                Group.exists_schedule,
            )
            .join(Faculty, Faculty.id == Group.faculty_id)
            .join(Program, Program.id == Group.program_id)
        )
        if group_filter.faculty is not None:
            stmt = stmt.where(Faculty.name == group_filter.faculty)
        if group_filter.program is not None:
            stmt = stmt.where(Program.name == group_filter.program)
        stmt = stmt.order_by(Group.id)
        return [
            GroupSummary(
                id=row[0],
                faculty=row[1],
                program=row[2],
                short_name=row[3],
                people_count=row[4],
                exists_schedule=row[5],
            )
            for row in self.session.execute(stmt)
        ]
