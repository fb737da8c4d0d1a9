"""Unit tests for the ORM models defined in classflow.models.

These tests verify basic mapping correctness: table names, the constraints
the group engine relies on, and the stored role values.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from classflow.models import Group, Member, Role, ScheduleEntry, User


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert Group.__tablename__ == "groups"
    assert Member.__tablename__ == "members"
    assert ScheduleEntry.__tablename__ == "schedules"
    assert User.__tablename__ == "users"


def test_membership_is_unique_per_user():
    """members.user_id carries the one-group-per-user constraint."""
    assert Member.__table__.c.user_id.unique is True


def test_group_uniques():
    columns = Group.__table__.c
    assert columns.short_name.unique is True
    assert columns.code.unique is True
    assert columns.leader_id.nullable is True


def test_role_values():
    assert [role.value for role in Role] == ["student", "leader", "admin"]


def test_second_membership_violates_constraint(session_factory, catalog, admin, student, group_engine, principal):
    group_id = group_engine.create_group(principal(admin), faculty_id=1, program_id=1, short_name="CS101")
    with session_factory() as db:
        db.add(Member(user_id=student.id, group_id=group_id))
        db.commit()
        db.add(Member(user_id=student.id, group_id=group_id))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()
