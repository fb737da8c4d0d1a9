# src/classflow/models/__init__.py
"""SQLAlchemy models for the Classflow application."""

from .catalog import Building, Faculty, Program, SubjectType
from .group import Group, Member
from .schedule import ScheduleEntry
from .user import Role, User

__all__ = [
    "Building", "Faculty", "Program", "SubjectType",
    "Group", "Member",
    "ScheduleEntry",
    "Role", "User",
]
