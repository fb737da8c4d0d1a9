"""Persistence helpers used by the group engine."""

from .group_repo import GroupRepository
from .member_repo import MemberRepository
from .schedule_repo import ScheduleRepository

__all__ = ["GroupRepository", "MemberRepository", "ScheduleRepository"]
