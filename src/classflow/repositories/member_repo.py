"""Membership store: which group a user belongs to."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from classflow.core.errors import AlreadyInGroup, MemberNotFound
from classflow.models.group import Member

__all__ = ["MemberRepository"]


class MemberRepository:
    """Single source of truth for user to group membership.

    The one-membership-per-user rule lives in the unique constraint on
    ``members.user_id``; this class only translates violations of it.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, *, user_id: int, group_id: int) -> Member:
        """Insert a membership row.

        Raises:
            AlreadyInGroup: If the user already has a membership, including one
                committed concurrently by another transaction.
        """
        member = Member(user_id=user_id, group_id=group_id)
        try:
            with self.session.begin_nested():
                self.session.add(member)
                self.session.flush()
        except IntegrityError as err:
            raise AlreadyInGroup() from err
        return member

    def find(self, user_id: int) -> Member | None:
        return self.session.scalars(select(Member).where(Member.user_id == user_id)).first()

    def lookup(self, user_id: int) -> int:
        """Return the id of the user's group.

        Raises:
            MemberNotFound: If the user is not in any group.
        """
        group_id = self.session.scalar(select(Member.group_id).where(Member.user_id == user_id))
        if group_id is None:
            raise MemberNotFound()
        return group_id

    def delete(self, user_id: int) -> None:
        """Remove the user's membership.

        Raises:
            MemberNotFound: If there was nothing to remove.
        """
        result = self.session.execute(
            delete(Member)
            .where(Member.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise MemberNotFound()

    def delete_for_group(self, group_id: int) -> int:
        result = self.session.execute(
            delete(Member)
            .where(Member.group_id == group_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def count(self, group_id: int) -> int:
        return self.session.scalar(
            select(func.count()).select_from(Member).where(Member.group_id == group_id)
        ) or 0
