"""Identity provider: user lookups and role changes."""
from __future__ import annotations

from typing import Protocol

from sqlalchemy import update
from sqlalchemy.orm import Session

from classflow.core.errors import UserNotFound
from classflow.models.user import Role, User

__all__ = ["IdentityProvider", "IdentityService"]


class IdentityProvider(Protocol):
    def get_user(self, user_id: int) -> User: ...

    def update_role(self, user_id: int, role: Role) -> None: ...


class IdentityService:
    """Resolve users and mutate their role inside the caller's transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_user(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise UserNotFound()
        return user

    def update_role(self, user_id: int, role: Role) -> None:
        """Set ``role`` on the user.

        Raises:
            UserNotFound: If no row was updated.
        """
        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(role=role)
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount == 0:
            raise UserNotFound()
