"""Shared API dependencies for authentication and common functionality."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from classflow.core.dto import Principal
from classflow.core.metrics import MetricsCollector
from classflow.core.security import decode_access_token
from classflow.models import Role, User
from classflow.services.group_engine import GroupEngine

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session from the application's session factory."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_group_engine(request: Request) -> GroupEngine:
    return request.app.state.group_engine


def get_metrics(request: Request) -> MetricsCollector:
    return request.app.state.metrics


EngineDep = Annotated[GroupEngine, Depends(get_group_engine)]
MetricsDep = Annotated[MetricsCollector, Depends(get_metrics)]


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> User:
    """Get the current authenticated user from JWT token.

    The user row is re-read on every request so role changes made by the
    group engine apply immediately. The lookup uses its own short-lived
    session; the engine opens its own transactions afterwards.

    Raises:
        HTTPException: If token is invalid or user not found
    """
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    with request.app.state.session_factory() as db:
        user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_principal(user: CurrentUserDep) -> Principal:
    return Principal(user_id=user.id, role=user.role)


PrincipalDep = Annotated[Principal, Depends(get_principal)]


def require_roles(*roles: Role) -> Callable[[Principal], Principal]:
    """Build a dependency that only lets the given roles through."""
    allowed = frozenset(roles)

    def _check(principal: PrincipalDep) -> Principal:
        if principal.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return principal

    return _check


AdminDep = Annotated[Principal, Depends(require_roles(Role.ADMIN))]
MemberDep = Annotated[Principal, Depends(require_roles(Role.STUDENT, Role.LEADER))]
