"""User profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from classflow.api.v1.dependencies import CurrentUserDep, SessionDep
from classflow.models import User
from classflow.schemas.user import UserResponse, UserSettingsUpdate
from classflow.services import auth_service

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/settings", response_model=UserResponse)
def update_settings(
    payload: UserSettingsUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> User:
    """Update the caller's name and notification preferences."""
    return auth_service.update_settings(db, current_user, payload)
