"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from classflow.models.user import Role


class UserResponse(BaseModel):
    """Schema for the authenticated user's profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str | None
    full_name: str | None
    telegram_username: str | None
    telegram_chat_id: int | None
    role: Role
    notification_delay: int
    notifications_enabled: bool
    created_at: datetime


class UserSettingsUpdate(BaseModel):
    """Partial profile update; omitted fields stay unchanged."""

    full_name: str | None = Field(default=None, max_length=40)
    notification_delay: int | None = Field(default=None, ge=5, le=60)
    notifications_enabled: bool | None = None

    @field_validator("notification_delay", "notifications_enabled")
    @classmethod
    def reject_explicit_null(cls, value: int | bool | None) -> int | bool | None:
        # Defaults are not validated, so this only fires on an explicit null.
        if value is None:
            raise ValueError("may be omitted but not null")
        return value
