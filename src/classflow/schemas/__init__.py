# src/classflow/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import (
    LogInRequest,
    SignUpRequest,
    TelegramLogInRequest,
    TelegramSignUpRequest,
    TokenResponse,
)
from .catalog import BuildingResponse, FacultyResponse, ProgramResponse, SubjectTypeResponse
from .group import (
    AssignLeaderRequest,
    GroupCreate,
    GroupCreated,
    GroupDetailsResponse,
    GroupSummaryResponse,
    JoinGroupRequest,
)
from .schedule import ScheduleEntryResponse, ScheduleUpload, ScheduleUploaded
from .user import UserResponse, UserSettingsUpdate

__all__ = [
    "LogInRequest", "SignUpRequest", "TelegramLogInRequest", "TelegramSignUpRequest",
    "TokenResponse",
    "BuildingResponse", "FacultyResponse", "ProgramResponse", "SubjectTypeResponse",
    "AssignLeaderRequest", "GroupCreate", "GroupCreated", "GroupDetailsResponse",
    "GroupSummaryResponse", "JoinGroupRequest",
    "ScheduleEntryResponse", "ScheduleUpload", "ScheduleUploaded",
    "UserResponse", "UserSettingsUpdate",
]
