# src/classflow/api/v1/endpoints/auth.py
"""Authentication endpoints: sign-up, log-in (email or Telegram) and current user."""

from __future__ import annotations

from fastapi import APIRouter, status

from classflow.api.v1.dependencies import CurrentUserDep, SessionDep
from classflow.core.security import create_access_token
from classflow.models import User
from classflow.schemas.auth import (
    LogInRequest,
    SignUpRequest,
    TelegramLogInRequest,
    TelegramSignUpRequest,
    TokenResponse,
)
from classflow.schemas.user import UserResponse
from classflow.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
def sign_up(payload: SignUpRequest, db: SessionDep) -> TokenResponse:
    """Register a student account and return an access token."""
    user = auth_service.sign_up(
        db,
        email=payload.email,
        password=payload.password,
        full_name=payload.fullname,
    )
    return TokenResponse(access_token=create_access_token(user.id))


@router.post("/login", response_model=TokenResponse)
def log_in(payload: LogInRequest, db: SessionDep) -> TokenResponse:
    """Exchange email and password for an access token."""
    user = auth_service.log_in(db, email=payload.email, password=payload.password)
    return TokenResponse(access_token=create_access_token(user.id))


@router.post(
    "/telegram/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
def sign_up_with_telegram(payload: TelegramSignUpRequest, db: SessionDep) -> TokenResponse:
    """Register a student account bound to a Telegram chat."""
    user = auth_service.sign_up_with_telegram(
        db,
        chat_id=payload.telegram_chat_id,
        full_name=payload.fullname,
        username=payload.telegram_username,
    )
    return TokenResponse(access_token=create_access_token(user.id))


@router.post("/telegram/login", response_model=TokenResponse)
def log_in_with_telegram(payload: TelegramLogInRequest, db: SessionDep) -> TokenResponse:
    user = auth_service.log_in_with_telegram(db, chat_id=payload.telegram_chat_id)
    return TokenResponse(access_token=create_access_token(user.id))


@router.get("/who", response_model=UserResponse)
def who_am_i(current_user: CurrentUserDep) -> User:
    return current_user
