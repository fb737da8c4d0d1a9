"""Authentication request and response schemas."""

from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    """Schema for registering a new account."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=40)
    fullname: str | None = Field(default=None, max_length=40)


class LogInRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=40)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TelegramSignUpRequest(BaseModel):
    """Schema for registering an account bound to a Telegram chat."""

    telegram_chat_id: int
    telegram_username: str | None = Field(default=None, max_length=40)
    fullname: str = Field(min_length=1, max_length=40)


class TelegramLogInRequest(BaseModel):
    telegram_chat_id: int
