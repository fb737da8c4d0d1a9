"""Account sign-up, log-in and profile helpers."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from classflow.core import security
from classflow.core.errors import InvalidCredentials, UserAlreadyExists, UserNotFound
from classflow.models.user import Role, User
from classflow.schemas.user import UserSettingsUpdate

__all__ = [
    "get_user_by_email",
    "get_user_by_telegram_chat",
    "sign_up",
    "sign_up_with_telegram",
    "log_in",
    "log_in_with_telegram",
    "update_settings",
    "ensure_admin",
]

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == email.lower())).first()


def get_user_by_telegram_chat(db: Session, chat_id: int) -> User | None:
    return db.scalars(select(User).where(User.telegram_chat_id == chat_id)).first()


def sign_up(db: Session, *, email: str, password: str, full_name: str | None = None) -> User:
    """Persist a new student account."""
    if get_user_by_email(db, email) is not None:
        raise UserAlreadyExists()
    user = User(
        email=email.lower(),
        password_hash=security.hash_password(password),
        full_name=full_name,
        role=Role.STUDENT,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise UserAlreadyExists() from err
    db.refresh(user)
    logger.info("Registered user %d", user.id)
    return user


def sign_up_with_telegram(
    db: Session,
    *,
    chat_id: int,
    full_name: str,
    username: str | None = None,
) -> User:
    """Persist a student account identified only by its Telegram chat.

    Such accounts have no email or password and start with reminders off.
    """
    if get_user_by_telegram_chat(db, chat_id) is not None:
        raise UserAlreadyExists()
    user = User(
        telegram_chat_id=chat_id,
        telegram_username=username,
        full_name=full_name,
        role=Role.STUDENT,
        notifications_enabled=False,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise UserAlreadyExists() from err
    db.refresh(user)
    logger.info("Registered Telegram user %d", user.id)
    return user


def log_in(db: Session, *, email: str, password: str) -> User:
    """Return the account matching the credentials."""
    user = get_user_by_email(db, email)
    if user is None:
        raise UserNotFound()
    if user.password_hash is None or not security.verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


def log_in_with_telegram(db: Session, *, chat_id: int) -> User:
    user = get_user_by_telegram_chat(db, chat_id)
    if user is None:
        raise UserNotFound()
    return user


def update_settings(db: Session, user: User, update_data: UserSettingsUpdate) -> User:
    """Apply partial profile updates to an existing user."""
    update_dict = update_data.model_dump(exclude_unset=True)
    for key, value in update_dict.items():
        setattr(user, key, value)

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def ensure_admin(db: Session, email: str | None, password: str | None) -> User | None:
    """Create the configured administrator unless an account already uses the email."""
    if not email or not password:
        return None
    existing = get_user_by_email(db, email)
    if existing is not None:
        logger.warning("Admin bootstrap skipped: %s already exists", email)
        return existing
    admin = User(
        email=email.lower(),
        password_hash=security.hash_password(password),
        role=Role.ADMIN,
        notifications_enabled=False,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Bootstrapped administrator %s", email)
    return admin
