"""ORM model for user accounts."""

from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid

from accounts_api.models.base import Base

USERNAME_MAX_LEN = 100
EMAIL_MAX_LEN = 255
DISPLAY_NAME_MAX_LEN = 100
USER_ROLE_MAX_LEN = 100

DEFAULT_USER_ROLE = "user"


class User(Base):
    """
    User account. Created by sign-up; only last_login changes afterwards.

    password_hash is None for accounts that cannot log in with a password.
    updated_at is set at creation and is not touched by the last-login update.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True)
    username = Column(String(USERNAME_MAX_LEN), nullable=False, unique=True, index=True)
    email = Column(String(EMAIL_MAX_LEN), nullable=False, index=True)
    password_hash = Column(Text, nullable=True)
    display_name = Column(String(DISPLAY_NAME_MAX_LEN), nullable=False)
    user_role = Column(String(USER_ROLE_MAX_LEN), nullable=False, default=DEFAULT_USER_ROLE)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
