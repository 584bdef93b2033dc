"""Request/response schemas for the account endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    """New account details. Emptiness and length are checked by the account service."""

    username: str = Field(..., description="Unique login name")
    email: str = Field(..., description="Contact email address")
    password: str = Field(..., description="Plain-text password; only its hash is stored")
    display_name: str = Field(..., description="Name shown to other users")


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class UserRead(BaseModel):
    """User entry for the user list. password_hash is never exposed."""

    id: UUID
    username: str
    email: str
    display_name: str
    user_role: str
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
