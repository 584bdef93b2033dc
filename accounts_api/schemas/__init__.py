"""Pydantic request/response schemas."""

from accounts_api.schemas.health import HealthResponse
from accounts_api.schemas.user import LoginRequest, SignUpRequest, UserRead

__all__ = ["HealthResponse", "LoginRequest", "SignUpRequest", "UserRead"]
