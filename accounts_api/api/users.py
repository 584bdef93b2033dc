"""Sign-up, login and user list endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from accounts_api.core.database import get_db
from accounts_api.schemas.user import LoginRequest, SignUpRequest, UserRead
from accounts_api.services.accounts import AccountError, AccountService
from accounts_api.services.user_repository import UserRepository

router = APIRouter()


def get_user_repository(db: Annotated[Session, Depends(get_db)]) -> UserRepository:
    """Dependency: repository bound to the request's session."""
    return UserRepository(db)


def get_account_service(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> AccountService:
    """Dependency: account service over the request's repository."""
    return AccountService(repository)


def _to_http(e: AccountError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/signup", response_model=str)
def sign_up(
    body: SignUpRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> str:
    """Create an account with role 'user'. Username, password and email must be non-empty."""
    try:
        return service.sign_up(body)
    except AccountError as e:
        raise _to_http(e) from e


@router.post("/login", response_model=str)
def login(
    body: LoginRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> str:
    """Check username and password and record the login time. No token is issued."""
    try:
        return service.login(body)
    except AccountError as e:
        raise _to_http(e) from e


@router.get("/users", response_model=list[UserRead])
def list_users(
    service: Annotated[AccountService, Depends(get_account_service)],
) -> list[UserRead]:
    """List all users. Password hashes are not included."""
    try:
        return service.list_users()
    except AccountError as e:
        raise _to_http(e) from e
