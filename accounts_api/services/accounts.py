"""Account flows: sign-up, login and user listing.

Every failure leaves this module as an AccountError carrying the HTTP status and
the message safe to show the client. Internal detail is logged here only.
"""

import logging
import uuid
from datetime import UTC, datetime

from accounts_api.core.security import (
    HashingError,
    VerificationError,
    hash_password,
    verify_password,
)
from accounts_api.models import User
from accounts_api.models.user import (
    DEFAULT_USER_ROLE,
    DISPLAY_NAME_MAX_LEN,
    EMAIL_MAX_LEN,
    USERNAME_MAX_LEN,
)
from accounts_api.schemas.user import LoginRequest, SignUpRequest, UserRead
from accounts_api.services.user_repository import (
    NotFoundError,
    RepositoryError,
    UserRepository,
)

logger = logging.getLogger(__name__)

SIGNUP_SUCCESS_MESSAGE = "User created successfully"
LOGIN_SUCCESS_MESSAGE = "Logged in successfully"
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"
NO_PASSWORD_MESSAGE = "User has no password stored"


class AccountError(Exception):
    """Base for account failures; status_code and message go to the client as-is."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AccountError):
    """A required sign-up field is empty or too long."""

    status_code = 400


class AuthenticationError(AccountError):
    """Login rejected: unknown user, wrong password, or no stored password."""

    status_code = 400


class InfrastructureError(AccountError):
    """Hashing, verification or storage failed. Message is generic."""

    status_code = 500


def _validate_signup(body: SignUpRequest) -> None:
    if not body.username.strip():
        raise ValidationError("Username cannot be empty")
    if not body.password.strip():
        raise ValidationError("Password cannot be empty")
    if not body.email.strip():
        raise ValidationError("Email cannot be empty")
    if not body.display_name.strip():
        raise ValidationError("Display name cannot be empty")
    if len(body.username) > USERNAME_MAX_LEN:
        raise ValidationError(f"Username must be at most {USERNAME_MAX_LEN} characters")
    if len(body.email) > EMAIL_MAX_LEN:
        raise ValidationError(f"Email must be at most {EMAIL_MAX_LEN} characters")
    if len(body.display_name) > DISPLAY_NAME_MAX_LEN:
        raise ValidationError(
            f"Display name must be at most {DISPLAY_NAME_MAX_LEN} characters"
        )


class AccountService:
    """Stateless per-request orchestration over a UserRepository."""

    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository

    def sign_up(self, body: SignUpRequest) -> str:
        """Validate, hash the password and store a new active user with role 'user'."""
        try:
            _validate_signup(body)
        except ValidationError as e:
            logger.info(
                "Sign-up rejected",
                extra={"username": body.username, "reason": e.message},
            )
            raise

        try:
            password_hash = hash_password(body.password)
        except HashingError as e:
            logger.error(
                "Failed to hash password",
                extra={"username": body.username},
                exc_info=e,
            )
            raise InfrastructureError("Failed to create user") from e

        now = datetime.now(UTC)
        user = User(
            id=uuid.uuid4(),
            username=body.username,
            email=body.email,
            password_hash=password_hash,
            display_name=body.display_name,
            user_role=DEFAULT_USER_ROLE,
            is_active=True,
            last_login=None,
            created_at=now,
            updated_at=now,
        )
        try:
            self.repository.create(user)
        except RepositoryError as e:
            logger.error(
                "Failed to insert user",
                extra={"username": user.username, "reason": e.message},
                exc_info=e,
            )
            raise InfrastructureError("Failed to create user") from e

        logger.info(
            "User registered",
            extra={"user_id": str(user.id), "username": user.username},
        )
        return SIGNUP_SUCCESS_MESSAGE

    def login(self, body: LoginRequest) -> str:
        """
        Check credentials and record the login time.

        Unknown username and wrong password produce the same error so callers
        cannot tell which usernames exist.
        """
        try:
            user = self.repository.find_by_username(body.username)
        except NotFoundError as e:
            logger.info(
                "Login rejected: unknown username",
                extra={"username": body.username},
            )
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE) from e
        except RepositoryError as e:
            logger.error(
                "Failed to fetch user for login",
                extra={"username": body.username, "reason": e.message},
                exc_info=e,
            )
            raise InfrastructureError("Login failed due to an internal error") from e

        if user.password_hash is None:
            logger.error(
                "User account is missing password hash",
                extra={"user_id": str(user.id), "username": user.username},
            )
            raise AuthenticationError(NO_PASSWORD_MESSAGE)

        try:
            is_valid = verify_password(body.password, user.password_hash)
        except VerificationError as e:
            logger.error(
                "Internal error during password verification",
                extra={"user_id": str(user.id)},
                exc_info=e,
            )
            raise InfrastructureError("Login failed due to an internal error") from e

        if not is_valid:
            logger.info(
                "Login rejected: incorrect password",
                extra={"user_id": str(user.id), "username": user.username},
            )
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        try:
            self.repository.update_last_login(user.id)
        except RepositoryError as e:
            logger.error(
                "Failed to update last login timestamp",
                extra={"user_id": str(user.id), "reason": e.message},
                exc_info=e,
            )
            raise InfrastructureError("Login failed due to an internal error") from e

        logger.info(
            "User logged in",
            extra={"user_id": str(user.id), "username": user.username},
        )
        return LOGIN_SUCCESS_MESSAGE

    def list_users(self) -> list[UserRead]:
        """Return all users with password hashes removed."""
        try:
            users = self.repository.list_all()
        except RepositoryError as e:
            logger.error(
                "Failed to load users",
                extra={"reason": e.message},
                exc_info=e,
            )
            raise InfrastructureError("Failed to fetch users") from e

        logger.info("Fetched user list", extra={"user_count": len(users)})
        return [UserRead.model_validate(u) for u in users]
