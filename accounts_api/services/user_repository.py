"""Data access for the users table. No business rules; only queries and error mapping."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session

from accounts_api.models import User


class RepositoryError(Exception):
    """Raised when a users-table operation fails."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class DuplicateKeyError(RepositoryError):
    """Raised when an insert collides with an existing id or username."""


class NotFoundError(RepositoryError):
    """Raised when no user row matches the lookup."""


class StoreUnavailableError(RepositoryError):
    """Raised when the database is unreachable or the connection pool is exhausted."""


def _translate(e: SQLAlchemyError, action: str) -> RepositoryError:
    """Map a SQLAlchemy exception to the matching repository error."""
    if isinstance(e, IntegrityError):
        return DuplicateKeyError(f"Duplicate key while trying to {action}.", cause=e)
    if isinstance(e, (OperationalError, InterfaceError, PoolTimeoutError)):
        return StoreUnavailableError(f"Database unavailable while trying to {action}.", cause=e)
    return RepositoryError(f"Database error while trying to {action}.", cause=e)


class UserRepository:
    """Reads and writes User rows through an injected session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, user: User) -> None:
        """Insert a new user and commit."""
        try:
            self.session.add(user)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise _translate(e, "create user") from e

    def find_by_username(self, username: str) -> User:
        """Return the user with this exact username. Raises NotFoundError if absent."""
        try:
            user = self.session.scalars(
                select(User).where(User.username == username)
            ).first()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise _translate(e, "fetch user") from e
        if user is None:
            raise NotFoundError(f"No user with username {username!r}.")
        return user

    def update_last_login(self, user_id: UUID) -> datetime:
        """
        Set last_login to the current UTC time and return the value written.

        Touches only last_login (updated_at is left as is). Raises NotFoundError
        if the id no longer exists.
        """
        now = datetime.now(UTC)
        try:
            result = self.session.execute(
                update(User).where(User.id == user_id).values(last_login=now)
            )
            if result.rowcount == 0:
                self.session.rollback()
                raise NotFoundError(f"No user with id {user_id}.")
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise _translate(e, "update last login") from e
        return now

    def list_all(self) -> list[User]:
        """Return every user row. No pagination; order is not guaranteed."""
        try:
            return list(self.session.scalars(select(User)).all())
        except SQLAlchemyError as e:
            self.session.rollback()
            raise _translate(e, "list users") from e
