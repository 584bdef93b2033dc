"""Password hashing and verification (bcrypt)."""

import bcrypt

from accounts_api.core.config import settings

# bcrypt only reads the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


class HashingError(Exception):
    """Raised when bcrypt fails to hash a password."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class VerificationError(Exception):
    """Raised when a stored password hash is malformed and cannot be checked."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    cost = rounds if rounds is not None else settings.BCRYPT_ROUNDS
    try:
        salt = bcrypt.gensalt(rounds=cost)
        return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise HashingError("Password hashing failed.", cause=e) from e


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    A wrong password returns False. Raises VerificationError when the stored
    hash is not a valid bcrypt hash.
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError) as e:
        raise VerificationError("Stored password hash is malformed.", cause=e) from e
