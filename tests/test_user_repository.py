"""Unit tests for accounts_api.services.user_repository against in-memory SQLite and mocked sessions."""

import unittest
import uuid
from datetime import UTC, datetime
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError, ProgrammingError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from accounts_api.models import Base, User
from accounts_api.services.user_repository import (
    DuplicateKeyError,
    NotFoundError,
    RepositoryError,
    StoreUnavailableError,
    UserRepository,
)


def _as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo; stored values are UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _user(username: str = "alice", **kwargs: object) -> User:
    """Build a minimal User for tests."""
    now = datetime.now(UTC)
    defaults = {
        "id": uuid.uuid4(),
        "email": f"{username}@example.com",
        "password_hash": "$2b$04$abcdefghijklmnopqrstuuJ0hFQh1Kq4wM8d6l7wvGm1xJ1c5F1Wm",
        "display_name": username.title(),
        "user_role": "user",
        "is_active": True,
        "last_login": None,
        "created_at": now,
        "updated_at": now,
    }
    defaults.update(kwargs)
    return User(username=username, **defaults)


class SQLiteRepositoryTestCase(unittest.TestCase):
    """Fresh in-memory database per test."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)
        self.session = self.Session()
        self.repo = UserRepository(self.session)

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()


class TestCreate(SQLiteRepositoryTestCase):
    """create inserts rows and reports duplicate usernames or ids."""

    def test_create_then_find(self) -> None:
        user = _user("alice")
        self.repo.create(user)
        found = UserRepository(self.Session()).find_by_username("alice")
        self.assertEqual(found.id, user.id)
        self.assertEqual(found.email, "alice@example.com")
        self.assertIsNone(found.last_login)

    def test_duplicate_username(self) -> None:
        self.repo.create(_user("alice"))
        with self.assertRaises(DuplicateKeyError):
            self.repo.create(_user("alice"))
        # Session is usable again after the rollback.
        self.repo.create(_user("bob"))
        self.assertEqual(len(self.repo.list_all()), 2)

    def test_duplicate_id(self) -> None:
        shared = uuid.uuid4()
        self.repo.create(_user("alice", id=shared))
        other = UserRepository(self.Session())
        with self.assertRaises(DuplicateKeyError):
            other.create(_user("bob", id=shared))

    def test_duplicate_email_allowed(self) -> None:
        self.repo.create(_user("alice", email="shared@example.com"))
        self.repo.create(_user("bob", email="shared@example.com"))
        self.assertEqual(len(self.repo.list_all()), 2)


class TestFindByUsername(SQLiteRepositoryTestCase):
    """find_by_username matches exactly and raises NotFoundError otherwise."""

    def test_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.repo.find_by_username("ghost")

    def test_exact_match_only(self) -> None:
        self.repo.create(_user("alice"))
        with self.assertRaises(NotFoundError):
            self.repo.find_by_username("Alice")


class TestUpdateLastLogin(SQLiteRepositoryTestCase):
    """update_last_login sets last_login only, and fails for unknown ids."""

    def test_sets_timestamp_and_leaves_updated_at(self) -> None:
        user = _user("alice")
        self.repo.create(user)
        before = datetime.now(UTC)
        written = self.repo.update_last_login(user.id)
        self.assertGreaterEqual(written, before)

        fresh = UserRepository(self.Session()).find_by_username("alice")
        self.assertGreaterEqual(_as_utc(fresh.last_login), before)
        self.assertEqual(_as_utc(fresh.updated_at), _as_utc(user.updated_at))

    def test_repeated_calls_never_go_backwards(self) -> None:
        user = _user("alice")
        self.repo.create(user)
        first = self.repo.update_last_login(user.id)
        second = self.repo.update_last_login(user.id)
        self.assertGreaterEqual(second, first)
        fresh = UserRepository(self.Session()).find_by_username("alice")
        self.assertEqual(_as_utc(fresh.last_login), second)

    def test_unknown_id(self) -> None:
        with self.assertRaises(NotFoundError):
            self.repo.update_last_login(uuid.uuid4())


class TestListAll(SQLiteRepositoryTestCase):
    """list_all returns every row; empty table gives an empty list."""

    def test_empty(self) -> None:
        self.assertEqual(self.repo.list_all(), [])

    def test_all_rows(self) -> None:
        for name in ("alice", "bob", "carol"):
            self.repo.create(_user(name))
        names = sorted(u.username for u in self.repo.list_all())
        self.assertEqual(names, ["alice", "bob", "carol"])


class TestErrorMapping(unittest.TestCase):
    """Driver and pool failures become typed repository errors and roll back."""

    def test_operational_error_is_store_unavailable(self) -> None:
        session = MagicMock()
        session.scalars.side_effect = OperationalError("SELECT", {}, Exception("down"))
        with self.assertRaises(StoreUnavailableError):
            UserRepository(session).list_all()
        session.rollback.assert_called_once()

    def test_pool_timeout_is_store_unavailable(self) -> None:
        session = MagicMock()
        session.commit.side_effect = PoolTimeoutError("QueuePool limit reached")
        with self.assertRaises(StoreUnavailableError):
            UserRepository(session).create(_user("alice"))
        session.rollback.assert_called_once()

    def test_other_errors_are_generic(self) -> None:
        session = MagicMock()
        session.execute.side_effect = ProgrammingError("UPDATE", {}, Exception("bad sql"))
        with self.assertRaises(RepositoryError) as ctx:
            UserRepository(session).update_last_login(uuid.uuid4())
        self.assertNotIsInstance(ctx.exception, (StoreUnavailableError, NotFoundError))
        self.assertIsInstance(ctx.exception.cause, ProgrammingError)


if __name__ == "__main__":
    unittest.main()
