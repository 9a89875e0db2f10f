"""Persistence for user records.

Every operation takes an optional `DbSession`. When a session is given the
operation joins it (and whatever transaction it carries); when it is `None`
the operation runs on the store's default connection. This is the only place
that rule lives.
"""

from abc import ABC, abstractmethod
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError
from pymongo.errors import PyMongoError

from notesapp.core.core import Service
from notesapp.core.db import DbSession
from notesapp.core.modules.counter.models import CounterType
from notesapp.core.modules.counter.service import CounterService
from notesapp.core.modules.user.models import User
from notesapp.utils import now

logger = structlog.get_logger(__name__)


class StoreError(Exception):
    """Storage failure other than a duplicate key or a missing record."""


class DuplicateKeyError(StoreError):
    """A record with the same unique key already exists."""


class RecordNotFoundError(StoreError):
    """No record matches the lookup."""


class UserStore(Service, ABC):
    """Create and look up user records."""

    @abstractmethod
    async def create(self, user: User, session: DbSession | None = None) -> User:
        """Insert a new user and return it with its assigned id and timestamps.

        Raises:
            DuplicateKeyError: If the email is already registered
            StoreError: On any other storage failure
        """

    @abstractmethod
    async def get_by_email(self, email: str, session: DbSession | None = None) -> User:
        """Raises RecordNotFoundError if no user has this email."""

    @abstractmethod
    async def get_by_id(self, user_id: int, session: DbSession | None = None) -> User:
        """Raises RecordNotFoundError if no user has this id."""


class MongoUserStore(UserStore):
    """User records in the `users` collection, unique on email."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]], counters: CounterService) -> None:
        self._collection = database.get_collection("users")
        self._counters = counters

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # Unique index makes concurrent registrations with the same email collide atomically
        await self._collection.create_index([("email", 1)], unique=True)
        logger.debug("user_store_started")

    async def create(self, user: User, session: DbSession | None = None) -> User:
        try:
            user_id = await self._counters.get_next_sequence(CounterType.USER, session=session)
            timestamp = now()
            record = user.model_copy(update={"id": user_id, "created_at": timestamp, "updated_at": timestamp})
            await self._collection.insert_one(record.to_mongo(), session=session)
        except MongoDuplicateKeyError as e:
            logger.debug("user_create_duplicate", email=user.email)
            raise DuplicateKeyError(f"User with email '{user.email}' already exists") from e
        except PyMongoError as e:
            logger.error("user_create_failed", error=str(e))
            raise StoreError(str(e)) from e
        return record

    async def get_by_email(self, email: str, session: DbSession | None = None) -> User:
        return await self._find_one({"email": email}, f"User with email '{email}' not found", session)

    async def get_by_id(self, user_id: int, session: DbSession | None = None) -> User:
        return await self._find_one({"_id": user_id}, f"User '{user_id}' not found", session)

    async def _find_one(self, query: dict[str, Any], not_found: str, session: DbSession | None) -> User:
        try:
            doc = await self._collection.find_one(query, session=session)
        except PyMongoError as e:
            logger.error("user_lookup_failed", error=str(e))
            raise StoreError(str(e)) from e
        if doc is None:
            raise RecordNotFoundError(not_found)
        return User.model_validate(doc)


class InMemoryUserStore(UserStore):
    """Dict-backed store with the same contract, for tests and local runs.

    Sessions are accepted and ignored.
    """

    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._next_id = 1

    async def create(self, user: User, session: DbSession | None = None) -> User:
        if any(u.email == user.email for u in self._users.values()):
            raise DuplicateKeyError(f"User with email '{user.email}' already exists")
        timestamp = now()
        record = user.model_copy(update={"id": self._next_id, "created_at": timestamp, "updated_at": timestamp})
        self._users[record.id] = record
        self._next_id += 1
        return record

    async def get_by_email(self, email: str, session: DbSession | None = None) -> User:
        user = next((u for u in self._users.values() if u.email == email), None)
        if user is None:
            raise RecordNotFoundError(f"User with email '{email}' not found")
        return user

    async def get_by_id(self, user_id: int, session: DbSession | None = None) -> User:
        if user_id not in self._users:
            raise RecordNotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]
