from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from pymongo import AsyncMongoClient

if TYPE_CHECKING:
    from notesapp.config import Config
    from notesapp.core.modules.auth.hasher import PasswordHasher
    from notesapp.core.modules.auth.tokens import TokenService
    from notesapp.core.modules.user.store import UserStore


class Service:
    """Base class for components with startup/shutdown hooks."""

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""


class Services:
    """Service registry, wired by constructor injection."""

    def __init__(self, users: UserStore, hasher: PasswordHasher, tokens: TokenService) -> None:
        from notesapp.core.modules.auth.service import AuthService  # noqa: PLC0415

        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.auth = AuthService(users, hasher, tokens)
        # Only components with lifecycle hooks are started and stopped
        self._services: list[Service] = [s for s in (users, hasher, tokens) if isinstance(s, Service)]

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services in reverse order."""
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing services and the database connection that backs them."""

    services: Services
    mongo_client: AsyncMongoClient[dict[str, Any]] | None

    def __init__(self, services: Services, mongo_client: AsyncMongoClient[dict[str, Any]] | None = None) -> None:
        self.services = services
        self.mongo_client = mongo_client

    @classmethod
    def from_config(cls, config: Config) -> Core:
        """Connect to MongoDB and wire the production implementations."""
        from notesapp.core.modules.auth.hasher import BcryptPasswordHasher  # noqa: PLC0415
        from notesapp.core.modules.auth.tokens import JwtTokenService  # noqa: PLC0415
        from notesapp.core.modules.counter.service import CounterService  # noqa: PLC0415
        from notesapp.core.modules.user.store import MongoUserStore  # noqa: PLC0415

        mongo_client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(
            host=config.db_host,
            port=config.db_port,
            username=config.db_user,
            password=config.db_password,
            tls=config.use_tls,
            tz_aware=True,
        )
        database = mongo_client.get_database(config.db_name)
        services = Services(
            users=MongoUserStore(database, CounterService(database)),
            hasher=BcryptPasswordHasher(),
            tokens=JwtTokenService(config.jwt_secret),
        )
        return cls(services, mongo_client)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
