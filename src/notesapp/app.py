from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from notesapp.core.core import Core
from notesapp.core.modules.auth.tokens import IssuedToken
from notesapp.core.modules.user.models import UserView


class App:
    """Facade for all application operations exposed over HTTP."""

    def __init__(self, core: Core) -> None:
        self._core = core

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def register(self, name: str, email: str, password: str) -> UserView:
        """Register a new user; the password hash never leaves the core."""
        user = await self._core.services.auth.register(name, email, password)
        return UserView.from_domain(user)

    async def login(self, email: str, password: str) -> IssuedToken:
        """Authenticate user and issue a session token."""
        return await self._core.services.auth.login(email, password)

    def authenticate(self, token: str | None) -> int:
        """Validate a session token and return the user id it belongs to."""
        return self._core.services.auth.authenticate(token)

    async def get_current_user(self, user_id: int) -> UserView:
        """Get profile of the authenticated user."""
        user = await self._core.services.auth.current_user(user_id)
        return UserView.from_domain(user)
