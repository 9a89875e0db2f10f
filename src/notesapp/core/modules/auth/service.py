import asyncio

import structlog

from notesapp.core.modules.auth.hasher import PasswordHasher, PasswordMismatchError
from notesapp.core.modules.auth.tokens import IssuedToken, TokenService
from notesapp.core.modules.user.models import User
from notesapp.core.modules.user.store import DuplicateKeyError, RecordNotFoundError, UserStore
from notesapp.errors import IncorrectPasswordError, UserAlreadyExistsError, UserNotFoundError

logger = structlog.get_logger(__name__)


class AuthService:
    """Registration and login on top of the user store, hasher and token service.

    Failures are terminal for the request: nothing here retries.
    """

    def __init__(self, users: UserStore, hasher: PasswordHasher, tokens: TokenService) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens

    async def register(self, name: str, email: str, password: str) -> User:
        """Create a user with a hashed password.

        Raises:
            HashingError: If the password cannot be hashed
            UserAlreadyExistsError: If the email is already registered
            StoreError: Any other storage failure, unchanged
        """
        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        try:
            user = await self._users.create(User(name=name, email=email, password_hash=password_hash))
        except DuplicateKeyError as e:
            raise UserAlreadyExistsError from e
        logger.info("user_registered", user_id=user.id)
        return user

    async def login(self, email: str, password: str) -> IssuedToken:
        """Check credentials and issue a session token.

        Unknown emails and wrong passwords are reported as different errors.
        """
        try:
            user = await self._users.get_by_email(email)
        except RecordNotFoundError as e:
            raise UserNotFoundError from e

        try:
            await asyncio.to_thread(self._hasher.verify, user.password_hash, password)
        except PasswordMismatchError as e:
            logger.info("login_rejected", user_id=user.id, reason="password_mismatch")
            raise IncorrectPasswordError from e

        issued = self._tokens.issue(user.id)
        logger.info("user_logged_in", user_id=user.id)
        return issued

    async def current_user(self, user_id: int) -> User:
        """Resolve an authenticated user id to its record."""
        try:
            return await self._users.get_by_id(user_id)
        except RecordNotFoundError as e:
            raise UserNotFoundError from e

    def authenticate(self, token: str | None) -> int:
        return self._tokens.authenticate(token)
