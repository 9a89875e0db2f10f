from abc import ABC, abstractmethod

import bcrypt
import structlog

from notesapp.errors import HashingError

logger = structlog.get_logger(__name__)

DEFAULT_ROUNDS = 10
MAX_PASSWORD_BYTES = 72  # bcrypt input limit


class PasswordMismatchError(Exception):
    """Plaintext does not reproduce the stored hash."""


class PasswordHasher(ABC):
    """One-way password hashing and verification.

    Both calls are CPU-bound and synchronous; async callers run them in a worker thread.
    """

    @abstractmethod
    def hash(self, password: str) -> str:
        """Return a self-describing hash string; raises HashingError on failure."""

    @abstractmethod
    def verify(self, password_hash: str, password: str) -> None:
        """Raise PasswordMismatchError unless `password` matches `password_hash`."""


class BcryptPasswordHasher(PasswordHasher):
    """bcrypt with a fixed work factor; salt and cost are embedded in each hash.

    Passwords longer than 72 UTF-8 bytes are never truncated: hashing them fails
    and verifying them never matches.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            logger.error("password_hash_failed", error="password too long", length=len(encoded))
            raise HashingError
        try:
            return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")
        except ValueError as e:
            logger.error("password_hash_failed", error=str(e))
            raise HashingError from e

    def verify(self, password_hash: str, password: str) -> None:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise PasswordMismatchError
        try:
            matches = bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError as e:
            # Unparseable stored hash can never match
            logger.warning("password_hash_invalid", error=str(e))
            raise PasswordMismatchError from e
        if not matches:
            raise PasswordMismatchError
