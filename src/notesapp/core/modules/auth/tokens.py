"""Stateless session tokens.

Tokens are JWTs signed with HS512. Nothing is stored server-side: a token is
valid while its signature checks out against the configured secret and its
expiry lies in the future. There is no revocation.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import NamedTuple

import jwt
import structlog
from pydantic import BaseModel

from notesapp.errors import AuthenticationError, InvalidTokenError, TokenIssuanceError
from notesapp.utils import now

logger = structlog.get_logger(__name__)

TOKEN_LIFETIME = timedelta(hours=24)


class IssuedToken(NamedTuple):
    token: str
    expires_at: datetime


class TokenClaims(BaseModel):
    """Claims recovered from a valid token."""

    subject: str
    issued_at: datetime
    expires_at: datetime

    @property
    def user_id(self) -> int:
        return int(self.subject)


class TokenService(ABC):
    """Issues and validates session tokens."""

    @abstractmethod
    def issue(self, user_id: int) -> IssuedToken:
        """Raises TokenIssuanceError if the token cannot be signed."""

    @abstractmethod
    def validate(self, token: str) -> TokenClaims:
        """Raises InvalidTokenError for malformed, forged or expired tokens."""

    def authenticate(self, token: str | None) -> int:
        """Resolve the user id a request's token attests to."""
        if not token:
            raise AuthenticationError("Missing or malformed session token")
        claims = self.validate(token)
        try:
            return claims.user_id
        except ValueError as e:
            logger.warning("token_subject_invalid", subject=claims.subject)
            raise InvalidTokenError from e


class JwtTokenService(TokenService):
    ALGORITHM = "HS512"

    def __init__(
        self,
        secret: str,
        lifetime: timedelta = TOKEN_LIFETIME,
        clock: Callable[[], datetime] = now,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret cannot be empty")
        self._secret = secret
        self._lifetime = lifetime
        self._clock = clock

    def issue(self, user_id: int) -> IssuedToken:
        issued_at = self._clock()
        expires_at = issued_at + self._lifetime
        payload = {"sub": str(user_id), "iat": issued_at, "exp": expires_at}
        try:
            token = jwt.encode(payload, self._secret, algorithm=self.ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            logger.error("token_sign_failed", user_id=user_id, error=str(e))
            raise TokenIssuanceError from e
        # JWT timestamps have second precision, report the expiry the client will see
        return IssuedToken(token, expires_at.replace(microsecond=0))

    def validate(self, token: str) -> TokenClaims:
        # Expiry is checked against the injected clock below, not the library's wall clock
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "iat", "exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidSignatureError as e:
            logger.warning("token_rejected", reason="bad_signature")
            raise InvalidTokenError from e
        except jwt.InvalidTokenError as e:
            logger.warning("token_rejected", reason="malformed", error=str(e))
            raise InvalidTokenError from e

        try:
            claims = TokenClaims(
                subject=payload["sub"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            )
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning("token_rejected", reason="malformed", error=str(e))
            raise InvalidTokenError from e

        if claims.expires_at <= self._clock():
            logger.info("token_rejected", reason="expired")
            raise InvalidTokenError
        return claims
