from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

SSLMode = Literal["disable", "allow", "prefer", "require", "verify-ca", "verify-full"]


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    log_level: str = "info"
    debug: bool = False
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    cors_origins: list[str] = []
    jwt_secret: str  # HMAC key for session tokens, shared by every worker
    db_host: str
    db_port: int
    db_user: str
    db_password: str
    db_name: str
    db_ssl_mode: SSLMode = "disable"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "NOTES_",
        "extra": "ignore",
    }

    @field_validator("jwt_secret", "db_host", "db_user", "db_password", "db_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("db_port")
    @classmethod
    def _valid_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError("must be a valid TCP port")
        return value

    @property
    def use_tls(self) -> bool:
        """Whether the database connection must be encrypted."""
        return self.db_ssl_mode in ("require", "verify-ca", "verify-full")
