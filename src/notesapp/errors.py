from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class ConflictError(UserError):
    """Raised when a resource collides with an existing one."""


class UserAlreadyExistsError(ConflictError):
    def __init__(self, message: str = "User already exists") -> None:
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class IncorrectPasswordError(AuthenticationError):
    def __init__(self, message: str = "Incorrect password") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised for any session token that fails parsing, signature or expiry checks."""

    def __init__(self, message: str = "Invalid or expired session token") -> None:
        super().__init__(message)


class InternalError(Exception):
    """Server-side failure reported as 500 with its message."""


class HashingError(InternalError):
    def __init__(self, message: str = "Failed to hash password") -> None:
        super().__init__(message)


class TokenIssuanceError(InternalError):
    def __init__(self, message: str = "Failed to sign token") -> None:
        super().__init__(message)
