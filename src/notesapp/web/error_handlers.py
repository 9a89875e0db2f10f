import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from notesapp.errors import AuthenticationError, ConflictError, InternalError, NotFoundError

logger = structlog.get_logger(__name__)


def create_json_error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
    elif isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ConflictError):
        status_code = 409
    else:
        # Default for any other UserError subclass
        status_code = 400

    return create_json_error_response(status_code=status_code, message=str(exc))


async def request_validation_handler(_: Request, exc: Exception) -> Response:
    """Request bodies that do not parse into the expected shape are a 400."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    details = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in errors)
    return create_json_error_response(status_code=400, message=details or "Malformed request")


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected and internal errors (500), passing the error text through."""
    if isinstance(exc, InternalError):
        logger.error("internal_error", error=str(exc), error_type=type(exc).__name__)
    else:
        logger.exception("unexpected_error", error=str(exc))
    return create_json_error_response(status_code=500, message=str(exc) or "An unexpected error occurred.")
