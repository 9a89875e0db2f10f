from pydantic import BaseModel, Field

from notesapp.core.modules.user.models import UserView


class ApiResponse(BaseModel):
    """Envelope shared by every JSON response."""

    success: bool = Field(..., description="Whether the call succeeded")
    message: str = Field(..., description="Human-readable result or error message")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"success": True, "message": "User logged in successfully"},
                {"success": False, "message": "User already exists"},
            ]
        }
    }


class UserResponse(ApiResponse):
    """Envelope carrying a user projection."""

    user: UserView = Field(..., description="The user, without credentials")


# Error bodies use the same envelope with success=false
ErrorResponse = ApiResponse
