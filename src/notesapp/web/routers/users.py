from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from notesapp.web.deps import AUTH_COOKIE, AppDep, UserIdDep
from notesapp.web.openapi import ApiResponse, ErrorResponse, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


class RegisterRequest(BaseModel):
    """Request to register a new user."""

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address, unique across users")
    password: str = Field(..., description="Plaintext password, stored only as a hash")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Email address of the account")
    password: str = Field(..., description="Password for authentication")


@router.post(
    "/",
    summary="Register user",
    description="Create a new user account.",
    operation_id="registerUser",
    status_code=201,
    responses={
        201: {"description": "User created successfully"},
        400: {"model": ErrorResponse, "description": "Malformed request"},
        409: {"model": ErrorResponse, "description": "User already exists"},
    },
)
async def register(register_data: RegisterRequest, app: AppDep) -> UserResponse:
    user = await app.register(register_data.name, register_data.email, register_data.password)
    return UserResponse(success=True, message="User created successfully", user=user)


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with email and password. The session token is set as an http-only cookie.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Malformed request"},
        401: {"model": ErrorResponse, "description": "Incorrect password"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> ApiResponse:
    """Authenticate user and hand out a session cookie."""
    issued = await app.login(login_data.email, login_data.password)

    response.set_cookie(
        key=AUTH_COOKIE,
        value=issued.token,
        expires=issued.expires_at,
        httponly=True,
        secure=True,
    )

    return ApiResponse(success=True, message="User logged in successfully")


@router.get(
    "/me",
    summary="Get current user",
    description="Get the profile of the user the session cookie belongs to.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User no longer exists"},
    },
)
async def get_current_user(app: AppDep, user_id: UserIdDep) -> UserResponse:
    user = await app.get_current_user(user_id)
    return UserResponse(success=True, message="User fetched successfully", user=user)
