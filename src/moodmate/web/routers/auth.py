from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from moodmate.core.modules.user.models import PublicUser, UserView
from moodmate.web.deps import SESSION_HEADER, AppDep, SessionTokenDep
from moodmate.web.openapi import ApiResponse, ErrorResponse

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    """Account registration request."""

    name: str | None = Field(None, description="Display name")
    email: str | None = Field(None, description="Email address, also the login identifier")
    password: str | None = Field(None, description="Password")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str | None = Field(None, description="Email for authentication")
    password: str | None = Field(None, description="Password for authentication")


class LoginData(BaseModel):
    """Authentication result."""

    session_id: str = Field(..., description="Session token, send it in the x-session-id header")
    user: PublicUser


@router.post(
    "/register",
    summary="Register account",
    description="Create an account. The email, lowercased, becomes the account identifier.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid input"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register(request: RegisterRequest, app: AppDep) -> ApiResponse[UserView]:
    user = await app.register(request.name, request.email, request.password)
    return ApiResponse(message="User registered", data=user)


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive a session token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(request: LoginRequest, app: AppDep, response: Response) -> ApiResponse[LoginData]:
    token, user = await app.login(request.email, request.password)
    response.headers[SESSION_HEADER] = token
    return ApiResponse(message="Login successful", data=LoginData(session_id=token, user=user))


@router.post(
    "/logout",
    summary="End session",
    description="Invalidate the current session. Succeeds even without a valid session.",
    operation_id="logout",
    responses={200: {"description": "Logged out"}},
)
async def logout(app: AppDep, token: SessionTokenDep) -> ApiResponse[None]:
    await app.logout(token)
    return ApiResponse(message="Logout successful")
