from fastapi import APIRouter
from pydantic import BaseModel, Field

from moodmate.core.modules.user.models import UserView
from moodmate.web.deps import AppDep, SessionTokenDep
from moodmate.web.openapi import ApiResponse, ErrorResponse

router = APIRouter(prefix="/auth", tags=["profile"])


class UpdateProfileRequest(BaseModel):
    """Request to change name and email."""

    name: str | None = Field(None, description="New display name")
    email: str | None = Field(None, description="New email address")


class ProfilePhotoRequest(BaseModel):
    """Request to set the profile photo."""

    profile_photo: str | None = Field(None, alias="profilePhoto", description="Photo data (data URL or URL)")

    model_config = {"populate_by_name": True}


class ChangePasswordRequest(BaseModel):
    """Request to change user password."""

    current_password: str | None = Field(None, alias="currentPassword", description="Current password")
    new_password: str | None = Field(None, alias="newPassword", description="New password")

    model_config = {"populate_by_name": True}


@router.get(
    "/profile",
    summary="Get current user profile",
    description="Get the profile of the currently authenticated user.",
    operation_id="getProfile",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Session owner no longer exists"},
    },
)
async def get_profile(app: AppDep, token: SessionTokenDep) -> ApiResponse[UserView]:
    user = await app.get_profile(token)
    return ApiResponse(message="Profile retrieved", data=user)


@router.put(
    "/profile",
    summary="Update profile",
    description="Change name and email. Changing the email keeps existing sessions logged in.",
    operation_id="updateProfile",
    responses={
        200: {"description": "Profile updated"},
        400: {"model": ErrorResponse, "description": "Invalid input"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        409: {"model": ErrorResponse, "description": "Email already in use"},
    },
)
async def update_profile(request: UpdateProfileRequest, app: AppDep, token: SessionTokenDep) -> ApiResponse[UserView]:
    user = await app.update_profile(token, request.name, request.email)
    return ApiResponse(message="Profile updated", data=user)


@router.put(
    "/profile-photo",
    summary="Set profile photo",
    operation_id="updateProfilePhoto",
    responses={
        200: {"description": "Photo updated"},
        400: {"model": ErrorResponse, "description": "Invalid photo data"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def update_profile_photo(request: ProfilePhotoRequest, app: AppDep, token: SessionTokenDep) -> ApiResponse[UserView]:
    user = await app.update_profile_photo(token, request.profile_photo)
    return ApiResponse(message="Profile photo updated", data=user)


@router.delete(
    "/profile-photo",
    summary="Reset profile photo",
    description="Remove the profile photo field from the account.",
    operation_id="resetProfilePhoto",
    responses={
        200: {"description": "Photo removed"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def reset_profile_photo(app: AppDep, token: SessionTokenDep) -> ApiResponse[UserView]:
    user = await app.reset_profile_photo(token)
    return ApiResponse(message="Profile photo reset", data=user)


@router.put(
    "/change-password",
    summary="Change password",
    description="Change the password for the currently authenticated user.",
    operation_id="changePassword",
    responses={
        200: {"description": "Password changed successfully"},
        400: {"model": ErrorResponse, "description": "Invalid new password"},
        401: {"model": ErrorResponse, "description": "Not authenticated or invalid current password"},
    },
)
async def change_password(request: ChangePasswordRequest, app: AppDep, token: SessionTokenDep) -> ApiResponse[UserView]:
    user = await app.change_password(token, request.current_password, request.new_password)
    return ApiResponse(message="Password changed", data=user)
