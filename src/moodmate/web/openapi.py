from typing import Any, Generic, TypeVar

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from moodmate.web.deps import SESSION_HEADER


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="MoodMate API",
            version="0.1.0",
            summary="Mood journal with session-based accounts",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionHeader": {
                "type": "apiKey",
                "in": "header",
                "name": SESSION_HEADER,
                "description": "Session token returned by /api/auth/login",
            },
        }

        # Apply security globally (will be overridden for public endpoints)
        openapi_schema["security"] = [{"SessionHeader": []}]

        public_endpoints = {
            ("GET", "/api/health"),
            ("POST", "/api/auth/register"),
            ("POST", "/api/auth/login"),
            ("POST", "/api/auth/logout"),
        }

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in public_endpoints:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"success": False, "message": "Invalid email or password", "type": "authentication_error"},
                {"success": False, "message": "Email is already registered", "type": "conflict"},
                {"success": False, "message": "Access denied", "type": "access_denied"},
            ]
        }
    }


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope."""

    success: bool = Field(True, description="Always true for successful responses")
    message: str = Field(..., description="Human-readable status message")
    data: T | None = Field(None, description="Response payload")
