from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from moodmate.app import App
from moodmate.config import Config
from moodmate.errors import StoreError, UserError
from moodmate.utils import now
from moodmate.web.deps import SESSION_HEADER
from moodmate.web.error_handlers import (
    general_exception_handler,
    request_validation_handler,
    store_error_handler,
    user_error_handler,
)
from moodmate.web.openapi import set_custom_openapi
from moodmate.web.routers import auth_router, journal_router, mood_router, profile_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="MoodMate API", lifespan=lifespan)
    app.state.app = app_instance
    app.state.config = config

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Accept", "Content-Type", "Authorization", SESSION_HEADER],
            expose_headers=[SESSION_HEADER],
            max_age=60,
        )

    @app.get("/api/health", tags=["health"])
    async def health_check() -> dict[str, str]:
        return {"status": "OK", "message": "MoodMate API is running", "timestamp": now().isoformat()}

    app.include_router(auth_router, prefix="/api")
    app.include_router(profile_router, prefix="/api")
    app.include_router(journal_router, prefix="/api")
    app.include_router(mood_router, prefix="/api")

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
