from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from moodmate.app import App

SESSION_HEADER = "x-session-id"

session_scheme = APIKeyHeader(name=SESSION_HEADER, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_session_token(token: Annotated[str | None, Depends(session_scheme)] = None) -> str | None:
    """Read the session token from the x-session-id header.

    Validation happens in the use case, so a missing header is passed on as None.
    """
    return token or None


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionTokenDep = Annotated[str | None, Depends(get_session_token)]
