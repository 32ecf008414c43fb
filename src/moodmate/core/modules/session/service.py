import re
import secrets
import time
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from moodmate.core.core import Service
from moodmate.core.db import store_operation
from moodmate.core.modules.session.models import Session, SessionToken

logger = structlog.get_logger(__name__)

TOKEN_RE = re.compile(r"^[0-9a-f]{1,16}_[A-Za-z0-9_-]{43}$")


def generate_token() -> SessionToken:
    """Millisecond timestamp (hex) plus 256 random bits."""
    return SessionToken(f"{time.time_ns() // 1_000_000:x}_{secrets.token_urlsafe(32)}")


class SessionService(Service):
    """Issues, validates and revokes sessions, and moves them between owners on rename."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("owner_key", 1)])
        ttl_days = self.core.config.session_ttl_days
        if ttl_days:
            await self._collection.create_index([("created_at", 1)], expireAfterSeconds=ttl_days * 24 * 60 * 60)

    async def issue(self, owner_key: str, owner_email: str) -> SessionToken:
        token = generate_token()
        session = Session(id=token, owner_key=owner_key, owner_email=owner_email)
        with store_operation("sessions.issue", owner_key=owner_key):
            await self._collection.insert_one(session.to_mongo())
        logger.debug("session_issued", owner_key=owner_key)
        return token

    async def validate(self, token: str | None) -> Session | None:
        """Look up a session; None when the token is missing, malformed or unknown.

        Store failures are raised, never reported as None.
        """
        if not token or not TOKEN_RE.fullmatch(token):
            return None
        with store_operation("sessions.validate"):
            doc = await self._collection.find_one({"_id": token})
        return Session.model_validate(doc) if doc else None

    async def revoke(self, token: str | None) -> None:
        """Delete the session if present. Revoking an unknown token is a no-op."""
        if not token:
            return
        with store_operation("sessions.revoke"):
            await self._collection.delete_one({"_id": token})

    async def find_by_owner(self, owner_key: str) -> list[Session]:
        with store_operation("sessions.find_by_owner", owner_key=owner_key):
            return await Session.list_cursor(self._collection.find({"owner_key": owner_key}))

    async def rewrite_owner(self, old_key: str, new_key: str, new_email: str) -> int:
        """Point every session of `old_key` at `new_key`; returns how many were rewritten.

        Sent as a single update_many so all sessions move in one write request.
        """
        with store_operation("sessions.rewrite_owner", old_key=old_key, new_key=new_key):
            result = await self._collection.update_many(
                {"owner_key": old_key},
                {"$set": {"owner_key": new_key, "owner_email": new_email}},
            )
        logger.info("sessions_rewritten", old_key=old_key, new_key=new_key, count=result.modified_count)
        return result.modified_count
