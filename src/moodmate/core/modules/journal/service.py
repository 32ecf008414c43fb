from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from moodmate.core.core import Service
from moodmate.core.db import store_operation
from moodmate.core.modules.journal.models import JournalEntry, JournalList
from moodmate.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class JournalService(Service):
    """Stores mood journal entries per user."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("journals")

    async def on_start(self) -> None:
        """Create index for listing a user's entries newest first."""
        await self._collection.create_index([("owner_key", 1), ("created_at", -1)])

    async def create_entry(
        self,
        owner_key: str,
        note: str | None,
        mood: str | None,
        activities: list[str] | None = None,
        activity_details: dict[str, str] | None = None,
    ) -> JournalEntry:
        if not note or not note.strip() or not mood or not mood.strip():
            raise ValidationError("Note and mood are required")

        entry = JournalEntry(
            owner_key=owner_key,
            note=note,
            mood=mood,
            activities=activities or [],
            activity_details=activity_details or {},
        )
        with store_operation("journals.create", owner_key=owner_key):
            await self._collection.insert_one(entry.to_mongo())
        return entry

    async def list_entries(self, owner_key: str) -> JournalList:
        with store_operation("journals.list", owner_key=owner_key):
            items = await JournalEntry.list_cursor(self._collection.find({"owner_key": owner_key}).sort("created_at", -1))
        return JournalList(items=items, total=len(items))

    async def get_entry(self, entry_id: str) -> JournalEntry:
        with store_operation("journals.get", entry_id=entry_id):
            doc = await self._collection.find_one({"_id": entry_id})
        if doc is None:
            raise NotFoundError("Journal entry not found")
        return JournalEntry.model_validate(doc)

    async def delete_entry(self, entry_id: str) -> None:
        with store_operation("journals.delete", entry_id=entry_id):
            await self._collection.delete_one({"_id": entry_id})

    async def rewrite_owner(self, old_key: str, new_key: str) -> int:
        """Move all entries of a renamed user to the new key."""
        with store_operation("journals.rewrite_owner", old_key=old_key, new_key=new_key):
            result = await self._collection.update_many({"owner_key": old_key}, {"$set": {"owner_key": new_key}})
        logger.info("journals_rewritten", old_key=old_key, new_key=new_key, count=result.modified_count)
        return result.modified_count
