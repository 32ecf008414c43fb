from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from pymongo import AsyncMongoClient

from moodmate.config import Config
from moodmate.core.core import Core
from moodmate.core.modules.journal.models import JournalEntry, JournalList
from moodmate.core.modules.mood.models import MoodPrediction
from moodmate.core.modules.session.models import SessionToken
from moodmate.core.modules.user.models import PublicUser, UserView


class App:
    """Facade for all application operations, validates sessions before delegating to Core."""

    def __init__(self, config: Config, mongo_client: AsyncMongoClient[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, mongo_client)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Auth and profile ===
    async def register(self, name: str | None, email: str | None, password: str | None) -> UserView:
        return await self._core.services.auth.register(name, email, password)

    async def login(self, email: str | None, password: str | None) -> tuple[SessionToken, PublicUser]:
        return await self._core.services.auth.login(email, password)

    async def logout(self, token: str | None) -> None:
        await self._core.services.auth.logout(token)

    async def get_profile(self, token: str | None) -> UserView:
        return await self._core.services.auth.get_profile(token)

    async def update_profile(self, token: str | None, name: str | None, email: str | None) -> UserView:
        return await self._core.services.auth.update_profile(token, name, email)

    async def change_password(self, token: str | None, current_password: str | None, new_password: str | None) -> UserView:
        return await self._core.services.auth.change_password(token, current_password, new_password)

    async def update_profile_photo(self, token: str | None, photo: str | None) -> UserView:
        return await self._core.services.auth.update_profile_photo(token, photo)

    async def reset_profile_photo(self, token: str | None) -> UserView:
        return await self._core.services.auth.reset_profile_photo(token)

    # === Journal ===
    async def create_journal_entry(
        self,
        token: str | None,
        note: str | None,
        mood: str | None,
        activities: list[str] | None = None,
        activity_details: dict[str, str] | None = None,
    ) -> JournalEntry:
        """Create a journal entry for the current user."""
        session = await self._core.services.access.ensure_session(token)
        return await self._core.services.journal.create_entry(session.owner_key, note, mood, activities, activity_details)

    async def list_journal_entries(self, token: str | None) -> JournalList:
        """List the current user's journal entries, newest first."""
        session = await self._core.services.access.ensure_session(token)
        return await self._core.services.journal.list_entries(session.owner_key)

    async def get_journal_entry(self, token: str | None, entry_id: str) -> JournalEntry:
        """Get a journal entry (owner only)."""
        session = await self._core.services.access.ensure_session(token)
        entry = await self._core.services.journal.get_entry(entry_id)
        self._core.services.access.ensure_journal_owner(session, entry)
        return entry

    async def delete_journal_entry(self, token: str | None, entry_id: str) -> None:
        """Delete a journal entry (owner only)."""
        session = await self._core.services.access.ensure_session(token)
        entry = await self._core.services.journal.get_entry(entry_id)
        self._core.services.access.ensure_journal_owner(session, entry)
        await self._core.services.journal.delete_entry(entry.id)

    # === Mood prediction ===
    async def predict_mood(self, token: str | None, text: str | None) -> MoodPrediction:
        """Predict mood of a text; the session is checked before the service is called."""
        await self._core.services.access.ensure_session(token)
        return await self._core.services.mood.predict(text)
