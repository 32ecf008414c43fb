from datetime import datetime

from pydantic import BaseModel, Field

from moodmate.core.db import MongoModel
from moodmate.utils import now


class JournalEntry(MongoModel):
    """Mood journal entry owned by a user.

    Indexed on (owner_key, created_at desc).
    """

    owner_key: str
    note: str
    mood: str
    activities: list[str] = Field(default_factory=list)
    activity_details: dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class JournalList(BaseModel):
    """Journal entries of one user, newest first."""

    items: list[JournalEntry] = Field(..., description="Journal entries")
    total: int = Field(..., description="Number of entries", ge=0)
