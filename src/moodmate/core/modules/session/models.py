"""Session management models."""

from datetime import datetime
from typing import NewType

from pydantic import Field

from moodmate.core.db import MongoModel
from moodmate.utils import now

SessionToken = NewType("SessionToken", str)


class Session(MongoModel):
    """Login session, stored under its opaque token.

    Indexed on owner_key. owner_key always names an existing user;
    renaming a user rewrites owner_key and owner_email in place.
    """

    id: str = Field(alias="_id", serialization_alias="token")
    owner_key: str
    owner_email: str
    created_at: datetime = Field(default_factory=now)

    @property
    def token(self) -> SessionToken:
        return SessionToken(self.id)
