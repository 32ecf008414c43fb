from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from moodmate.core.db import MongoModel
from moodmate.utils import now


class User(MongoModel):
    """Identity record, stored under its normalized email.

    The document id is the identity key. It equals `email.lower()` at rest;
    only during a rename can two records exist for one identity.
    """

    id: str = Field(alias="_id", serialization_alias="id")
    name: str
    email: str
    password_hash: str  # bcrypt hash
    profile_photo: str | None = None  # absent from the document when unset
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    @property
    def key(self) -> str:
        return self.id

    def is_same_identity(self, other: "User") -> bool:
        """Check whether two records are copies of one identity left by a rename."""
        return self.created_at == other.created_at and self.password_hash == other.password_hash

    def to_mongo(self) -> dict[str, Any]:
        data = super().to_mongo()
        if data.get("profile_photo") is None:
            data.pop("profile_photo", None)
        return data


class PublicUser(BaseModel):
    """Minimal user view returned on login."""

    id: str = Field(..., description="Identity key (normalized email)")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")

    @classmethod
    def from_domain(cls, user: User) -> "PublicUser":
        return cls(id=user.id, name=user.name, email=user.email)


class UserView(PublicUser):
    """User profile (API representation, never includes the password hash)."""

    profile_photo: str | None = Field(None, description="Profile photo data, null when unset")
    created_at: datetime = Field(..., description="Registration time")
    updated_at: datetime = Field(..., description="Last modification time")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            profile_photo=user.profile_photo,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
