from collections.abc import Callable
from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from moodmate.core.core import Service
from moodmate.core.db import store_operation
from moodmate.core.modules.user.models import User
from moodmate.errors import ConflictError, NotFoundError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Credential store: identity records keyed by normalized email."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def has_user(self, key: str) -> bool:
        """Check if an identity exists under the key."""
        with store_operation("users.exists", key=key):
            return await self._collection.find_one({"_id": key}, {"_id": 1}) is not None

    async def find_user(self, key: str) -> User | None:
        with store_operation("users.get", key=key):
            doc = await self._collection.find_one({"_id": key})
        return User.model_validate(doc) if doc else None

    async def get_user(self, key: str) -> User:
        """Get identity by key, raise NotFoundError if absent."""
        user = await self.find_user(key)
        if user is None:
            raise NotFoundError(f"User '{key}' not found")
        return user

    async def create_user(self, user: User) -> User:
        """Insert a new identity, raise ConflictError if the key is taken."""
        try:
            with store_operation("users.create", key=user.key):
                await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise ConflictError("Email is already registered") from e
        return user

    async def put_user(self, user: User) -> User:
        """Upsert the full identity record under its key."""
        with store_operation("users.put", key=user.key):
            await self._collection.replace_one({"_id": user.key}, user.to_mongo(), upsert=True)
        return user

    async def update_fields(self, key: str, set_fields: dict[str, Any], unset_fields: list[str] | None = None) -> User:
        """Set and remove fields on an identity.

        Unsetting deletes the field from the document, which is distinct from
        setting it to an empty value.
        """
        update: dict[str, Any] = {}
        if set_fields:
            update["$set"] = set_fields
        if unset_fields:
            update["$unset"] = dict.fromkeys(unset_fields, "")
        with store_operation("users.update", key=key, fields=sorted([*set_fields, *(unset_fields or [])])):
            doc = await self._collection.find_one_and_update({"_id": key}, update, return_document=ReturnDocument.AFTER)
        if doc is None:
            raise NotFoundError(f"User '{key}' not found")
        return User.model_validate(doc)

    async def delete_user(self, key: str) -> None:
        with store_operation("users.delete", key=key):
            await self._collection.delete_one({"_id": key})

    async def rename_user(self, old_key: str, new_key: str, mutate: Callable[[User], User]) -> User:
        """Move an identity to a new key.

        Two phases: the mutated record is inserted under `new_key` first, and
        only after that insert succeeds is `old_key` deleted. A failure between
        the phases leaves both copies, never neither.

        Raises:
            NotFoundError: `old_key` does not exist
            ConflictError: `new_key` already holds another identity
        """
        current = await self.get_user(old_key)
        renamed = mutate(current).model_copy(update={"id": new_key})

        if new_key == old_key:
            return await self.put_user(renamed)

        try:
            with store_operation("users.rename.write_new", old_key=old_key, new_key=new_key):
                await self._collection.insert_one(renamed.to_mongo())
        except DuplicateKeyError as e:
            raise ConflictError("Email is already in use") from e

        with store_operation("users.rename.delete_old", old_key=old_key, new_key=new_key):
            await self._collection.delete_one({"_id": old_key})

        logger.info("user_renamed", old_key=old_key, new_key=new_key)
        return renamed

    async def resume_rename(self, old_key: str, new_key: str, mutate: Callable[[User], User]) -> User:
        """Finish a rename that stopped after write-new.

        The copy under `new_key` is updated with `mutate` and the leftover
        record under `old_key` is deleted. Callers check that both keys hold
        the same identity first.
        """
        current = await self.get_user(new_key)
        renamed = await self.put_user(mutate(current).model_copy(update={"id": new_key}))

        with store_operation("users.rename.delete_old", old_key=old_key, new_key=new_key):
            await self._collection.delete_one({"_id": old_key})

        logger.info("user_rename_resumed", old_key=old_key, new_key=new_key)
        return renamed
