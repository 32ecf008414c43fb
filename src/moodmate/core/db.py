from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Self
from uuid import uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor
from pymongo.errors import DuplicateKeyError, PyMongoError

from moodmate.errors import StoreError

logger = structlog.get_logger(__name__)


def new_id() -> str:
    return uuid4().hex


class MongoModel(BaseModel):
    id: str = Field(alias="_id", serialization_alias="id", default_factory=new_id)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]


@contextmanager
def store_operation(operation: str, **context: Any) -> Iterator[None]:  # noqa: ANN401
    """Translate driver failures inside the block into StoreError.

    DuplicateKeyError passes through untouched, callers map it to a conflict.
    Only the operation name and the given context (keys, never payloads) are logged.
    """
    try:
        yield
    except DuplicateKeyError:
        raise
    except PyMongoError as e:
        logger.exception("store_operation_failed", operation=operation, **context)
        raise StoreError(operation) from e
