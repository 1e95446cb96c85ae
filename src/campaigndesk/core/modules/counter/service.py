from typing import Any
from uuid import uuid4

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from campaigndesk.core.core import Service
from campaigndesk.core.modules.counter.models import CounterType, TagCounter


class CounterService(Service):
    """Service for atomic counters: campaign code sequences and tag prefix counters."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("counters")
        self._tag_collection = database.get_collection("tag_counters")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("counter_type", 1)], unique=True)
        await self._tag_collection.create_index([("prefix", 1)], unique=True)

    async def get_next_sequence(self, counter_type: CounterType) -> int:
        """Atomically increment and return the next sequence number for a type."""
        result = await self._collection.find_one_and_update(
            {"counter_type": counter_type},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(result["seq"])

    async def get_tag_counter(self, prefix: str) -> TagCounter | None:
        """Get the counter for a tag prefix, or None if nothing was allocated yet."""
        doc = await self._tag_collection.find_one({"prefix": prefix})
        if doc is None:
            return None
        return TagCounter.model_validate(doc)

    async def increment_tag_counter(self, prefix: str) -> int:
        """Atomically increment the prefix counter and return the new value.

        A missing counter is created as if it started at 0, so the first call returns 1.
        """
        result = await self._tag_collection.find_one_and_update(
            {"prefix": prefix},
            {"$inc": {"last_number": 1}, "$setOnInsert": {"_id": uuid4()}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(result["last_number"])

    async def raise_tag_counter(self, prefix: str, number: int) -> bool:
        """Raise the prefix counter to at least `number`, creating it if missing.

        Uses $max so a concurrent increment is never overwritten by a lower value.
        Returns True if the stored value changed.
        """
        result = await self._tag_collection.update_one(
            {"prefix": prefix},
            {"$max": {"last_number": number}, "$setOnInsert": {"_id": uuid4()}},
            upsert=True,
        )
        return result.modified_count > 0 or result.upserted_id is not None

    async def list_tag_counters(self) -> list[TagCounter]:
        """Get all tag counters ordered by prefix."""
        return await TagCounter.list_cursor(self._tag_collection.find().sort("prefix", 1))
