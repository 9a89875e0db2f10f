from typing import Any

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from notesapp.core.core import Service
from notesapp.core.db import DbSession
from notesapp.core.modules.counter.models import Counter, CounterType


class CounterService(Service):
    """Hands out monotonically increasing numbers per counter type."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__()
        self._collection = database.get_collection("counters")

    async def get_next_sequence(self, counter_type: CounterType, session: DbSession | None = None) -> int:
        """Atomically increment and return the next sequence number for a type."""
        result = await self._collection.find_one_and_update(
            {"_id": counter_type},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
            session=session,
        )

        # An upserted counter starts at 1
        return Counter.model_validate(result).seq
