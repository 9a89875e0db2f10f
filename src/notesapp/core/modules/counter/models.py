"""Auto-incrementing counters for sequential numbering."""

from enum import StrEnum

from pydantic import Field

from notesapp.core.db import MongoModel


class CounterType(StrEnum):
    """Entities that receive sequential numeric ids."""

    USER = "user"


class Counter(MongoModel):
    """Atomic counter document, one per counter type.

    Uses MongoDB atomic operations to prevent duplicates.
    `_id` is the counter type itself.
    """

    id: CounterType = Field(alias="_id")
    seq: int = 0  # Current value; next number will be seq + 1
