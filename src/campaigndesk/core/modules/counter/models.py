"""Persistent counters: tag prefix high-water marks and plain sequences."""

from enum import StrEnum

from campaigndesk.core.db import MongoModel


class CounterType(StrEnum):
    """Entities that use sequential human-readable codes."""

    CAMPAIGN = "campaign"


class Counter(MongoModel):
    """Atomic sequence counter.

    Indexed on counter_type - unique.
    """

    counter_type: CounterType
    seq: int = 0  # Current value; next number will be seq + 1


class TagCounter(MongoModel):
    """High-water mark of tag numbers for one prefix.

    Never lowered and never deleted, so a number is not handed out twice
    even after every tag using it has been removed.
    Indexed on prefix - unique.
    """

    prefix: str
    last_number: int = 0
