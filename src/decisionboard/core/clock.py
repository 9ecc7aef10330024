# src/decisionboard/core/clock.py
"""
Time source used by the store and the reminder scheduler.

Everything in Decision Board works with timezone-aware UTC datetimes.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Union


class Clock(ABC):
    """Abstract time source. Tests swap in a clock they can move forward."""

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def to_utc(value: Union[datetime, str]) -> datetime:
    """
    Coerce a datetime or ISO-8601 string into an aware UTC datetime.

    Naive values are taken to be UTC already. Raises ValueError for
    anything that cannot be parsed.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        raise ValueError(f"Not a timestamp: {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
