# src/decisionboard/core/__init__.py
"""
Core domain layer - entities and the clock they are stamped with.
"""

from .clock import Clock, SystemClock, to_utc
from .models import (
    ActionItem,
    Decision,
    Notification,
    NotificationType,
    Priority,
    Recording,
    RecordingStatus,
    User,
)

__all__ = [
    # Clock
    "Clock",
    "SystemClock",
    "to_utc",
    # Models
    "ActionItem",
    "Decision",
    "Notification",
    "NotificationType",
    "Priority",
    "Recording",
    "RecordingStatus",
    "User",
]
