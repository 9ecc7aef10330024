# src/decisionboard/core/models.py
"""
Domain models for Decision Board.

These are pure data classes representing the core domain entities.
They are storage-agnostic; the store hands out fresh instances on every
mutation so previously returned objects are never changed underneath a caller.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class NotificationType(str, Enum):
    """Types of notifications."""
    ACTION_REMINDER = "action_reminder"
    OVERDUE_REMINDER = "overdue_reminder"
    NEW_ASSIGNMENT = "new_assignment"
    ITEM_COMPLETED = "item_completed"


class RecordingStatus(str, Enum):
    """Transcription pipeline states."""
    PENDING = "pending"
    TRANSCRIBING = "transcribing"
    COMPLETED = "completed"
    FAILED = "failed"


class Priority(str, Enum):
    """Well-known priorities. Stored priority is free text."""
    URGENT = "Urgent"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass
class User:
    """User entity."""
    id: int
    username: str
    password: str

    def to_dict(self) -> Dict[str, Any]:
        # Never echo the password back out
        return {"id": self.id, "username": self.username}


@dataclass
class Decision:
    """A recorded outcome, usually extracted from a meeting."""
    id: int
    title: str
    description: str
    source: str
    created_at: datetime
    team: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "source": self.source,
            "team": self.team,
            "created_at": _iso(self.created_at),
        }


@dataclass
class ActionItem:
    """A task with an assignee, due date and completion state."""
    id: int
    title: str
    assignee: str
    due_date: datetime
    priority: str
    created_at: datetime
    decision_id: Optional[int] = None
    completed: bool = False
    completed_at: Optional[datetime] = None

    def is_overdue(self, now: datetime) -> bool:
        return not self.completed and self.due_date < now

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "decision_id": self.decision_id,
            "assignee": self.assignee,
            "due_date": _iso(self.due_date),
            "completed": self.completed,
            "completed_at": _iso(self.completed_at),
            "priority": self.priority,
            "created_at": _iso(self.created_at),
        }


@dataclass
class Notification:
    """Informational record about a system event."""
    id: int
    type: NotificationType
    message: str
    created_at: datetime
    action_item_id: Optional[int] = None
    read: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "action_item_id": self.action_item_id,
            "message": self.message,
            "read": self.read,
            "created_at": _iso(self.created_at),
        }


@dataclass
class Recording:
    """Uploaded audio asset moving through transcription."""
    id: str
    status: RecordingStatus = RecordingStatus.PENDING
    title: Optional[str] = None
    transcription: Optional[str] = None
    duration: Optional[float] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "transcription": self.transcription,
            "duration": self.duration,
            "status": self.status.value,
            "created_at": _iso(self.created_at),
        }
