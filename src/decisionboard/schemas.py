# src/decisionboard/schemas.py
"""
Pydantic models validating input before it reaches the store.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .core.clock import to_utc
from .core.models import NotificationType, RecordingStatus


# -------------------------
# Users
# -------------------------

class UserCreate(BaseModel):
    """Request model for creating a user."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# -------------------------
# Decisions
# -------------------------

class DecisionCreate(BaseModel):
    """Request model for creating a decision."""
    title: str = Field(..., min_length=1)
    description: str
    source: str = Field(..., min_length=1)  # Meeting Notes, Email, Document, ...
    team: Optional[str] = None


# -------------------------
# Action items
# -------------------------

class ActionItemCreate(BaseModel):
    """Request model for creating an action item."""
    title: str = Field(..., min_length=1)
    assignee: str
    due_date: datetime
    priority: str = Field(..., description="Urgent, High, Medium, Low")
    decision_id: Optional[int] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _coerce_due_date(cls, value):
        return to_utc(value)


# -------------------------
# Notifications
# -------------------------

class NotificationCreate(BaseModel):
    """Request model for creating a notification."""
    type: NotificationType
    message: str
    action_item_id: Optional[int] = None


# -------------------------
# Recordings
# -------------------------

class RecordingCreate(BaseModel):
    """Recording registered by the upload handler."""
    id: str = Field(..., min_length=1)
    title: Optional[str] = None
    transcription: Optional[str] = None
    duration: Optional[float] = Field(None, ge=0)
    status: RecordingStatus = RecordingStatus.PENDING
    created_at: Optional[datetime] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, value):
        return to_utc(value) if value is not None else None


# -------------------------
# Extraction
# -------------------------

class ExtractedDecision(BaseModel):
    title: str
    description: str


class ExtractedActionItem(BaseModel):
    title: str
    assignee: str
    due_date: datetime = Field(..., alias="dueDate")
    priority: str

    model_config = {"populate_by_name": True}

    @field_validator("due_date", mode="before")
    @classmethod
    def _coerce_due_date(cls, value):
        return to_utc(value)


class ExtractionResult(BaseModel):
    """Structured result returned by the language model extractor."""
    decision: ExtractedDecision
    action_items: List[ExtractedActionItem] = Field(default_factory=list, alias="actionItems")

    model_config = {"populate_by_name": True}
