# src/decisionboard/repositories/base.py
"""
Storage Repository - Abstract Interface (Port)

Defines the contract every entity store implementation must follow.
Id-keyed lookups and mutations return None for missing entities instead
of raising; callers map that to a not-found response.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from ..core.models import ActionItem, Decision, Notification, Recording, User
from ..schemas import (
    ActionItemCreate,
    DecisionCreate,
    NotificationCreate,
    RecordingCreate,
    UserCreate,
)


class DuplicateUsernameError(ValueError):
    """Raised when a username is already taken."""


class StorageRepository(ABC):
    """
    Abstract interface (Port) for Decision Board data access.
    """

    # --- Users ---

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    def create_user(self, user: UserCreate) -> User:
        """
        Create a user.

        Raises:
            DuplicateUsernameError: if the username already exists
        """
        pass

    # --- Decisions ---

    @abstractmethod
    def get_decision(self, decision_id: int) -> Optional[Decision]:
        pass

    @abstractmethod
    def list_decisions(self, limit: Optional[int] = None) -> List[Decision]:
        """List decisions, newest first."""
        pass

    @abstractmethod
    def create_decision(self, decision: DecisionCreate) -> Decision:
        pass

    # --- Action items ---

    @abstractmethod
    def get_action_item(self, item_id: int) -> Optional[ActionItem]:
        pass

    @abstractmethod
    def list_action_items(
        self,
        completed: Optional[bool] = None,
        decision_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[ActionItem]:
        """
        List action items ordered by ascending due date.

        Args:
            completed: Only items with this completion state
            decision_id: Only items linked to this decision
            limit: Maximum number of results

        Returns:
            Items matching every supplied filter
        """
        pass

    @abstractmethod
    def create_action_item(self, item: ActionItemCreate) -> ActionItem:
        """Create an action item and a new_assignment notification for it."""
        pass

    @abstractmethod
    def update_action_item(self, item_id: int, **fields: Any) -> Optional[ActionItem]:
        """Shallow-merge fields into an action item. Last writer wins."""
        pass

    @abstractmethod
    def complete_action_item(self, item_id: int) -> Optional[ActionItem]:
        """Mark an item completed now and emit an item_completed notification."""
        pass

    @abstractmethod
    def get_overdue_action_items(self) -> List[ActionItem]:
        """Incomplete items whose due date is strictly before now."""
        pass

    # --- Notifications ---

    @abstractmethod
    def get_notification(self, notification_id: int) -> Optional[Notification]:
        pass

    @abstractmethod
    def list_notifications(
        self,
        read: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[Notification]:
        """List notifications, newest first."""
        pass

    @abstractmethod
    def create_notification(self, notification: NotificationCreate) -> Notification:
        pass

    @abstractmethod
    def mark_notification_as_read(self, notification_id: int) -> Optional[Notification]:
        pass

    def count_unread_notifications(self) -> int:
        """Get count of unread notifications."""
        return len(self.list_notifications(read=False))

    # --- Recordings ---

    @abstractmethod
    def get_recording(self, recording_id: str) -> Optional[Recording]:
        pass

    @abstractmethod
    def create_recording(self, recording: RecordingCreate) -> Recording:
        pass

    @abstractmethod
    def update_recording(self, recording_id: str, **fields: Any) -> Optional[Recording]:
        pass

    @abstractmethod
    def list_recordings(self, limit: Optional[int] = None) -> List[Recording]:
        """List recordings, newest first; undated recordings sort last."""
        pass
