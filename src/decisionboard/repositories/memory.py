# src/decisionboard/repositories/memory.py
"""
In-memory implementation of StorageRepository.

State is volatile and owned by the instance, so every test (or process)
gets a clean store by constructing a new one. A re-entrant lock makes each
operation atomic with respect to APScheduler worker threads.
"""

import itertools
import logging
import threading
from dataclasses import fields as dataclass_fields, replace
from typing import Any, Dict, Iterable, List, Optional, TypeVar

from ..core.clock import Clock, SystemClock, to_utc
from ..core.models import (
    ActionItem,
    Decision,
    Notification,
    NotificationType,
    Recording,
    RecordingStatus,
    User,
)
from ..schemas import (
    ActionItemCreate,
    DecisionCreate,
    NotificationCreate,
    RecordingCreate,
    UserCreate,
)
from .base import DuplicateUsernameError, StorageRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _truncate(items: List[T], limit: Optional[int]) -> List[T]:
    return items[:limit] if limit is not None else items


def _check_fields(entity_type: type, updates: Dict[str, Any], protected: Iterable[str]) -> None:
    known = {f.name for f in dataclass_fields(entity_type)}
    for key in updates:
        if key not in known or key in protected:
            raise ValueError(f"Cannot update {entity_type.__name__}.{key}")


class InMemoryStorage(StorageRepository):
    """Dictionary-backed entity store with per-kind id sequences."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()
        self._lock = threading.RLock()

        self._users: Dict[int, User] = {}
        self._decisions: Dict[int, Decision] = {}
        self._action_items: Dict[int, ActionItem] = {}
        self._notifications: Dict[int, Notification] = {}
        self._recordings: Dict[str, Recording] = {}

        self._user_ids = itertools.count(1)
        self._decision_ids = itertools.count(1)
        self._action_item_ids = itertools.count(1)
        self._notification_ids = itertools.count(1)

    @property
    def clock(self) -> Clock:
        return self._clock

    # --- Users ---

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, user: UserCreate) -> User:
        with self._lock:
            if self.get_user_by_username(user.username) is not None:
                raise DuplicateUsernameError(f"Username already exists: {user.username}")
            entity = User(id=next(self._user_ids), username=user.username, password=user.password)
            self._users[entity.id] = entity
        return entity

    # --- Decisions ---

    def get_decision(self, decision_id: int) -> Optional[Decision]:
        return self._decisions.get(decision_id)

    def list_decisions(self, limit: Optional[int] = None) -> List[Decision]:
        with self._lock:
            decisions = list(self._decisions.values())
        decisions.sort(key=lambda d: (d.created_at, d.id), reverse=True)
        return _truncate(decisions, limit)

    def create_decision(self, decision: DecisionCreate) -> Decision:
        with self._lock:
            entity = Decision(
                id=next(self._decision_ids),
                title=decision.title,
                description=decision.description,
                source=decision.source,
                team=decision.team,
                created_at=self._clock.now(),
            )
            self._decisions[entity.id] = entity
        return entity

    # --- Action items ---

    def get_action_item(self, item_id: int) -> Optional[ActionItem]:
        return self._action_items.get(item_id)

    def list_action_items(
        self,
        completed: Optional[bool] = None,
        decision_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[ActionItem]:
        with self._lock:
            items = list(self._action_items.values())

        if completed is not None:
            items = [item for item in items if item.completed == completed]
        if decision_id is not None:
            items = [item for item in items if item.decision_id == decision_id]

        items.sort(key=lambda item: (item.due_date, item.id))
        return _truncate(items, limit)

    def create_action_item(self, item: ActionItemCreate) -> ActionItem:
        with self._lock:
            entity = ActionItem(
                id=next(self._action_item_ids),
                title=item.title,
                decision_id=item.decision_id,
                assignee=item.assignee,
                due_date=to_utc(item.due_date),
                priority=item.priority,
                created_at=self._clock.now(),
            )
            self._action_items[entity.id] = entity

            self.create_notification(NotificationCreate(
                type=NotificationType.NEW_ASSIGNMENT,
                action_item_id=entity.id,
                message=f"New action item assigned: {entity.title}",
            ))
        return entity

    def update_action_item(self, item_id: int, **fields: Any) -> Optional[ActionItem]:
        _check_fields(ActionItem, fields, protected=("id", "created_at"))
        if "due_date" in fields:
            fields["due_date"] = to_utc(fields["due_date"])
        if fields.get("completed_at") is not None:
            fields["completed_at"] = to_utc(fields["completed_at"])

        with self._lock:
            current = self._action_items.get(item_id)
            if current is None:
                return None

            # completed <=> completed_at
            if "completed" in fields:
                if not fields["completed"]:
                    fields["completed_at"] = None
                elif fields.get("completed_at") is None:
                    fields["completed_at"] = current.completed_at or self._clock.now()
            elif "completed_at" in fields:
                fields["completed"] = fields["completed_at"] is not None

            updated = replace(current, **fields)
            self._action_items[item_id] = updated
        return updated

    def complete_action_item(self, item_id: int) -> Optional[ActionItem]:
        with self._lock:
            current = self._action_items.get(item_id)
            if current is None:
                return None

            # Re-completing restamps completed_at
            updated = replace(current, completed=True, completed_at=self._clock.now())
            self._action_items[item_id] = updated

            self.create_notification(NotificationCreate(
                type=NotificationType.ITEM_COMPLETED,
                action_item_id=item_id,
                message=f"Action item completed: {current.title}",
            ))
        return updated

    def get_overdue_action_items(self) -> List[ActionItem]:
        now = self._clock.now()
        with self._lock:
            return [item for item in self._action_items.values() if item.is_overdue(now)]

    # --- Notifications ---

    def get_notification(self, notification_id: int) -> Optional[Notification]:
        return self._notifications.get(notification_id)

    def list_notifications(
        self,
        read: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[Notification]:
        with self._lock:
            notifications = list(self._notifications.values())

        if read is not None:
            notifications = [n for n in notifications if n.read == read]

        notifications.sort(key=lambda n: (n.created_at, n.id), reverse=True)
        return _truncate(notifications, limit)

    def create_notification(self, notification: NotificationCreate) -> Notification:
        with self._lock:
            entity = Notification(
                id=next(self._notification_ids),
                type=notification.type,
                action_item_id=notification.action_item_id,
                message=notification.message,
                created_at=self._clock.now(),
            )
            self._notifications[entity.id] = entity
        logger.debug(f"Created notification {entity.id} ({entity.type.value})")
        return entity

    def mark_notification_as_read(self, notification_id: int) -> Optional[Notification]:
        with self._lock:
            current = self._notifications.get(notification_id)
            if current is None:
                return None
            updated = replace(current, read=True)
            self._notifications[notification_id] = updated
        return updated

    # --- Recordings ---

    def get_recording(self, recording_id: str) -> Optional[Recording]:
        return self._recordings.get(recording_id)

    def create_recording(self, recording: RecordingCreate) -> Recording:
        entity = Recording(
            id=recording.id,
            title=recording.title,
            transcription=recording.transcription,
            duration=recording.duration,
            status=recording.status,
            created_at=recording.created_at or self._clock.now(),
        )
        with self._lock:
            self._recordings[entity.id] = entity
        return entity

    def update_recording(self, recording_id: str, **fields: Any) -> Optional[Recording]:
        _check_fields(Recording, fields, protected=("id",))
        if "status" in fields:
            fields["status"] = RecordingStatus(fields["status"])
        if fields.get("created_at") is not None:
            fields["created_at"] = to_utc(fields["created_at"])

        with self._lock:
            current = self._recordings.get(recording_id)
            if current is None:
                return None
            updated = replace(current, **fields)
            self._recordings[recording_id] = updated
        return updated

    def list_recordings(self, limit: Optional[int] = None) -> List[Recording]:
        with self._lock:
            recordings = list(self._recordings.values())

        # Undated recordings sort as oldest
        recordings.sort(key=lambda r: (r.created_at is not None, r.created_at), reverse=True)
        return _truncate(recordings, limit)
