# src/decisionboard/services/board.py
"""
Decision Board Service - the operations the route layer calls.

Sequences store mutations with reminder registration so that:
- every new action item gets its reminders armed
- completing an item cancels them
- reopening an item re-arms them while the due date is still ahead

Extraction of decisions from meeting text is delegated to an injected
extractor (the language model client lives outside this package).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..core.clock import Clock, SystemClock
from ..core.models import ActionItem, Decision, Notification, Recording, RecordingStatus
from ..repositories.base import StorageRepository
from ..schemas import ActionItemCreate, DecisionCreate, ExtractionResult, RecordingCreate
from .metrics import DashboardStats, compute_stats
from .reminders import ReminderScheduler

logger = logging.getLogger(__name__)

Extractor = Callable[[str, str, Optional[str]], ExtractionResult]

# Transcription only ever moves forward
RECORDING_TRANSITIONS = {
    RecordingStatus.PENDING: {RecordingStatus.TRANSCRIBING, RecordingStatus.FAILED},
    RecordingStatus.TRANSCRIBING: {RecordingStatus.COMPLETED, RecordingStatus.FAILED},
    RecordingStatus.COMPLETED: set(),
    RecordingStatus.FAILED: set(),
}


class ExtractionError(RuntimeError):
    pass


class RecordingNotReadyError(ValueError):
    """The recording has no finished transcription to extract from."""


class InvalidRecordingTransition(ValueError):
    pass


@dataclass
class ExtractionOutcome:
    decision: Decision
    action_items: List[ActionItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "decision": self.decision.to_dict(),
            "action_items": [item.to_dict() for item in self.action_items],
        }


class DecisionBoardService:
    """Application service over the store and the reminder scheduler."""

    def __init__(
        self,
        storage: StorageRepository,
        reminders: ReminderScheduler,
        clock: Optional[Clock] = None,
        extractor: Optional[Extractor] = None,
    ):
        self.storage = storage
        self.reminders = reminders
        self._clock = clock or SystemClock()
        self._extractor = extractor

    # --- Action items ---

    def create_action_item(self, data: ActionItemCreate) -> ActionItem:
        item = self.storage.create_action_item(data)
        self.reminders.schedule(item.id, item.due_date)
        return item

    def complete_action_item(self, item_id: int) -> Optional[ActionItem]:
        item = self.storage.complete_action_item(item_id)
        if item is None:
            return None
        self.reminders.cancel(item_id)
        return item

    def reopen_action_item(self, item_id: int) -> Optional[ActionItem]:
        item = self.storage.update_action_item(item_id, completed=False, completed_at=None)
        if item is None:
            return None
        if item.due_date > self._clock.now():
            self.reminders.schedule(item_id, item.due_date)
        return item

    # --- Extraction ---

    def record_extraction(
        self,
        result: ExtractionResult,
        source: str,
        team: Optional[str] = None,
    ) -> ExtractionOutcome:
        """Persist one decision and its action items, arming reminders for each."""
        decision = self.storage.create_decision(DecisionCreate(
            title=result.decision.title,
            description=result.decision.description,
            source=source,
            team=team,
        ))

        outcome = ExtractionOutcome(decision=decision)
        for extracted in result.action_items:
            outcome.action_items.append(self.create_action_item(ActionItemCreate(
                title=extracted.title,
                decision_id=decision.id,
                assignee=extracted.assignee,
                due_date=extracted.due_date,
                priority=extracted.priority,
            )))

        logger.info(
            f"Recorded decision {decision.id} with {len(outcome.action_items)} action item(s) from {source}"
        )
        return outcome

    def extract_from_text(
        self,
        text: str,
        source: str,
        team: Optional[str] = None,
    ) -> ExtractionOutcome:
        if self._extractor is None:
            raise ExtractionError("No extractor configured")
        result = self._extractor(text, source, team)
        return self.record_extraction(result, source, team)

    def extract_from_recording(
        self,
        recording_id: str,
        source: str,
        team: Optional[str] = None,
    ) -> Optional[ExtractionOutcome]:
        recording = self.storage.get_recording(recording_id)
        if recording is None:
            return None

        if recording.status != RecordingStatus.COMPLETED:
            raise RecordingNotReadyError(
                f"Recording is not ready for extraction. Current status: {recording.status.value}"
            )
        if not recording.transcription:
            raise RecordingNotReadyError("Recording does not have a transcription")

        return self.extract_from_text(recording.transcription, source, team)

    # --- Recordings ---

    def register_recording(self, data: RecordingCreate) -> Recording:
        return self.storage.create_recording(data)

    def advance_recording(
        self,
        recording_id: str,
        status: RecordingStatus,
        transcription: Optional[str] = None,
        duration: Optional[float] = None,
    ) -> Optional[Recording]:
        """
        Move a recording along the transcription pipeline.

        Raises:
            InvalidRecordingTransition: if status does not follow the current one
        """
        recording = self.storage.get_recording(recording_id)
        if recording is None:
            return None

        status = RecordingStatus(status)
        if status not in RECORDING_TRANSITIONS[recording.status]:
            raise InvalidRecordingTransition(
                f"Recording {recording_id} cannot move from {recording.status.value} to {status.value}"
            )

        updates: Dict[str, Any] = {"status": status}
        if transcription is not None:
            updates["transcription"] = transcription
        if duration is not None:
            updates["duration"] = duration
        return self.storage.update_recording(recording_id, **updates)

    # --- Notifications & dashboard ---

    def mark_notification_read(self, notification_id: int) -> Optional[Notification]:
        return self.storage.mark_notification_as_read(notification_id)

    def unread_count(self) -> int:
        return self.storage.count_unread_notifications()

    def stats(self) -> DashboardStats:
        return compute_stats(self.storage)
