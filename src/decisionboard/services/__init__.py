# src/decisionboard/services/__init__.py
"""
Decision Board services - reminder scheduling, dashboard metrics and the
application service the route layer talks to.
"""

from .board import (
    DecisionBoardService,
    ExtractionError,
    ExtractionOutcome,
    InvalidRecordingTransition,
    RecordingNotReadyError,
)
from .metrics import DashboardStats, compute_stats, overdue_items
from .reminders import ReminderKind, ReminderScheduler

__all__ = [
    "DashboardStats",
    "DecisionBoardService",
    "ExtractionError",
    "ExtractionOutcome",
    "InvalidRecordingTransition",
    "RecordingNotReadyError",
    "ReminderKind",
    "ReminderScheduler",
    "compute_stats",
    "overdue_items",
]
