# src/decisionboard/services/metrics.py
"""Dashboard counters computed on demand from the store."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from ..core.models import ActionItem
from ..repositories.base import StorageRepository


@dataclass(frozen=True)
class DashboardStats:
    pending_count: int
    completed_count: int
    decisions_count: int
    overdue_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_stats(storage: StorageRepository) -> DashboardStats:
    return DashboardStats(
        pending_count=len(storage.list_action_items(completed=False)),
        completed_count=len(storage.list_action_items(completed=True)),
        decisions_count=len(storage.list_decisions()),
        overdue_count=len(storage.get_overdue_action_items()),
    )


def overdue_items(storage: StorageRepository) -> List[ActionItem]:
    """Overdue items, earliest due first."""
    return sorted(storage.get_overdue_action_items(), key=lambda item: (item.due_date, item.id))
