# tests/conftest.py
"""
Pytest configuration and fixtures for the Decision Board test suite.

Provides:
- FakeClock: a clock tests move forward by hand
- A fresh InMemoryStorage per test
- A non-started APScheduler plus fire_due_jobs() to run date jobs
  deterministically instead of waiting on wall-clock timers
- Factories for action items
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from decisionboard.config import SchedulerConfig
from decisionboard.core.clock import Clock
from decisionboard.core.models import ActionItem
from decisionboard.repositories.memory import InMemoryStorage
from decisionboard.schemas import ActionItemCreate
from decisionboard.services.board import DecisionBoardService
from decisionboard.services.reminders import ReminderScheduler


NOW = datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)


class FakeClock(Clock):
    """Clock frozen at a given instant until advanced."""

    def __init__(self, start: datetime = NOW):
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now

    def set(self, value: datetime) -> None:
        self._now = value


def fire_due_jobs(scheduler, now: datetime) -> List[str]:
    """
    Run every pending date job whose run_date is at or before now.

    Mirrors what APScheduler does on wakeup: the job is removed from the
    scheduler, then its function is called.

    Returns:
        IDs of the jobs that fired, in fire-time order
    """
    due = [
        job for job in scheduler.get_jobs()
        if getattr(job.trigger, "run_date", None) is not None and job.trigger.run_date <= now
    ]
    due.sort(key=lambda job: job.trigger.run_date)

    fired = []
    for job in due:
        scheduler.remove_job(job.id)
        job.func(*job.args, **job.kwargs)
        fired.append(job.id)
    return fired


# ============== Core Fixtures ==============

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage(clock) -> InMemoryStorage:
    return InMemoryStorage(clock=clock)


@pytest.fixture
def apscheduler() -> BackgroundScheduler:
    """APScheduler that is never started; jobs stay pending until fired by hand."""
    scheduler = BackgroundScheduler(timezone="UTC")
    yield scheduler
    if scheduler.running:
        scheduler.shutdown(wait=False)


@pytest.fixture
def reminders(storage, clock, apscheduler) -> ReminderScheduler:
    return ReminderScheduler(storage, clock=clock, scheduler=apscheduler, config=SchedulerConfig())


@pytest.fixture
def service(storage, reminders, clock) -> DecisionBoardService:
    return DecisionBoardService(storage, reminders, clock=clock)


@pytest.fixture
def fire(apscheduler, clock) -> Callable[[], List[str]]:
    """Fire every reminder job due at the fake clock's current time."""
    def _fire() -> List[str]:
        return fire_due_jobs(apscheduler, clock.now())
    return _fire


# ============== Factories ==============

@pytest.fixture
def action_item_factory(storage, clock):
    """Factory creating action items due a number of days from the fake now."""
    def _create(
        title: str = "Send meeting notes",
        days: float = 3,
        assignee: str = "You",
        priority: str = "Medium",
        decision_id: Optional[int] = None,
    ) -> ActionItem:
        return storage.create_action_item(ActionItemCreate(
            title=title,
            assignee=assignee,
            due_date=clock.now() + timedelta(days=days),
            priority=priority,
            decision_id=decision_id,
        ))
    return _create
