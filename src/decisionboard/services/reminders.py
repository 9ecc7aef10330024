# src/decisionboard/services/reminders.py
"""
Action Item Reminder Scheduler

Uses APScheduler to fire reminder notifications for open action items:
one the day before the due date and one on the due date itself. A daily
cron job sweeps overdue items and posts an overdue reminder for each.

Every action item has at most one live registration (its pair of date
jobs). Rescheduling replaces it, completing an item cancels it, and a job
that fires (or that APScheduler reports as missed) leaves the registry.
"""

import logging
import threading
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Union

from apscheduler.events import EVENT_JOB_MISSED
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from ..config import SchedulerConfig
from ..core.clock import Clock, SystemClock, to_utc
from ..core.models import NotificationType
from ..repositories.base import StorageRepository
from ..schemas import NotificationCreate

logger = logging.getLogger(__name__)

OVERDUE_SWEEP_JOB_ID = "overdue_sweep"


class ReminderKind(str, Enum):
    """Which of the two reminders a job delivers."""
    DAY_BEFORE = "day_before"
    DUE_DATE = "due_date"


REMINDER_OFFSETS = {
    ReminderKind.DAY_BEFORE: timedelta(days=1),
    ReminderKind.DUE_DATE: timedelta(0),
}

REMINDER_MESSAGES = {
    ReminderKind.DAY_BEFORE: 'Reminder: "{title}" is due tomorrow.',
    ReminderKind.DUE_DATE: 'Due today: "{title}" is due today.',
}

OVERDUE_MESSAGE = 'Overdue: "{title}" is past its due date.'


def reminder_job_id(action_item_id: int, kind: ReminderKind) -> str:
    return f"action_item_{action_item_id}_{kind.value}"


def create_background_scheduler(config: SchedulerConfig) -> BackgroundScheduler:
    """Build the APScheduler instance the reminders run on."""
    return BackgroundScheduler(
        timezone=config.timezone,
        job_defaults={
            'coalesce': True,  # Combine missed executions
            'max_instances': 1,  # One instance at a time
            'misfire_grace_time': config.misfire_grace_seconds,
        },
    )


class ReminderScheduler:
    """
    Owns the reminder registry and the APScheduler jobs behind it.

    Usage:
        reminders = ReminderScheduler(storage)
        reminders.initialize()

        reminders.schedule(item.id, item.due_date)
        reminders.cancel(item.id)

        reminders.shutdown()

    Nothing here raises to the caller for timer trouble: failures while
    arming or firing a reminder are logged and swallowed so they never
    break the flow that created or completed the action item.
    """

    def __init__(
        self,
        storage: StorageRepository,
        clock: Optional[Clock] = None,
        scheduler: Optional[BaseScheduler] = None,
        config: Optional[SchedulerConfig] = None,
    ):
        self._storage = storage
        self._clock = clock or SystemClock()
        self._config = config or SchedulerConfig()
        self._lock = threading.RLock()
        self._registrations: Dict[int, Dict[ReminderKind, str]] = {}
        self._initialized = False
        self._scheduler_closed = False

        self._attach(scheduler or create_background_scheduler(self._config))

    @property
    def scheduler(self) -> BaseScheduler:
        return self._scheduler

    def _attach(self, scheduler: BaseScheduler) -> None:
        self._scheduler = scheduler
        self._scheduler.add_listener(self._on_job_missed, EVENT_JOB_MISSED)

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def schedule(self, action_item_id: int, due_date: Union[datetime, str]) -> int:
        """
        Arm the day-before and due-date reminders for an action item.

        Any existing registration for the item is cancelled first. Reminders
        whose fire time is not in the future are skipped.

        Returns:
            Number of reminders armed (0, 1 or 2)
        """
        try:
            self.cancel(action_item_id)

            due = to_utc(due_date)
            now = self._clock.now()

            armed = 0
            for kind, offset in REMINDER_OFFSETS.items():
                run_at = due - offset
                if run_at <= now:
                    continue

                job_id = reminder_job_id(action_item_id, kind)
                # Register first so cancel() can roll back a partial arm
                with self._lock:
                    self._registrations.setdefault(action_item_id, {})[kind] = job_id
                self._scheduler.add_job(
                    self._send_reminder,
                    trigger=DateTrigger(run_date=run_at),
                    args=[action_item_id, kind, job_id],
                    id=job_id,
                    name=f"Action item {action_item_id} ({kind.value})",
                    replace_existing=True,
                )
                armed += 1

            logger.debug(f"Scheduled {armed} reminder(s) for action item {action_item_id}")
            return armed
        except Exception as e:
            logger.error(f"Error scheduling reminder for action item {action_item_id}: {e}")
            self.cancel(action_item_id)
            return 0

    def cancel(self, action_item_id: int) -> bool:
        """
        Cancel every armed reminder for an action item.

        Returns:
            True if a registration existed
        """
        with self._lock:
            jobs = self._registrations.pop(action_item_id, None)

        if not jobs:
            return False

        for job_id in jobs.values():
            try:
                self._scheduler.remove_job(job_id)
            except JobLookupError:
                # Already fired
                pass
            except Exception as e:
                logger.error(f"Error cancelling reminder {job_id}: {e}")

        logger.debug(f"Cancelled reminders for action item {action_item_id}")
        return True

    def is_scheduled(self, action_item_id: int) -> bool:
        with self._lock:
            return action_item_id in self._registrations

    def scheduled_reminders(self, action_item_id: int) -> Dict[ReminderKind, datetime]:
        """Fire times of the reminders currently armed for an action item."""
        with self._lock:
            jobs = dict(self._registrations.get(action_item_id, {}))

        fire_times = {}
        for kind, job_id in jobs.items():
            job = self._scheduler.get_job(job_id)
            if job is not None:
                fire_times[kind] = job.trigger.run_date
        return fire_times

    def _claim(self, action_item_id: int, kind: ReminderKind, job_id: str) -> bool:
        """Drop a firing job from the registry; False if it was cancelled or replaced."""
        with self._lock:
            jobs = self._registrations.get(action_item_id)
            if not jobs or jobs.get(kind) != job_id:
                return False
            del jobs[kind]
            if not jobs:
                del self._registrations[action_item_id]
            return True

    def _on_job_missed(self, event) -> None:
        """Forget a reminder APScheduler skipped past its misfire grace time."""
        with self._lock:
            for action_item_id, jobs in list(self._registrations.items()):
                for kind, job_id in list(jobs.items()):
                    if job_id == event.job_id:
                        del jobs[kind]
                if not jobs:
                    del self._registrations[action_item_id]
        if event.job_id != OVERDUE_SWEEP_JOB_ID:
            logger.warning(f"Reminder job {event.job_id} missed its fire time, dropped")

    # =========================================================================
    # JOBS
    # =========================================================================

    def _send_reminder(self, action_item_id: int, kind: ReminderKind, job_id: str) -> None:
        """Job body: post an action reminder if the item is still open."""
        if not self._claim(action_item_id, kind, job_id):
            return

        try:
            item = self._storage.get_action_item(action_item_id)
            if item is None or item.completed:
                logger.debug(f"Skipping stale {kind.value} reminder for action item {action_item_id}")
                return

            self._storage.create_notification(NotificationCreate(
                type=NotificationType.ACTION_REMINDER,
                action_item_id=action_item_id,
                message=REMINDER_MESSAGES[kind].format(title=item.title),
            ))
            logger.info(f"Sent {kind.value} reminder for action item {action_item_id}")
        except Exception as e:
            logger.error(f"Error sending reminder for action item {action_item_id}: {e}")

    def run_daily_overdue_sweep(self) -> int:
        """
        Post one overdue reminder per overdue action item.

        Runs are not de-duplicated: an item that stays overdue gets a new
        notification on every sweep.

        Returns:
            Number of notifications created
        """
        try:
            overdue = self._storage.get_overdue_action_items()
        except Exception as e:
            logger.error(f"Error checking for overdue items: {e}")
            return 0

        created = 0
        for item in overdue:
            try:
                self._storage.create_notification(NotificationCreate(
                    type=NotificationType.OVERDUE_REMINDER,
                    action_item_id=item.id,
                    message=OVERDUE_MESSAGE.format(title=item.title),
                ))
                created += 1
            except Exception as e:
                logger.error(f"Error creating overdue reminder for action item {item.id}: {e}")

        if created > 0:
            logger.info(f"Overdue sweep completed: notifications={created}")
        return created

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self, start: bool = True) -> int:
        """
        Register the daily overdue sweep and re-arm reminders for open items.

        Reminders whose due date already passed (for example while the
        process was down) are not backfilled.

        Args:
            start: Start the APScheduler thread once jobs are registered

        Returns:
            Number of action items that had reminders re-armed
        """
        if self._initialized:
            return 0

        if self._scheduler_closed:
            # A shut down APScheduler cannot run jobs again
            self._attach(create_background_scheduler(self._config))
            self._scheduler_closed = False
            logger.info("Created a new scheduler after shutdown")

        self._scheduler.add_job(
            self.run_daily_overdue_sweep,
            CronTrigger.from_crontab(self._config.overdue_sweep_cron, timezone=self._config.timezone),
            id=OVERDUE_SWEEP_JOB_ID,
            name="Daily Overdue Sweep",
            replace_existing=True,
        )

        rearmed = 0
        try:
            now = self._clock.now()
            for item in self._storage.list_action_items(completed=False):
                if item.due_date > now and self.schedule(item.id, item.due_date):
                    rearmed += 1
        except Exception as e:
            logger.error(f"Error initializing scheduler: {e}")

        if start and not self._scheduler.running:
            self._scheduler.start()
            logger.info("✅ Reminder scheduler started")

        self._initialized = True
        logger.info(f"Reminder scheduler initialized: {rearmed} action item(s) re-armed")
        return rearmed

    def shutdown(self) -> None:
        """Cancel every armed reminder and stop the scheduler."""
        with self._lock:
            item_ids = list(self._registrations)
        for action_item_id in item_ids:
            self.cancel(action_item_id)

        try:
            self._scheduler.remove_job(OVERDUE_SWEEP_JOB_ID)
        except JobLookupError:
            pass

        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            self._scheduler_closed = True
            logger.info("Scheduler shutdown complete")

        self._initialized = False

    def get_next_job_runs(self) -> List[dict]:
        """Get the next scheduled run times for all jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            if next_run is None and isinstance(job.trigger, DateTrigger):
                next_run = job.trigger.run_date
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": next_run.isoformat() if next_run else None,
            })
        return jobs
