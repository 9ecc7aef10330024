# src/decisionboard/core/container.py
"""
Dependency Injection Container

Builds the store, the reminder scheduler and the application service from
configuration, and owns their lifecycle.

Usage:
    from decisionboard.core.container import Container

    container = Container()
    container.startup()

    service = container.service()
    service.complete_action_item(3)

    container.shutdown()
"""

import logging
from typing import Optional

from ..config import DecisionBoardConfig, configure_logging, get_config
from .clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Instances are created on first use and cached until reset().
    """

    def __init__(
        self,
        config: Optional[DecisionBoardConfig] = None,
        clock: Optional[Clock] = None,
        extractor=None,
    ):
        self.config = config or get_config()
        self.clock = clock or SystemClock()
        self._extractor = extractor

        # Cached instances
        self._storage_instance = None
        self._reminders_instance = None
        self._service_instance = None
        self._started = False

    # =============================================================================
    # STORAGE
    # =============================================================================

    def storage(self):
        """Get the entity store."""
        if self._storage_instance is None:
            from ..repositories.memory import InMemoryStorage
            self._storage_instance = InMemoryStorage(clock=self.clock)
        return self._storage_instance

    # =============================================================================
    # SCHEDULER
    # =============================================================================

    def reminders(self):
        """Get the reminder scheduler."""
        if self._reminders_instance is None:
            from ..services.reminders import ReminderScheduler
            self._reminders_instance = ReminderScheduler(
                self.storage(),
                clock=self.clock,
                config=self.config.scheduler,
            )
        return self._reminders_instance

    # =============================================================================
    # SERVICES
    # =============================================================================

    def service(self):
        """Get the application service."""
        if self._service_instance is None:
            from ..services.board import DecisionBoardService
            self._service_instance = DecisionBoardService(
                self.storage(),
                self.reminders(),
                clock=self.clock,
                extractor=self._extractor,
            )
        return self._service_instance

    # =============================================================================
    # LIFECYCLE
    # =============================================================================

    def startup(self):
        """Seed data (if configured) and bring the reminder scheduler up."""
        if self._started:
            return

        configure_logging(self.config.log_level)

        if self.config.seed_demo_data:
            from ..repositories.seed import seed_demo_data
            seed_demo_data(self.storage(), self.clock.now())

        enabled = self.config.scheduler.enabled
        if not enabled:
            logger.info(f"Reminder scheduler thread disabled in {self.config.environment} environment")

        try:
            self.reminders().initialize(start=enabled)
        except Exception as e:
            logger.error(f"⚠️ Scheduler init failed (non-fatal): {e}")

        self._started = True

    def shutdown(self):
        """Cancel pending reminders and stop the scheduler."""
        if self._reminders_instance is not None:
            self._reminders_instance.shutdown()
        self._started = False

    def reset(self):
        """Reset all cached instances (useful for testing)."""
        self.shutdown()
        self._storage_instance = None
        self._reminders_instance = None
        self._service_instance = None
        logger.info("Container reset")
