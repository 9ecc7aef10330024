# src/decisionboard/repositories/seed.py
"""
Demo data for a fresh in-memory store.

Creates the demo user plus a handful of decisions and action items spread
around "now" so the dashboard has pending, overdue and completed work.
"""

import logging
from datetime import timedelta

from ..core.models import Priority
from ..schemas import ActionItemCreate, DecisionCreate, UserCreate
from .base import StorageRepository

logger = logging.getLogger(__name__)

DEMO_USERNAME = "alexmorgan"


def seed_demo_data(storage: StorageRepository, now) -> None:
    """Populate storage with the demo user and sample decisions."""
    if storage.get_user_by_username(DEMO_USERNAME) is not None:
        logger.info("Demo data already present, skipping seed")
        return

    storage.create_user(UserCreate(username=DEMO_USERNAME, password="password123"))

    marketing = storage.create_decision(DecisionCreate(
        title="Marketing Campaign Strategy for Q3",
        description="We decided to focus on digital channels and increase social media budget by 20% for the upcoming quarter.",
        source="Meeting Notes",
        team="Marketing Team",
    ))
    product = storage.create_decision(DecisionCreate(
        title="Product Feature Prioritization",
        description="Mobile responsive redesign will take priority over new analytics dashboard based on customer feedback and usage metrics.",
        source="Email",
        team="Product Team",
    ))
    hiring = storage.create_decision(DecisionCreate(
        title="Hiring Plan for Engineering Team",
        description="Agreed to hire 2 frontend developers and 1 DevOps engineer in the next quarter to support product roadmap execution.",
        source="Meeting Notes",
        team="HR & Engineering",
    ))

    samples = [
        ("Schedule meeting with design team about new dashboard", marketing.id, "You", 7, Priority.HIGH),
        ("Finalize Q2 budget approval process", marketing.id, "You", -2, Priority.URGENT),
        ("Review product launch timeline with engineering", product.id, "You", 10, Priority.MEDIUM),
        ("Prepare sales team for new feature rollout", product.id, "Sarah Johnson", 14, Priority.MEDIUM),
        ("Schedule team retrospective for sprint 24", hiring.id, "You", -5, Priority.MEDIUM),
    ]
    created = [
        storage.create_action_item(ActionItemCreate(
            title=title,
            decision_id=decision_id,
            assignee=assignee,
            due_date=now + timedelta(days=days),
            priority=priority.value,
        ))
        for title, decision_id, assignee, days, priority in samples
    ]

    storage.complete_action_item(created[-1].id)
    logger.info(f"Seeded demo data: 3 decisions, {len(created)} action items")
