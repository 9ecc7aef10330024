# src/decisionboard/repositories/__init__.py
"""
Repository Layer - Ports and Adapters Pattern

StorageRepository is the port every store implements; InMemoryStorage is
the volatile adapter the application runs on.

Usage:
    from decisionboard.repositories import InMemoryStorage

    storage = InMemoryStorage()
    overdue = storage.get_overdue_action_items()
"""

from .base import DuplicateUsernameError, StorageRepository
from .memory import InMemoryStorage
from .seed import seed_demo_data

__all__ = [
    "DuplicateUsernameError",
    "InMemoryStorage",
    "StorageRepository",
    "seed_demo_data",
]
