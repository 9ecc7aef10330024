# src/decisionboard/__init__.py
"""
Decision Board - decisions, action items and reminders extracted from meetings.

Usage:
    from decisionboard import Container

    container = Container()
    container.startup()
    stats = container.service().stats()
"""

from .core.container import Container

__version__ = "0.1.0"

__all__ = ["Container", "__version__"]
