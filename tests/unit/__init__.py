# tests/unit/__init__.py
"""
Unit tests for Decision Board.

Everything runs against the in-memory store, a fake clock and an
APScheduler instance that is never started.
"""
