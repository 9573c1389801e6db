"""
Repository implementations for the world events engine.

This package contains concrete implementations of the database interfaces.
"""

from .base import BaseRepository
from .announcement_repository import SQLiteAnnouncementRepository
from .trigger_state_repository import SQLiteTriggerStateRepository

__all__ = [
    'BaseRepository',
    'SQLiteAnnouncementRepository',
    'SQLiteTriggerStateRepository',
]
