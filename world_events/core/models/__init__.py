"""
Core models package for the world events engine.

This package contains domain models (entities) used throughout the application.
"""

from .enums import (
    AnnouncementType,
    RecordResult,
    RenameOutcome,
    TriggerStatus,
)
from .activity import ActivityWindow, ChannelActivity
from .toggle import ToggleResult
from .calendar_event import CalendarAnchor, AnnouncementRecord, DetectionResult
from .encounter import (
    MonsterDescriptor,
    EncounterTarget,
    RaidOutcome,
    TriggerResult,
)

__all__ = [
    # Enums
    'AnnouncementType',
    'RecordResult',
    'RenameOutcome',
    'TriggerStatus',
    # Activity
    'ActivityWindow',
    'ChannelActivity',
    # Calendar
    'CalendarAnchor',
    'AnnouncementRecord',
    'DetectionResult',
    'ToggleResult',
    # Encounter
    'MonsterDescriptor',
    'EncounterTarget',
    'RaidOutcome',
    'TriggerResult',
]
