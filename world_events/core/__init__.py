"""
Core package for the world events engine.

This package contains the core business logic:
- models: Domain entities (anchors, activity windows, results)
- interfaces: Abstract base classes (stores, collaborators) and errors
- repositories: Data access layer implementations
- services: Business logic layer
"""

from .models import (
    # Enums
    AnnouncementType,
    RecordResult,
    RenameOutcome,
    TriggerStatus,
    # Models
    CalendarAnchor,
    MonsterDescriptor,
    EncounterTarget,
    RaidOutcome,
)

from .interfaces import (
    # Database interfaces
    AnnouncementStore,
    TriggerStateRepository,
    # Collaborator interfaces
    MonsterCatalog,
    RaidDispatcher,
    ChannelDirectory,
    ChannelHandle,
    Announcer,
    # Errors
    WorldEventsError,
    ConfigurationError,
)

from .repositories import (
    BaseRepository,
    SQLiteAnnouncementRepository,
    SQLiteTriggerStateRepository,
)

from .services import (
    ActivityAggregator,
    EncounterTrigger,
    ChannelPresentationToggle,
    CalendarEventDetector,
    EventScheduler,
)

__all__ = [
    # Models
    'AnnouncementType',
    'RecordResult',
    'RenameOutcome',
    'TriggerStatus',
    'CalendarAnchor',
    'MonsterDescriptor',
    'EncounterTarget',
    'RaidOutcome',
    # Interfaces
    'AnnouncementStore',
    'TriggerStateRepository',
    'MonsterCatalog',
    'RaidDispatcher',
    'ChannelDirectory',
    'ChannelHandle',
    'Announcer',
    'WorldEventsError',
    'ConfigurationError',
    # Repositories
    'BaseRepository',
    'SQLiteAnnouncementRepository',
    'SQLiteTriggerStateRepository',
    # Services
    'ActivityAggregator',
    'EncounterTrigger',
    'ChannelPresentationToggle',
    'CalendarEventDetector',
    'EventScheduler',
]
