"""
Core interfaces package for the world events engine.

This package contains abstract interfaces following SOLID principles,
specifically the Dependency Inversion Principle (DIP) and Interface Segregation Principle (ISP).
"""

from .database_interface import (
    AnnouncementStore,
    TriggerStateRepository,
)
from .collaborator_interface import (
    MonsterCatalog,
    RaidDispatcher,
    ChannelDirectory,
    ChannelHandle,
    Announcer,
    WorldEventsError,
    ConfigurationError,
    TransientExternalError,
    ChannelPermissionError,
    ChannelNotFoundError,
)

__all__ = [
    # Database interfaces
    'AnnouncementStore',
    'TriggerStateRepository',
    # Collaborator interfaces
    'MonsterCatalog',
    'RaidDispatcher',
    'ChannelDirectory',
    'ChannelHandle',
    'Announcer',
    # Errors
    'WorldEventsError',
    'ConfigurationError',
    'TransientExternalError',
    'ChannelPermissionError',
    'ChannelNotFoundError',
]
