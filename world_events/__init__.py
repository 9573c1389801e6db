"""
World Events Engine

Blood Moon calendar events and activity-triggered raid encounters for a
Discord roleplay server.

Package structure:
- core/: Core business logic (models, interfaces, repositories, services)
- discord_bot/: Discord adapters, embeds and handlers
- utils/: Shared utilities (logging, time helpers)
- config.py: Engine configuration and environment loading
- app.py: Wiring of repositories, services and the scheduler

Usage:
    from world_events.config import load_config
    from world_events.app import create_engine, attach_to_bot
    from world_events.core.services import ActivityAggregator, EncounterTrigger
"""

__version__ = "1.0.0"

from world_events.utils import setup_logging, get_logger
from world_events.core.models import (
    AnnouncementType,
    CalendarAnchor,
    TriggerStatus,
    RenameOutcome,
)
from world_events.core.services import (
    ActivityAggregator,
    EncounterTrigger,
    CalendarEventDetector,
    ChannelPresentationToggle,
    EventScheduler,
)
from world_events.config import EngineConfig, VillageConfig, load_config

__all__ = [
    # Version
    '__version__',
    # Utils
    'setup_logging',
    'get_logger',
    # Models
    'AnnouncementType',
    'CalendarAnchor',
    'TriggerStatus',
    'RenameOutcome',
    # Services
    'ActivityAggregator',
    'EncounterTrigger',
    'CalendarEventDetector',
    'ChannelPresentationToggle',
    'EventScheduler',
    # Config
    'EngineConfig',
    'VillageConfig',
    'load_config',
]
