"""
Services package for the world events engine.

This package contains the business logic layer:
- activity_aggregator: Sliding-window chat activity per channel
- encounter_trigger: Threshold and cooldown gated raid trigger
- calendar_detector: Blood Moon window detection and announcements
- channel_toggle: Batch channel renames with per-channel outcomes
- event_scheduler: Periodic driver for the jobs above
"""

from .activity_aggregator import (
    ActivityAggregator,
    DEFAULT_WINDOW_SECONDS,
)

from .encounter_trigger import (
    EncounterTrigger,
    DEFAULT_MESSAGE_THRESHOLD,
    DEFAULT_MIN_UNIQUE_USERS,
    DEFAULT_COOLDOWN_SECONDS,
    DEFAULT_MIN_TIER,
    TRIGGER_KEY,
)

from .channel_toggle import ChannelPresentationToggle

from .calendar_detector import (
    CalendarEventDetector,
    window_anchor_for,
    is_in_window,
    DEFAULT_ACTIVATION_HOUR,
    DEFAULT_TIMEZONE,
)

from .event_scheduler import (
    EventScheduler,
    TickReport,
)


__all__ = [
    # Activity
    'ActivityAggregator',
    'DEFAULT_WINDOW_SECONDS',
    # Encounters
    'EncounterTrigger',
    'DEFAULT_MESSAGE_THRESHOLD',
    'DEFAULT_MIN_UNIQUE_USERS',
    'DEFAULT_COOLDOWN_SECONDS',
    'DEFAULT_MIN_TIER',
    'TRIGGER_KEY',
    # Calendar
    'ChannelPresentationToggle',
    'CalendarEventDetector',
    'window_anchor_for',
    'is_in_window',
    'DEFAULT_ACTIVATION_HOUR',
    'DEFAULT_TIMEZONE',
    # Scheduling
    'EventScheduler',
    'TickReport',
]
