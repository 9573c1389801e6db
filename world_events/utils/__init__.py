"""
Shared utilities for the world events engine.

This module provides common utility functions used across the application:
- Logging configuration and setup
- Timezone-explicit date/time helpers
- Configuration parsing helpers
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

import pytz


# =============================================================================
# Logging Utilities
# =============================================================================

ROOT_LOGGER_NAME = 'world_events'


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging with console and optional file handlers.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional file path for log output
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    if format_string is None:
        format_string = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'

    formatter = logging.Formatter(format_string, datefmt='%Y-%m-%d %H:%M:%S')

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


# =============================================================================
# Date/Time Utilities
# =============================================================================

def get_timezone(tz_name: str):
    """
    Get a pytz timezone by name.

    Raises:
        ValueError: If the timezone name is unknown
    """
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError as e:
        raise ValueError(f"Unknown timezone: {tz_name}") from e


def ensure_aware(dt: datetime) -> datetime:
    """
    Reject naive datetimes.

    The engine never guesses a timezone from the host locale, so every
    ``now`` handed to it must carry its own tzinfo.
    """
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("datetime must be timezone-aware")
    return dt


def to_local(dt: datetime, tz) -> datetime:
    """Convert an aware datetime to the given pytz timezone."""
    return ensure_aware(dt).astimezone(tz)


def local_date(dt: datetime, tz) -> date:
    """Calendar date of ``dt`` in the given timezone (time stripped)."""
    return to_local(dt, tz).date()


def make_date_key(day: date) -> str:
    """Format a calendar day as ``YYYY-MM-DD``."""
    return day.isoformat()


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def format_duration(seconds: float) -> str:
    """Format a duration as ``1h 05m`` / ``12m 30s``."""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m {secs:02d}s"


# =============================================================================
# Parsing Utilities
# =============================================================================

def parse_id_list(value: Optional[str]) -> List[str]:
    """
    Parse a comma/whitespace separated list of Discord ids.

    >>> parse_id_list("123, 456 789")
    ['123', '456', '789']
    """
    if not value:
        return []
    return [part for part in value.replace(",", " ").split() if part]


__all__ = [
    # Logging
    'ROOT_LOGGER_NAME',
    'setup_logging',
    'get_logger',
    # Date/Time
    'get_timezone',
    'ensure_aware',
    'to_local',
    'local_date',
    'make_date_key',
    'previous_day',
    'utc_now',
    'format_duration',
    # Parsing
    'parse_id_list',
]
