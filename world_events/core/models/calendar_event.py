"""
Calendar event models for the world events engine.

This module defines the anchor dates of calendar-window events, the persisted
announcement record, and the summary returned by one detector tick.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .enums import AnnouncementType
from .toggle import ToggleResult


@dataclass(frozen=True)
class CalendarAnchor:
    """
    A (month, day) pair marking the center of a 3-day activation window.

    Attributes:
        month: Month number (1-12)
        day: Day of month; Feb 29 is accepted and skipped in common years
        label: Optional display label (e.g. the in-world month name)
    """

    month: int
    day: int
    label: Optional[str] = None

    def __post_init__(self):
        """Validate the month/day pair against a leap year."""
        if not 1 <= self.month <= 12:
            raise ValueError(f"Invalid anchor month: {self.month}")
        # 2000 is a leap year, so Feb 29 passes validation
        max_day = calendar.monthrange(2000, self.month)[1]
        if not 1 <= self.day <= max_day:
            raise ValueError(f"Invalid anchor day: {self.month:02d}-{self.day:02d}")

    @classmethod
    def from_string(cls, value: str, label: Optional[str] = None) -> 'CalendarAnchor':
        """
        Parse a ``MM-DD`` string.

        Args:
            value: Anchor string such as ``"06-18"``
            label: Optional display label

        Raises:
            ValueError: If the string is not a valid month/day pair
        """
        try:
            month_str, day_str = value.strip().split("-")
            month, day = int(month_str), int(day_str)
        except (AttributeError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid anchor string: {value!r}") from e
        return cls(month=month, day=day, label=label)

    def materialize(self, year: int) -> Optional[date]:
        """
        Return the anchor date in the given year.

        Returns:
            The date, or None if it does not exist that year (Feb 29)
        """
        try:
            return date(year, self.month, self.day)
        except ValueError:
            return None

    def __str__(self) -> str:
        return f"{self.month:02d}-{self.day:02d}"


@dataclass
class AnnouncementRecord:
    """
    A persisted record that an announcement went out.

    At most one record exists per (channel_id, announcement_type, date_key).
    """

    channel_id: str
    announcement_type: AnnouncementType
    date_key: str
    sent_at: int

    @property
    def key(self) -> tuple:
        return (self.channel_id, self.announcement_type.value, self.date_key)

    @classmethod
    def from_db_row(cls, row: tuple) -> 'AnnouncementRecord':
        """Create a record from a (channel_id, type, date_key, sent_at) row."""
        return cls(
            channel_id=str(row[0]),
            announcement_type=AnnouncementType(row[1]),
            date_key=row[2],
            sent_at=int(row[3]),
        )


@dataclass
class DetectionResult:
    """Summary of one calendar detector tick."""
    date_key: str
    active_window: bool
    activation_instant: bool
    entry_edge: bool = False
    exit_edge: bool = False
    anchor_date: Optional[date] = None
    announced: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    toggle: Optional[ToggleResult] = None

    @property
    def transitioned(self) -> bool:
        """Whether this tick acted on an entry or exit edge."""
        return self.activation_instant and (self.entry_edge or self.exit_edge)
