"""
Abstract database interfaces for the world events engine.

This module defines abstract base classes for repositories, following the
Interface Segregation Principle (ISP) from SOLID.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from world_events.core.models import AnnouncementRecord, AnnouncementType, RecordResult


class AnnouncementStore(ABC):
    """
    Abstract interface for the announcement idempotency store.

    Guarantees at most one record per (channel_id, announcement_type, date_key),
    across concurrent callers and process restarts.
    """

    @abstractmethod
    async def initialize(self):
        """Create the schema if needed."""
        pass

    @abstractmethod
    async def has_been_sent(
        self,
        channel_id: str,
        announcement_type: AnnouncementType,
        date_key: str
    ) -> bool:
        """
        Check whether an announcement was already recorded.

        Args:
            channel_id: Channel the announcement targets
            announcement_type: START or END
            date_key: Local calendar day (YYYY-MM-DD)

        Returns:
            True if a record exists for the key
        """
        pass

    @abstractmethod
    async def record_sent(
        self,
        channel_id: str,
        announcement_type: AnnouncementType,
        date_key: str,
        sent_at: Optional[int] = None
    ) -> RecordResult:
        """
        Insert a record unless one already exists for the key.

        Returns:
            RECORDED if this call created the record, ALREADY_EXISTS otherwise
        """
        pass

    @abstractmethod
    async def release(
        self,
        channel_id: str,
        announcement_type: AnnouncementType,
        date_key: str
    ) -> bool:
        """
        Delete a record so the announcement may be retried.

        Returns:
            True if a record was deleted
        """
        pass

    @abstractmethod
    async def cleanup(self, retention_days: int, current_time: Optional[int] = None) -> int:
        """
        Delete records older than the retention window.

        Returns:
            Number of records deleted
        """
        pass

    @abstractmethod
    async def get_recent(self, limit: int = 20) -> List[AnnouncementRecord]:
        """Get the most recent records, newest first."""
        pass


class TriggerStateRepository(ABC):
    """Abstract interface for persisting trigger cooldown state."""

    @abstractmethod
    async def initialize(self):
        """Create the schema if needed."""
        pass

    @abstractmethod
    async def get_last_trigger_time(self, trigger_key: str) -> Optional[float]:
        """
        Get the last firing time of a trigger.

        Returns:
            UNIX timestamp, or None if the trigger never fired
        """
        pass

    @abstractmethod
    async def set_last_trigger_time(self, trigger_key: str, timestamp: float) -> None:
        """Store the last firing time of a trigger."""
        pass

    @abstractmethod
    async def clear(self, trigger_key: str) -> bool:
        """
        Forget the last firing time of a trigger.

        Returns:
            True if a stored value was removed
        """
        pass
