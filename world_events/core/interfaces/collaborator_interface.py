"""
Abstract collaborator interfaces for the world events engine.

The engine never talks to Discord, the monster database or the raid module
directly. It consumes them through the narrow interfaces below, which keeps
the trigger logic testable with plain fakes.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from world_events.core.models import (
    AnnouncementType,
    EncounterTarget,
    MonsterDescriptor,
    RaidOutcome,
)


class MonsterCatalog(ABC):
    """Read access to the monster data."""

    @abstractmethod
    async def get_above_tier_by_region(
        self,
        min_tier: int,
        region: str
    ) -> Optional[MonsterDescriptor]:
        """
        Pick a monster of at least ``min_tier`` native to ``region``.

        Args:
            min_tier: Minimum monster tier (inclusive)
            region: Region name (e.g. "Eldin")

        Returns:
            A monster, or None if the region has no eligible monster

        Raises:
            TransientExternalError: If the catalog is unreachable
        """
        pass


class RaidDispatcher(ABC):
    """Creates raids in the raid module."""

    @abstractmethod
    async def trigger(
        self,
        monster: MonsterDescriptor,
        target: EncounterTarget,
        village: str,
        is_automated: bool = True
    ) -> RaidOutcome:
        """
        Start a raid.

        Args:
            monster: Monster to raid with
            target: Channel/region context for the raid
            village: Village name the raid attacks
            is_automated: True when no moderator started the raid

        Returns:
            RaidOutcome with success flag and optional error
        """
        pass


class ChannelHandle(ABC):
    """A resolved, renameable channel."""

    @property
    @abstractmethod
    def channel_id(self) -> str:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Current display name of the channel."""
        pass

    @abstractmethod
    def can_rename(self) -> bool:
        """Whether the bot holds the permission to rename this channel."""
        pass

    @abstractmethod
    async def rename(self, new_name: str) -> None:
        """
        Rename the channel.

        Raises:
            ChannelPermissionError: If the bot lacks manage rights
            TransientExternalError: On API/network failure
        """
        pass


class ChannelDirectory(ABC):
    """Resolves channel ids to handles."""

    @abstractmethod
    async def fetch(self, channel_id: str) -> ChannelHandle:
        """
        Resolve a channel.

        Raises:
            ChannelNotFoundError: If the channel does not exist
            ChannelPermissionError: If the bot cannot see the channel
            TransientExternalError: On API/network failure
        """
        pass


class Announcer(ABC):
    """Delivers in-world announcements. Formatting belongs to the implementation."""

    @abstractmethod
    async def announce(
        self,
        channel_id: str,
        announcement_type: AnnouncementType,
        anchor_date: Optional[date],
        now: datetime
    ) -> None:
        """
        Send an announcement to a channel.

        Args:
            channel_id: Target channel
            announcement_type: START or END
            anchor_date: The anchor date of the window being entered or left
            now: Time of the announcement (timezone-aware)

        Raises:
            TransientExternalError: If the message could not be delivered
        """
        pass


class WorldEventsError(Exception):
    """Base exception for world events errors."""
    pass


class ConfigurationError(WorldEventsError):
    """Raised when the engine configuration cannot drive a tick."""
    pass


class TransientExternalError(WorldEventsError):
    """Raised when an external API or network call fails."""
    pass


class ChannelPermissionError(WorldEventsError):
    """Raised when the bot lacks rights on a channel."""
    pass


class ChannelNotFoundError(WorldEventsError):
    """Raised when a channel id does not resolve."""
    pass
