"""
Discord adapters for the world events engine.

Implements the collaborator interfaces the engine consumes on top of
discord.py:
- DiscordChannelDirectory / DiscordChannelHandle: channel lookup and renames
- DiscordAnnouncer: Blood Moon announcement embeds

discord.py errors are translated into the engine's error types here, so the
core services never import discord.
"""

from datetime import date, datetime
from typing import Dict, Iterable, Optional

import discord

from world_events.core.interfaces import (
    Announcer,
    ChannelDirectory,
    ChannelHandle,
    ChannelNotFoundError,
    ChannelPermissionError,
    TransientExternalError,
)
from world_events.core.models import AnnouncementType, CalendarAnchor
from world_events.discord_bot.formatters import (
    create_blood_moon_end_embed,
    create_blood_moon_start_embed,
)
from world_events.utils import get_logger, get_timezone

logger = get_logger("discord")


class DiscordChannelHandle(ChannelHandle):
    """A guild channel the engine may rename."""

    def __init__(self, channel: discord.abc.GuildChannel):
        self.channel = channel

    @property
    def channel_id(self) -> str:
        return str(self.channel.id)

    @property
    def name(self) -> str:
        return self.channel.name

    def can_rename(self) -> bool:
        guild = getattr(self.channel, "guild", None)
        if guild is None or guild.me is None:
            return False
        return self.channel.permissions_for(guild.me).manage_channels

    async def rename(self, new_name: str) -> None:
        try:
            await self.channel.edit(name=new_name)
        except discord.Forbidden as e:
            raise ChannelPermissionError(f"Cannot rename channel {self.channel_id}: {e}") from e
        except discord.NotFound as e:
            raise ChannelNotFoundError(f"Channel {self.channel_id} not found: {e}") from e
        except discord.HTTPException as e:
            raise TransientExternalError(f"Discord API error renaming {self.channel_id}: {e}") from e


async def resolve_channel(client: discord.Client, channel_id: str):
    """
    Resolve a channel from the cache, then from the API.

    Raises:
        ChannelNotFoundError: Unknown channel id
        ChannelPermissionError: The bot cannot see the channel
        TransientExternalError: Any other Discord API failure
    """
    try:
        snowflake = int(channel_id)
    except (TypeError, ValueError) as e:
        raise ChannelNotFoundError(f"Invalid channel id: {channel_id!r}") from e

    channel = client.get_channel(snowflake)
    if channel is not None:
        return channel

    try:
        return await client.fetch_channel(snowflake)
    except discord.NotFound as e:
        raise ChannelNotFoundError(f"Channel {channel_id} not found") from e
    except discord.Forbidden as e:
        raise ChannelPermissionError(f"No access to channel {channel_id}") from e
    except discord.HTTPException as e:
        raise TransientExternalError(f"Discord API error fetching {channel_id}: {e}") from e


class DiscordChannelDirectory(ChannelDirectory):
    """ChannelDirectory over a discord.py client."""

    def __init__(self, client: discord.Client):
        self.client = client

    async def fetch(self, channel_id: str) -> ChannelHandle:
        channel = await resolve_channel(self.client, channel_id)
        if not isinstance(channel, discord.abc.GuildChannel):
            raise ChannelNotFoundError(f"Channel {channel_id} is not a guild channel")
        return DiscordChannelHandle(channel)


class DiscordAnnouncer(Announcer):
    """
    Posts Blood Moon announcement embeds.

    Args:
        client: The Discord client
        anchors: Calendar anchors, used to label the Blood Moon period
        timezone_name: Timezone the announcement dates are shown in
    """

    def __init__(
        self,
        client: discord.Client,
        anchors: Iterable[CalendarAnchor] = (),
        timezone_name: str = "America/New_York",
    ):
        self.client = client
        self.tz = get_timezone(timezone_name)
        self._labels: Dict[str, str] = {str(a): a.label for a in anchors if a.label}

    def _label_for(self, anchor_date: Optional[date]) -> Optional[str]:
        if anchor_date is None:
            return None
        return self._labels.get(anchor_date.strftime("%m-%d"))

    async def announce(
        self,
        channel_id: str,
        announcement_type: AnnouncementType,
        anchor_date: Optional[date],
        now: datetime
    ) -> None:
        local_now = now.astimezone(self.tz)
        label = self._label_for(anchor_date)
        if announcement_type == AnnouncementType.START:
            embed = create_blood_moon_start_embed(local_now, anchor_date, label)
        else:
            embed = create_blood_moon_end_embed(local_now, anchor_date, label)

        channel = await resolve_channel(self.client, channel_id)
        try:
            await channel.send(embed=embed)
        except discord.Forbidden as e:
            raise ChannelPermissionError(f"Cannot post in channel {channel_id}") from e
        except discord.HTTPException as e:
            raise TransientExternalError(f"Failed to post in channel {channel_id}: {e}") from e


__all__ = [
    'DiscordChannelHandle',
    'DiscordChannelDirectory',
    'DiscordAnnouncer',
    'resolve_channel',
]
