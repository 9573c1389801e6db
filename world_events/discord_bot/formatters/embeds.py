"""
Embed builders for world event messages.

Provides factory functions for the Blood Moon announcement embeds.
"""

import discord
from datetime import date, datetime
from typing import Optional


BLOOD_MOON_START_COLOR = discord.Color(0x8B0000)
BLOOD_MOON_END_COLOR = discord.Color(0xFFFACD)

BLOOD_MOON_START_ICON = (
    "https://static.wikia.nocookie.net/zelda_gamepedia_en/images/d/dc/"
    "HWAoC_Blood_Moon_Icon.png/revision/latest/scale-to-width-down/250?cb=20210328041409"
)
BLOOD_MOON_END_ICON = "https://cdn-icons-png.flaticon.com/512/616/616456.png"

BLOOD_MOON_START_MESSAGE = "The Blood Moon is upon us! Beware!"


class EmbedBuilder:
    """
    Builder class for creating Discord embeds with consistent styling.

    Usage:
        embed = EmbedBuilder() \
            .set_author("Blood Moon Rising") \
            .set_description("...") \
            .build()
    """

    def __init__(self):
        """Initialize a new embed builder."""
        self._description: Optional[str] = None
        self._color: discord.Color = discord.Color.blurple()
        self._author_name: Optional[str] = None
        self._author_icon: Optional[str] = None
        self._timestamp: Optional[datetime] = None

    def set_description(self, description: str) -> 'EmbedBuilder':
        self._description = description
        return self

    def set_color(self, color: discord.Color) -> 'EmbedBuilder':
        self._color = color
        return self

    def set_author(
        self,
        name: str,
        icon_url: Optional[str] = None
    ) -> 'EmbedBuilder':
        self._author_name = name
        self._author_icon = icon_url
        return self

    def set_timestamp(self, when: datetime) -> 'EmbedBuilder':
        self._timestamp = when
        return self

    def build(self) -> discord.Embed:
        """Build and return the Discord embed."""
        embed = discord.Embed(
            description=self._description,
            color=self._color,
            timestamp=self._timestamp,
        )

        if self._author_name:
            embed.set_author(name=self._author_name, icon_url=self._author_icon)

        return embed


# =============================================================================
# Blood Moon embeds
# =============================================================================

def format_long_date(day: date) -> str:
    """Format a date as ``June 18, 2025``."""
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def _blood_moon_period(anchor_date: Optional[date], anchor_label: Optional[str]) -> str:
    if anchor_date is None:
        return ""
    period = format_long_date(anchor_date)
    if anchor_label:
        period += f" ({anchor_label} 13)"
    return f"\n\n📅 **Blood Moon Period:** {period}"


def create_blood_moon_start_embed(
    now: datetime,
    anchor_date: Optional[date] = None,
    anchor_label: Optional[str] = None,
    message: str = BLOOD_MOON_START_MESSAGE,
) -> discord.Embed:
    """
    Create the "Blood Moon Rising" announcement.

    Args:
        now: Local time of the announcement
        anchor_date: Anchor date of the window
        anchor_label: Hyrulean month of the anchor
        message: Headline text

    Returns:
        Discord embed
    """
    description = (
        f"**{message}**\n\n"
        f"**Beware the monsters, as they are drawn to the moon's red glow.**\n\n"
        f"🌕 **Real-World Date:** {format_long_date(now.date())}"
        f"{_blood_moon_period(anchor_date, anchor_label)}"
    )
    return EmbedBuilder() \
        .set_author("Blood Moon Rising", BLOOD_MOON_START_ICON) \
        .set_description(description) \
        .set_color(BLOOD_MOON_START_COLOR) \
        .set_timestamp(now) \
        .build()


def create_blood_moon_end_embed(
    now: datetime,
    anchor_date: Optional[date] = None,
    anchor_label: Optional[str] = None,
) -> discord.Embed:
    """
    Create the "Blood Moon Fades" announcement.

    Args:
        now: Local time of the announcement
        anchor_date: Anchor date of the window that just ended
        anchor_label: Hyrulean month of the anchor

    Returns:
        Discord embed
    """
    description = (
        f"**The Blood Moon has ended... for now.**\n\n"
        f"🌕 **Real-World Date:** {format_long_date(now.date())}"
        f"{_blood_moon_period(anchor_date, anchor_label)}"
    )
    return EmbedBuilder() \
        .set_author("Blood Moon Fades", BLOOD_MOON_END_ICON) \
        .set_description(description) \
        .set_color(BLOOD_MOON_END_COLOR) \
        .set_timestamp(now) \
        .build()
