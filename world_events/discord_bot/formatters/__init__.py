"""
Discord formatting utilities for the world events engine.

This package provides:
- embeds: Embed builder and the Blood Moon announcement embeds
"""

from .embeds import (
    EmbedBuilder,
    BLOOD_MOON_START_COLOR,
    BLOOD_MOON_END_COLOR,
    BLOOD_MOON_START_MESSAGE,
    format_long_date,
    create_blood_moon_start_embed,
    create_blood_moon_end_embed,
)


__all__ = [
    'EmbedBuilder',
    'BLOOD_MOON_START_COLOR',
    'BLOOD_MOON_END_COLOR',
    'BLOOD_MOON_START_MESSAGE',
    'format_long_date',
    'create_blood_moon_start_embed',
    'create_blood_moon_end_embed',
]
