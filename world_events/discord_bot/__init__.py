"""
Discord Bot package for the world events engine.

This package contains the Discord presentation layer:
- adapters: discord.py implementations of the engine's collaborator interfaces
- formatters: Blood Moon announcement embeds
- handlers: Message and ready handlers
"""

from .formatters import (
    EmbedBuilder,
    create_blood_moon_start_embed,
    create_blood_moon_end_embed,
)

from .adapters import (
    DiscordChannelHandle,
    DiscordChannelDirectory,
    DiscordAnnouncer,
)

from .handlers import (
    BaseHandler,
    ActivityHandler,
    SchedulerHandler,
    setup_handlers,
    register_handlers,
)


__all__ = [
    # Formatters
    'EmbedBuilder',
    'create_blood_moon_start_embed',
    'create_blood_moon_end_embed',
    # Adapters
    'DiscordChannelHandle',
    'DiscordChannelDirectory',
    'DiscordAnnouncer',
    # Handlers
    'BaseHandler',
    'ActivityHandler',
    'SchedulerHandler',
    'setup_handlers',
    'register_handlers',
]
