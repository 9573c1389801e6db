"""
Discord event handlers for the world events engine.

This module provides event handler classes for Discord bot events:
- Activity handling (feeds chat messages to the activity aggregator)
- Ready handling (starts the world event scheduler)

These handlers are designed to be registered with the bot instance
and delegate business logic to the core services.
"""

from typing import Dict, Iterable, Optional
from abc import ABC, abstractmethod
import discord
from discord.ext import commands

from world_events.core.services import ActivityAggregator, EventScheduler
from world_events.utils import get_logger

logger = get_logger("handlers")


class BaseHandler(ABC):
    """Abstract base class for Discord event handlers."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @abstractmethod
    async def setup(self) -> None:
        """Register this handler with the bot."""
        pass


class ActivityHandler(BaseHandler):
    """
    Counts guild chat messages towards raid activity.

    Skips bots, direct messages, members holding a restricted role and
    channels under an excluded category.
    """

    def __init__(
        self,
        bot: commands.Bot,
        aggregator: ActivityAggregator,
        restricted_role_ids: Optional[Iterable[str]] = None,
    ):
        super().__init__(bot)
        self.aggregator = aggregator
        self.restricted_role_ids = {str(r) for r in (restricted_role_ids or [])}

    async def setup(self) -> None:
        """Register message handlers with the bot."""
        self.bot.add_listener(self.on_message, 'on_message')
        if self.restricted_role_ids:
            logger.info(
                f"Role restriction active - users with roles {sorted(self.restricted_role_ids)} "
                f"cannot trigger raids"
            )

    def _is_restricted(self, member) -> bool:
        roles = getattr(member, 'roles', None) or []
        return any(str(role.id) in self.restricted_role_ids for role in roles)

    async def on_message(self, message: discord.Message) -> None:
        """Handle incoming messages."""
        if message.author.bot:
            return
        if message.guild is None:
            return
        if self._is_restricted(message.author):
            return

        category_id = getattr(message.channel, 'category_id', None)
        if category_id is not None and self.aggregator.is_excluded(str(category_id)):
            return

        self.aggregator.record(
            str(message.channel.id),
            str(message.author.id),
            message.author.bot,
            message.created_at.timestamp(),
        )


class SchedulerHandler(BaseHandler):
    """
    Starts the world event scheduler once the bot is ready.

    on_ready can fire again after a reconnect; the scheduler is only
    started when it is not already running.
    """

    def __init__(self, bot: commands.Bot, scheduler: EventScheduler):
        super().__init__(bot)
        self.scheduler = scheduler

    async def setup(self) -> None:
        self.bot.add_listener(self.on_ready, 'on_ready')

    async def on_ready(self) -> None:
        if self.scheduler.is_running:
            return
        self.scheduler.start()


def setup_handlers(
    bot: commands.Bot,
    *,
    aggregator: ActivityAggregator,
    scheduler: EventScheduler,
    restricted_role_ids: Optional[Iterable[str]] = None,
) -> Dict[str, BaseHandler]:
    """
    Set up all world event handlers for the bot.

    Args:
        bot: The Discord bot instance
        aggregator: Activity aggregator fed by on_message
        scheduler: Scheduler started by on_ready
        restricted_role_ids: Roles whose members never count towards activity

    Returns:
        Dictionary of handler name -> handler instance
    """
    return {
        'activity': ActivityHandler(bot, aggregator, restricted_role_ids),
        'scheduler': SchedulerHandler(bot, scheduler),
    }


async def register_handlers(handlers: Dict[str, BaseHandler]) -> None:
    """Register all handlers with the bot."""
    for name, handler in handlers.items():
        try:
            await handler.setup()
            logger.info(f"Registered {name} handler")
        except Exception:
            logger.exception(f"Failed to register {name} handler")


__all__ = [
    'BaseHandler',
    'ActivityHandler',
    'SchedulerHandler',
    'setup_handlers',
    'register_handlers',
]
