"""
Application initialization module.

This module wires the world events engine together: repositories, core
services, the scheduler and (optionally) a discord.py bot.

Usage:
    from world_events.app import create_engine, attach_to_bot
    from world_events.config import load_config

    config = load_config()
    engine = await create_engine(
        config,
        monster_catalog=catalog,
        raid_dispatcher=dispatcher,
        channel_directory=DiscordChannelDirectory(bot),
        announcer=DiscordAnnouncer(bot, config.anchors, config.timezone),
    )
    await attach_to_bot(bot, engine)
"""

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from world_events.config import EngineConfig
from world_events.core.interfaces import (
    Announcer,
    ChannelDirectory,
    MonsterCatalog,
    RaidDispatcher,
)
from world_events.core.repositories import (
    SQLiteAnnouncementRepository,
    SQLiteTriggerStateRepository,
)
from world_events.core.services import (
    ActivityAggregator,
    CalendarEventDetector,
    ChannelPresentationToggle,
    EncounterTrigger,
    EventScheduler,
    TickReport,
)
from world_events.utils import get_logger, utc_now

logger = get_logger("app")


@dataclass
class WorldEventsEngine:
    """All wired components of one engine instance."""
    config: EngineConfig
    repos: Dict[str, Any]
    aggregator: ActivityAggregator
    trigger: EncounterTrigger
    toggle: ChannelPresentationToggle
    detector: CalendarEventDetector
    scheduler: EventScheduler
    handlers: Dict[str, Any] = field(default_factory=dict)

    def start(self):
        return self.scheduler.start()

    async def tick(self, now: Optional[datetime] = None) -> TickReport:
        return await self.scheduler.tick(now)

    async def shutdown(self):
        await self.scheduler.shutdown()


async def initialize_repositories(config: EngineConfig) -> Dict[str, Any]:
    """
    Initialize all repositories.

    Args:
        config: Engine configuration (only db_path is used)

    Returns:
        Dictionary containing initialized repository instances
    """
    repos = {
        "announcements": SQLiteAnnouncementRepository(config.db_path),
        "trigger_state": SQLiteTriggerStateRepository(config.db_path),
    }

    await repos["announcements"].initialize()
    await repos["trigger_state"].initialize()

    return repos


async def create_engine(
    config: EngineConfig,
    *,
    monster_catalog: MonsterCatalog,
    raid_dispatcher: RaidDispatcher,
    channel_directory: ChannelDirectory,
    announcer: Announcer,
    repos: Optional[Dict[str, Any]] = None,
    rng: Optional[random.Random] = None,
    clock=utc_now,
    validate: bool = True,
) -> WorldEventsEngine:
    """
    Create a fully wired engine.

    Args:
        config: Engine configuration
        monster_catalog: Monster lookup collaborator
        raid_dispatcher: Raid creation collaborator
        channel_directory: Channel lookup for the townhall renames
        announcer: Delivers Blood Moon announcements
        repos: Pre-initialized repositories (created from config if omitted)
        rng: Random source for raid village selection
        clock: Scheduler clock
        validate: Validate the configuration before wiring

    Returns:
        WorldEventsEngine (scheduler not started)

    Raises:
        ConfigurationError: If validation is enabled and the config is invalid
    """
    if validate:
        config.validate()

    if repos is None:
        repos = await initialize_repositories(config)

    aggregator = ActivityAggregator(
        window_seconds=config.window_seconds,
        excluded_channels=config.excluded_channels,
    )
    trigger = EncounterTrigger(
        aggregator,
        monster_catalog,
        raid_dispatcher,
        village_channels=config.village_channels,
        village_regions=config.village_regions,
        message_threshold=config.message_threshold,
        min_unique_users=config.min_unique_users,
        cooldown_seconds=config.cooldown_seconds,
        min_tier=config.min_monster_tier,
        state_repo=repos.get("trigger_state"),
        rng=rng,
    )
    toggle = ChannelPresentationToggle(channel_directory)
    detector = CalendarEventDetector(
        config.anchors,
        repos["announcements"],
        toggle,
        announcer,
        announcement_channels=config.announcement_channels,
        active_mapping=config.active_mapping,
        default_mapping=config.default_mapping,
        activation_hour=config.activation_hour,
        timezone_name=config.timezone,
    )
    scheduler = EventScheduler(
        detector,
        trigger,
        store=repos["announcements"],
        interval_seconds=config.tick_seconds,
        job_timeout_seconds=config.job_timeout_seconds,
        cleanup_interval_seconds=config.cleanup_interval_seconds,
        retention_days=config.retention_days,
        clock=clock,
    )

    logger.info(
        f"World events engine ready: raid threshold {config.message_threshold} messages / "
        f"{config.min_unique_users} users in {config.window_minutes}m, "
        f"Blood Moon at {config.activation_hour:02d}:00 {config.timezone}"
    )

    return WorldEventsEngine(
        config=config,
        repos=repos,
        aggregator=aggregator,
        trigger=trigger,
        toggle=toggle,
        detector=detector,
        scheduler=scheduler,
    )


async def attach_to_bot(bot, engine: WorldEventsEngine) -> Dict[str, Any]:
    """
    Register the engine's Discord handlers on a bot.

    The activity listener feeds the aggregator; the scheduler starts on the
    bot's first on_ready (or right away if the bot is already ready).

    Args:
        bot: discord.py Bot instance
        engine: Engine created by create_engine()

    Returns:
        Dictionary of handler name -> handler instance
    """
    from world_events.discord_bot.handlers import setup_handlers, register_handlers

    handlers = setup_handlers(
        bot,
        aggregator=engine.aggregator,
        scheduler=engine.scheduler,
        restricted_role_ids=engine.config.restricted_role_ids,
    )
    await register_handlers(handlers)
    engine.handlers = handlers

    if bot.is_ready() and not engine.scheduler.is_running:
        engine.start()

    return handlers
