"""
Encounter Trigger for the world events engine.

Fires an automated monster raid when server-wide chat activity crosses a
message threshold with enough distinct participants, at most once per global
cooldown.

Activity is summed across all channels rather than judged per channel, so a
single spammed channel cannot carry the trigger. The cooldown is global rather
than per village so raids never land back to back in different villages.

A firing consumes the cooldown before any collaborator is called. If no
monster is found or the dispatch fails, that cooldown window is simply lost;
a wasted window is acceptable, a duplicate raid inside one is not.
"""

import asyncio
import random
import time
from typing import Dict, Optional

from ..interfaces import (
    ConfigurationError,
    MonsterCatalog,
    RaidDispatcher,
    TriggerStateRepository,
)
from ..models import EncounterTarget, TriggerResult, TriggerStatus
from .activity_aggregator import ActivityAggregator
from world_events.utils import format_duration, get_logger

logger = get_logger("encounters")

DEFAULT_MESSAGE_THRESHOLD = 100
DEFAULT_MIN_UNIQUE_USERS = 4
DEFAULT_COOLDOWN_SECONDS = 4 * 60 * 60
DEFAULT_MIN_TIER = 5
TRIGGER_KEY = "global_raid_cooldown"

# Error text the raid module returns when a raid is already running
RAID_COOLDOWN_ERROR = "Raid cooldown active"


class EncounterTrigger:
    """
    Threshold and cooldown gated raid trigger.

    Owns the trigger state (last firing time). When a TriggerStateRepository
    is given, that state is loaded on first use and written on every firing,
    so it survives restarts.
    """

    def __init__(
        self,
        aggregator: ActivityAggregator,
        monster_catalog: MonsterCatalog,
        raid_dispatcher: RaidDispatcher,
        village_channels: Dict[str, str],
        village_regions: Dict[str, str],
        message_threshold: int = DEFAULT_MESSAGE_THRESHOLD,
        min_unique_users: int = DEFAULT_MIN_UNIQUE_USERS,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        min_tier: int = DEFAULT_MIN_TIER,
        state_repo: Optional[TriggerStateRepository] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the trigger.

        Args:
            aggregator: Source of activity snapshots
            monster_catalog: Monster lookup collaborator
            raid_dispatcher: Raid creation collaborator
            village_channels: village name -> raid channel id
            village_regions: village name -> region name
            message_threshold: Minimum server-wide messages in the window
            min_unique_users: Minimum distinct authors in the window
            cooldown_seconds: Minimum time between two firings
            min_tier: Minimum monster tier requested from the catalog
            state_repo: Optional persistence for the last firing time
            rng: Random source for village selection
        """
        self.aggregator = aggregator
        self.monster_catalog = monster_catalog
        self.raid_dispatcher = raid_dispatcher
        self.village_channels = dict(village_channels)
        self.village_regions = dict(village_regions)
        self.message_threshold = message_threshold
        self.min_unique_users = min_unique_users
        self.cooldown_seconds = cooldown_seconds
        self.min_tier = min_tier
        self.state_repo = state_repo
        self.rng = rng or random.Random()

        self.last_trigger_time: Optional[float] = None
        self._state_loaded = state_repo is None
        self._lock = asyncio.Lock()

    # ==================== Configuration ====================

    def validate_config(self):
        """
        Check that every village can be targeted.

        Raises:
            ConfigurationError: On an empty village set or a village without
                a channel id or region
        """
        if not self.village_channels:
            raise ConfigurationError("No villages configured for raids")
        for village, channel_id in self.village_channels.items():
            if not channel_id:
                raise ConfigurationError(f"No channel mapping found for {village}")
            if not self.village_regions.get(village):
                raise ConfigurationError(f"No region mapping found for {village}")

    # ==================== Cooldown state ====================

    async def _ensure_state_loaded(self):
        if self._state_loaded:
            return
        stored = await self.state_repo.get_last_trigger_time(TRIGGER_KEY)
        if stored is not None:
            self.last_trigger_time = stored
            logger.info(f"Restored raid cooldown: last raid at {stored:.0f}")
        self._state_loaded = True

    async def _set_last_trigger_time(self, timestamp: float):
        self.last_trigger_time = timestamp
        if self.state_repo is not None:
            await self.state_repo.set_last_trigger_time(TRIGGER_KEY, timestamp)

    def cooldown_remaining(self, now: Optional[float] = None) -> float:
        """Seconds until the trigger may fire again (0 when ready)."""
        if now is None:
            now = time.time()
        if self.last_trigger_time is None:
            return 0
        return max(0.0, self.cooldown_seconds - (now - self.last_trigger_time))

    async def reset_cooldown(self):
        """Forget the last firing so the next evaluation may fire immediately."""
        async with self._lock:
            self.last_trigger_time = None
            self._state_loaded = True
            if self.state_repo is not None:
                await self.state_repo.clear(TRIGGER_KEY)
        logger.info("Global raid cooldown reset - raids can now be triggered immediately")

    # ==================== Evaluation ====================

    async def evaluate(self, current_time: Optional[float] = None) -> TriggerResult:
        """
        Evaluate activity and fire a raid if every gate passes.

        Args:
            current_time: Override current time (UNIX seconds)

        Returns:
            TriggerResult describing the outcome

        Raises:
            ConfigurationError: If the village configuration is unusable
        """
        if current_time is None:
            current_time = time.time()

        self.validate_config()

        async with self._lock:
            await self._ensure_state_loaded()

            last = self.last_trigger_time
            elapsed = None if last is None else current_time - last
            if elapsed is not None and elapsed < 0:
                # Clock skew or a corrupt stored value; restart the cooldown from now
                logger.warning(
                    f"Last raid time {self.last_trigger_time:.0f} is in the future "
                    f"(now {current_time:.0f}); clamping to now"
                )
                await self._set_last_trigger_time(current_time)
                return TriggerResult(
                    status=TriggerStatus.SKIPPED_COOLDOWN,
                    cooldown_remaining=self.cooldown_seconds,
                )

            if elapsed is not None and elapsed < self.cooldown_seconds:
                return TriggerResult(
                    status=TriggerStatus.SKIPPED_COOLDOWN,
                    cooldown_remaining=self.cooldown_seconds - elapsed,
                )

            total_messages, total_users = self.aggregator.totals(current_time)
            if total_messages < self.message_threshold or total_users < self.min_unique_users:
                return TriggerResult(
                    status=TriggerStatus.SKIPPED_BELOW_THRESHOLD,
                    total_messages=total_messages,
                    total_unique_users=total_users,
                )

            logger.info(
                f"TRIGGERING ENCOUNTER! Server-wide activity: {total_messages} messages, "
                f"{total_users} users across {len(self.aggregator)} channels"
            )
            await self._set_last_trigger_time(current_time)
            self.aggregator.reset_all()

        result = TriggerResult(
            status=TriggerStatus.FIRED,
            total_messages=total_messages,
            total_unique_users=total_users,
        )
        return await self._dispatch(result)

    def _select_target(self) -> EncounterTarget:
        village = self.rng.choice(sorted(self.village_channels))
        return EncounterTarget(
            village=village,
            channel_id=str(self.village_channels[village]),
            region=self.village_regions[village],
        )

    async def _dispatch(self, result: TriggerResult) -> TriggerResult:
        target = self._select_target()
        result.target = target
        logger.info(f"Selected village for raid: {target.village} ({target.region})")

        monster = await self.monster_catalog.get_above_tier_by_region(self.min_tier, target.region)
        if monster is None:
            logger.error(f"No tier {self.min_tier}+ monsters found in {target.region} region for {target.village}")
            result.status = TriggerStatus.FAILED_NO_MONSTER
            result.error = f"No tier {self.min_tier}+ monster in {target.region}"
            return result

        result.monster = monster
        logger.info(f"Triggering raid for {monster.name} (Tier {monster.tier}) in {target.village}")

        outcome = await self.raid_dispatcher.trigger(monster, target, target.village, True)
        result.outcome = outcome

        if not outcome.success:
            result.status = TriggerStatus.FAILED_DISPATCH
            result.error = outcome.error or "Unknown error"
            if RAID_COOLDOWN_ERROR in result.error:
                logger.info("Raid cooldown active - skipping random encounter")
            else:
                logger.error(f"Failed to trigger raid: {result.error}")
            return result

        logger.info(f"RANDOM ENCOUNTER COMPLETE! {monster.name} (T{monster.tier}) in {target.village}")
        return result

    def describe_cooldown(self, now: Optional[float] = None) -> str:
        remaining = self.cooldown_remaining(now)
        if remaining <= 0:
            return "ready"
        return f"{format_duration(remaining)} remaining"
