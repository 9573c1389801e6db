"""
Calendar Event Detector for the world events engine.

Decides whether "now" falls inside a Blood Moon style activation window and
whether it is the activation instant, then drives the channel toggle and the
announcement store.

The detector keeps no state between ticks. It re-derives everything from
``now`` and the configured timezone, and relies on the announcement store to
make each edge happen at most once per channel and day:

    Inactive --(entry edge)--> Active --(exit edge)--> Inactive

The entry edge is the first window day (window active today, not yesterday);
the exit edge is the day after the last window day (active yesterday, not
today). Both fire at the activation hour.
"""

import asyncio
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..interfaces import Announcer, AnnouncementStore, ConfigurationError
from ..models import (
    AnnouncementType,
    CalendarAnchor,
    DetectionResult,
    RecordResult,
)
from .channel_toggle import ChannelPresentationToggle
from world_events.utils import (
    ensure_aware,
    get_logger,
    get_timezone,
    local_date,
    make_date_key,
    previous_day,
    to_local,
)

logger = get_logger("calendar")

DEFAULT_ACTIVATION_HOUR = 20
DEFAULT_TIMEZONE = "America/New_York"

DateLike = Union[date, datetime]


# =============================================================================
# Pure window arithmetic
# =============================================================================

def window_anchor_for(day: date, anchors: Iterable[CalendarAnchor]) -> Optional[date]:
    """
    Find the anchor whose 3-day window contains ``day``.

    Anchors are materialized in ``day``'s own year.

    Returns:
        The materialized anchor date, or None when ``day`` is outside every window
    """
    for anchor in anchors:
        anchor_date = anchor.materialize(day.year)
        if anchor_date is None:
            continue
        if anchor_date - timedelta(days=1) <= day <= anchor_date + timedelta(days=1):
            return anchor_date
    return None


def is_in_window(day: date, anchors: Iterable[CalendarAnchor]) -> bool:
    """True iff ``day`` is in [anchor-1, anchor+1] for some anchor."""
    return window_anchor_for(day, anchors) is not None


class CalendarEventDetector:
    """
    Detects entry and exit of calendar-window events.

    On an entry edge the "active" rename mapping is applied and START
    announcements go out; on an exit edge the "default" mapping is applied and
    END announcements go out to channels whose rename succeeded.
    """

    def __init__(
        self,
        anchors: Sequence[CalendarAnchor],
        store: AnnouncementStore,
        toggle: ChannelPresentationToggle,
        announcer: Announcer,
        announcement_channels: Iterable[str],
        active_mapping: Optional[Dict[str, str]] = None,
        default_mapping: Optional[Dict[str, str]] = None,
        activation_hour: int = DEFAULT_ACTIVATION_HOUR,
        timezone_name: str = DEFAULT_TIMEZONE,
    ):
        """
        Initialize the detector.

        Args:
            anchors: Anchor dates (an empty list fails each tick with ConfigurationError)
            store: Announcement idempotency store
            toggle: Channel rename batch runner
            announcer: Delivers START/END announcements
            announcement_channels: Channels receiving announcements
            active_mapping: channel id -> name while the event is active
            default_mapping: channel id -> name otherwise
            activation_hour: Local hour (0-23) at which both edges fire
            timezone_name: Timezone the hour and calendar days are evaluated in
        """
        if not 0 <= activation_hour <= 23:
            raise ValueError(f"activation_hour must be 0-23, got {activation_hour}")
        self.anchors: List[CalendarAnchor] = list(anchors)
        self.store = store
        self.toggle = toggle
        self.announcer = announcer
        self.announcement_channels: List[str] = [str(c) for c in announcement_channels if c]
        self.active_mapping = dict(active_mapping or {})
        self.default_mapping = dict(default_mapping or {})
        self.activation_hour = activation_hour
        self.timezone_name = timezone_name
        self.tz = get_timezone(timezone_name)

    # ==================== Time helpers ====================

    def _to_day(self, value: DateLike) -> date:
        if isinstance(value, datetime):
            return to_local(value, self.tz).date()
        return value

    def local_date(self, now: datetime) -> date:
        """Calendar date of ``now`` in the configured timezone."""
        return local_date(now, self.tz)

    def date_key(self, now: DateLike) -> str:
        return make_date_key(self._to_day(now))

    # ==================== Window predicates ====================

    def is_active_window(self, now: DateLike) -> bool:
        """
        True iff the local date of ``now`` lies in an anchor's 3-day window.

        Args:
            now: Aware datetime, or a calendar date
        """
        return is_in_window(self._to_day(now), self.anchors)

    def is_activation_instant(self, now: datetime) -> bool:
        """True iff the local hour equals the activation hour."""
        return to_local(now, self.tz).hour == self.activation_hour

    def is_entry_day(self, now: DateLike) -> bool:
        today = self._to_day(now)
        return self.is_active_window(today) and not self.is_active_window(previous_day(today))

    def is_exit_day(self, now: DateLike) -> bool:
        today = self._to_day(now)
        return self.is_active_window(previous_day(today)) and not self.is_active_window(today)

    def current_anchor(self, now: DateLike) -> Optional[date]:
        """Anchor date of the window containing ``now``, if any."""
        return window_anchor_for(self._to_day(now), self.anchors)

    def is_event_active(self, now: datetime) -> bool:
        """
        Whether the event itself is in effect right now.

        The event starts at the activation hour of the entry day and ends at
        the activation hour of the exit day.
        """
        local = to_local(now, self.tz)
        today = local.date()
        if self.is_exit_day(today):
            return local.hour < self.activation_hour
        if not self.is_active_window(today):
            return False
        if self.is_entry_day(today):
            return local.hour >= self.activation_hour
        return True

    async def should_announce_start(self, channel_id: str, now: datetime) -> bool:
        ensure_aware(now)
        if not (self.is_active_window(now) and self.is_activation_instant(now)):
            return False
        if not self.is_entry_day(now):
            return False
        return not await self.store.has_been_sent(
            channel_id, AnnouncementType.START, self.date_key(now)
        )

    async def should_announce_end(self, channel_id: str, now: datetime) -> bool:
        ensure_aware(now)
        if not self.is_activation_instant(now):
            return False
        yesterday = previous_day(self.local_date(now))
        if not self.is_active_window(yesterday):
            return False
        if not self.is_exit_day(now):
            return False
        return not await self.store.has_been_sent(
            channel_id, AnnouncementType.END, self.date_key(now)
        )

    # ==================== Tick ====================

    def _require_anchors(self):
        if not self.anchors:
            raise ConfigurationError("No calendar anchors configured")

    async def run(self, now: datetime) -> DetectionResult:
        """
        Evaluate one tick and apply any side effects.

        Args:
            now: Current time (timezone-aware)

        Returns:
            DetectionResult describing what was detected and done

        Raises:
            ConfigurationError: If no anchors are configured
        """
        ensure_aware(now)
        self._require_anchors()

        today = self.local_date(now)
        result = DetectionResult(
            date_key=make_date_key(today),
            active_window=self.is_active_window(today),
            activation_instant=self.is_activation_instant(now),
            entry_edge=self.is_entry_day(today),
            exit_edge=self.is_exit_day(today),
        )

        if not result.activation_instant:
            return result

        if result.entry_edge:
            result.anchor_date = window_anchor_for(today, self.anchors)
            await self._handle_start(now, result)
        elif result.exit_edge:
            result.anchor_date = window_anchor_for(previous_day(today), self.anchors)
            await self._handle_end(now, result)

        return result

    async def _handle_start(self, now: datetime, result: DetectionResult):
        pending = [
            channel_id for channel_id in self.announcement_channels
            if await self.should_announce_start(channel_id, now)
        ]
        result.toggle = await self.toggle.apply(self.active_mapping)

        if pending:
            logger.info(f"Blood Moon rising (anchor {result.anchor_date}) - announcing to {len(pending)} channel(s)")
        for channel_id in pending:
            await self._announce_once(channel_id, AnnouncementType.START, now, result)

    async def _handle_end(self, now: datetime, result: DetectionResult):
        result.toggle = await self.toggle.apply(self.default_mapping)
        renamed_ok = result.toggle.succeeded

        for channel_id in self.announcement_channels:
            # Channels whose name could not be restored do not get the "ended" message
            if channel_id in self.default_mapping and channel_id not in renamed_ok:
                logger.warning(f"Skipping end announcement for {channel_id}: channel revert failed")
                continue
            if await self.should_announce_end(channel_id, now):
                await self._announce_once(channel_id, AnnouncementType.END, now, result)

    async def force_start(self, now: datetime) -> DetectionResult:
        """
        Trigger the event immediately, ignoring the window and hour gates.

        START announcements still go out at most once per channel and day.
        """
        ensure_aware(now)
        today = self.local_date(now)
        result = DetectionResult(
            date_key=make_date_key(today),
            active_window=self.is_active_window(today),
            activation_instant=self.is_activation_instant(now),
            entry_edge=True,
            anchor_date=window_anchor_for(today, self.anchors),
        )
        logger.info("Triggering Blood Moon manually")
        result.toggle = await self.toggle.apply(self.active_mapping)
        for channel_id in self.announcement_channels:
            await self._announce_once(channel_id, AnnouncementType.START, now, result)
        return result

    async def _announce_once(
        self,
        channel_id: str,
        announcement_type: AnnouncementType,
        now: datetime,
        result: DetectionResult
    ) -> bool:
        """
        Claim the (channel, type, day) slot, then send.

        The slot is claimed before sending so two processes cannot both send;
        a failed or interrupted send releases the claim so the next tick can retry.
        """
        key = result.date_key
        claim = await self.store.record_sent(
            channel_id, announcement_type, key, sent_at=int(now.timestamp())
        )
        if claim == RecordResult.ALREADY_EXISTS:
            logger.debug(f"{announcement_type.value} announcement for {channel_id} on {key} already sent")
            return False

        try:
            await self.announcer.announce(channel_id, announcement_type, result.anchor_date, now)
        except asyncio.CancelledError:
            logger.warning(f"{announcement_type.value} announcement to {channel_id} interrupted; releasing claim")
            await asyncio.shield(self.store.release(channel_id, announcement_type, key))
            raise
        except Exception as e:
            logger.error(f"Failed to send {announcement_type.value} announcement to {channel_id}: {e}")
            await self.store.release(channel_id, announcement_type, key)
            result.failed.append(channel_id)
            return False

        logger.info(f"Blood Moon {announcement_type.value} announcement sent to channel {channel_id}")
        result.announced.append(channel_id)
        return True
