"""
Activity Aggregator for the world events engine.

Tracks recent chat activity per channel over a sliding window. This is pure
in-memory bookkeeping and never raises. It is meant to be driven from a single
asyncio event loop (the Discord message listener writes, the encounter trigger
reads and resets), so it holds no lock.
"""

import time
from typing import Dict, Iterable, Optional, Set, Tuple

from ..models import ActivityWindow, ChannelActivity


# Default sliding window (30 minutes)
DEFAULT_WINDOW_SECONDS = 30 * 60


class ActivityAggregator:
    """
    Per-channel sliding window of message timestamps and authors.

    Windows are created lazily on the first message of a channel and
    dropped once every entry has aged out.
    """

    def __init__(
        self,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        excluded_channels: Optional[Iterable[str]] = None
    ):
        """
        Initialize the aggregator.

        Args:
            window_seconds: Length of the sliding window
            excluded_channels: Channel ids whose messages are ignored
        """
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.window_seconds = window_seconds
        self.excluded_channels: Set[str] = {str(c) for c in (excluded_channels or [])}
        self._windows: Dict[str, ActivityWindow] = {}

    def is_excluded(self, channel_id: str) -> bool:
        return str(channel_id) in self.excluded_channels

    def record(
        self,
        channel_id: str,
        user_id: str,
        is_bot: bool,
        timestamp: Optional[float] = None
    ) -> bool:
        """
        Record one chat message.

        Args:
            channel_id: Channel the message was posted in
            user_id: Author id
            is_bot: Whether the author is a bot
            timestamp: Message time (UNIX seconds, defaults to now)

        Returns:
            True if the message was counted
        """
        if is_bot:
            return False
        channel_id = str(channel_id)
        if channel_id in self.excluded_channels:
            return False
        if timestamp is None:
            timestamp = time.time()

        window = self._windows.get(channel_id)
        if window is None:
            window = ActivityWindow(channel_id)
            self._windows[channel_id] = window

        window.add(timestamp, str(user_id))
        window.evict(timestamp, self.window_seconds)
        return True

    def snapshot(self, now: Optional[float] = None) -> Dict[str, ChannelActivity]:
        """
        Evict stale entries as of ``now`` and report every tracked channel.

        Channels left empty after eviction are dropped from tracking and
        are not reported.

        Returns:
            Dict mapping channel id to ChannelActivity
        """
        if now is None:
            now = time.time()

        result: Dict[str, ChannelActivity] = {}
        for channel_id in list(self._windows):
            window = self._windows[channel_id]
            window.evict(now, self.window_seconds)
            if window.message_count == 0:
                del self._windows[channel_id]
                continue
            result[channel_id] = window.to_snapshot()
        return result

    def totals(self, now: Optional[float] = None) -> Tuple[int, int]:
        """
        Server-wide totals across all non-excluded channels.

        Returns:
            Tuple of (total_messages, distinct_users). Users active in several
            channels are counted once.
        """
        total_messages = 0
        users: Set[str] = set()
        for channel_id, activity in self.snapshot(now).items():
            if channel_id in self.excluded_channels:
                continue
            total_messages += activity.message_count
            users.update(activity.user_ids)
        return total_messages, len(users)

    def reset_all(self):
        """Clear every channel's window."""
        for window in self._windows.values():
            window.clear()
        self._windows.clear()

    @property
    def tracked_channels(self) -> Set[str]:
        return set(self._windows)

    def __len__(self) -> int:
        return len(self._windows)
