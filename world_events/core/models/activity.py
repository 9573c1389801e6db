"""
Activity window models.

An ActivityWindow holds the recent messages of one channel. Unique users are
derived from the entries still inside the window, so evicting a message also
forgets its author once they have no other message left in the window.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, FrozenSet, Tuple


@dataclass(frozen=True)
class ChannelActivity:
    """Snapshot of one channel's activity window."""
    channel_id: str
    message_count: int
    unique_user_count: int
    user_ids: FrozenSet[str] = frozenset()


@dataclass
class ActivityWindow:
    """
    Sliding window of (timestamp, user_id) entries for a single channel.

    Entries are appended in arrival order. Out-of-order timestamps are
    tolerated: eviction scans the whole deque rather than stopping at the
    first fresh entry.
    """

    channel_id: str
    entries: Deque[Tuple[float, str]] = field(default_factory=deque)

    def add(self, timestamp: float, user_id: str):
        """Append a message to the window."""
        self.entries.append((timestamp, user_id))

    def evict(self, now: float, window_seconds: float) -> int:
        """
        Drop entries older than ``now - window_seconds``.

        Returns:
            Number of entries removed
        """
        cutoff = now - window_seconds
        before = len(self.entries)

        # Fast path for the common in-order case
        while self.entries and self.entries[0][0] < cutoff:
            self.entries.popleft()

        if any(ts < cutoff for ts, _ in self.entries):
            self.entries = deque(e for e in self.entries if e[0] >= cutoff)

        return before - len(self.entries)

    def clear(self):
        self.entries.clear()

    @property
    def message_count(self) -> int:
        return len(self.entries)

    @property
    def user_ids(self) -> FrozenSet[str]:
        return frozenset(user_id for _, user_id in self.entries)

    def oldest_timestamp(self) -> float:
        """Oldest timestamp in the window (0 when empty)."""
        if not self.entries:
            return 0
        return min(ts for ts, _ in self.entries)

    def to_snapshot(self) -> ChannelActivity:
        users = self.user_ids
        return ChannelActivity(
            channel_id=self.channel_id,
            message_count=self.message_count,
            unique_user_count=len(users),
            user_ids=users,
        )
