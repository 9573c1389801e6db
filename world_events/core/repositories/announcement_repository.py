"""
SQLite implementation of the announcement idempotency store.

The composite primary key on (channel_id, announcement_type, date_key) is what
makes "once per day" hold across restarts and across several bot processes
sharing the database file: the second INSERT OR IGNORE for a key changes no row.
"""

import os
import time
from typing import List, Optional

from world_events.core.interfaces import AnnouncementStore
from world_events.core.models import AnnouncementRecord, AnnouncementType, RecordResult
from world_events.utils import get_logger
from .base import BaseRepository

SECONDS_PER_DAY = 86400

logger = get_logger("announcements")


class SQLiteAnnouncementRepository(BaseRepository, AnnouncementStore):
    """
    SQLite implementation of AnnouncementStore.
    """

    DEFAULT_DB_PATH = os.path.join("data", "world_events.db")

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the announcement repository.

        Args:
            db_path: Path to the SQLite database file (defaults to data/world_events.db)
        """
        super().__init__(db_path or self.DEFAULT_DB_PATH)

    async def initialize(self):
        """Initialize the database schema."""
        async with self.get_connection() as conn:
            await conn.execute('''
                CREATE TABLE IF NOT EXISTS announcement_records (
                    channel_id TEXT NOT NULL,
                    announcement_type TEXT NOT NULL,
                    date_key TEXT NOT NULL,
                    sent_at INTEGER NOT NULL,
                    PRIMARY KEY (channel_id, announcement_type, date_key)
                )
            ''')
            await conn.commit()

        # Retention sweeps filter on sent_at
        await self.create_index_if_not_exists(
            "idx_announcement_sent_at",
            "announcement_records",
            ["sent_at"]
        )

    async def has_been_sent(
        self,
        channel_id: str,
        announcement_type: AnnouncementType,
        date_key: str
    ) -> bool:
        row = await self.fetch_one(
            '''SELECT 1 FROM announcement_records
               WHERE channel_id = ? AND announcement_type = ? AND date_key = ?''',
            (str(channel_id), AnnouncementType(announcement_type).value, date_key)
        )
        return row is not None

    async def record_sent(
        self,
        channel_id: str,
        announcement_type: AnnouncementType,
        date_key: str,
        sent_at: Optional[int] = None
    ) -> RecordResult:
        """
        Claim the (channel, type, day) slot.

        Note:
            Uses INSERT OR IGNORE so a concurrent or repeated claim is a no-op
            and reports ALREADY_EXISTS
        """
        if sent_at is None:
            sent_at = int(time.time())

        changed = await self.execute_rowcount(
            '''INSERT OR IGNORE INTO announcement_records
               (channel_id, announcement_type, date_key, sent_at)
               VALUES (?, ?, ?, ?)''',
            (str(channel_id), AnnouncementType(announcement_type).value, date_key, int(sent_at))
        )
        if changed:
            return RecordResult.RECORDED
        return RecordResult.ALREADY_EXISTS

    async def release(
        self,
        channel_id: str,
        announcement_type: AnnouncementType,
        date_key: str
    ) -> bool:
        deleted = await self.execute_rowcount(
            '''DELETE FROM announcement_records
               WHERE channel_id = ? AND announcement_type = ? AND date_key = ?''',
            (str(channel_id), AnnouncementType(announcement_type).value, date_key)
        )
        return deleted > 0

    async def cleanup(self, retention_days: int = 7, current_time: Optional[int] = None) -> int:
        """
        Delete records older than ``retention_days``.

        Args:
            retention_days: Keep records newer than this many days
            current_time: Override current time

        Returns:
            Number of records deleted
        """
        if retention_days < 0:
            raise ValueError("retention_days must not be negative")
        if current_time is None:
            current_time = int(time.time())

        cutoff = current_time - (retention_days * SECONDS_PER_DAY)
        deleted = await self.execute_rowcount(
            "DELETE FROM announcement_records WHERE sent_at < ?",
            (cutoff,)
        )
        if deleted:
            logger.info(f"Cleaned up {deleted} old announcement records")
        return deleted

    async def get_recent(self, limit: int = 20) -> List[AnnouncementRecord]:
        rows = await self.fetch_all(
            '''SELECT channel_id, announcement_type, date_key, sent_at
               FROM announcement_records
               ORDER BY sent_at DESC, date_key DESC
               LIMIT ?''',
            (limit,)
        )
        return [AnnouncementRecord.from_db_row(row) for row in rows]

    async def count(self) -> int:
        """Total number of stored records."""
        row = await self.fetch_one("SELECT COUNT(*) FROM announcement_records")
        return row[0] if row else 0
