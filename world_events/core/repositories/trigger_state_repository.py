"""
SQLite persistence for trigger cooldown state.

Keeping the last firing time on disk means a redeploy does not hand out a
fresh raid the moment the bot reconnects.
"""

import os
from typing import Optional

from world_events.core.interfaces import TriggerStateRepository
from .base import BaseRepository


class SQLiteTriggerStateRepository(BaseRepository, TriggerStateRepository):
    """SQLite implementation of TriggerStateRepository."""

    DEFAULT_DB_PATH = os.path.join("data", "world_events.db")

    def __init__(self, db_path: Optional[str] = None):
        super().__init__(db_path or self.DEFAULT_DB_PATH)

    async def initialize(self):
        """Initialize the database schema."""
        async with self.get_connection() as conn:
            await conn.execute('''
                CREATE TABLE IF NOT EXISTS trigger_state (
                    trigger_key TEXT PRIMARY KEY,
                    last_trigger_time REAL NOT NULL
                )
            ''')
            await conn.commit()

    async def get_last_trigger_time(self, trigger_key: str) -> Optional[float]:
        row = await self.fetch_one(
            "SELECT last_trigger_time FROM trigger_state WHERE trigger_key = ?",
            (trigger_key,)
        )
        return float(row[0]) if row else None

    async def set_last_trigger_time(self, trigger_key: str, timestamp: float) -> None:
        await self.execute(
            '''INSERT INTO trigger_state (trigger_key, last_trigger_time)
               VALUES (?, ?)
               ON CONFLICT(trigger_key) DO UPDATE SET last_trigger_time = excluded.last_trigger_time''',
            (trigger_key, float(timestamp))
        )

    async def clear(self, trigger_key: str) -> bool:
        deleted = await self.execute_rowcount(
            "DELETE FROM trigger_state WHERE trigger_key = ?",
            (trigger_key,)
        )
        return deleted > 0
