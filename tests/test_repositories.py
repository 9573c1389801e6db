"""
Tests for repository implementations.

These tests run against a real SQLite file so the composite primary key and
INSERT OR IGNORE behave exactly as in production.
"""

import asyncio

import aiosqlite
import pytest

from world_events.core.models import AnnouncementType, RecordResult
from world_events.core.repositories import (
    SQLiteAnnouncementRepository,
    SQLiteTriggerStateRepository,
)


NOW = 1_750_000_000
DAY = 86400


# =============================================================================
# Announcement Repository Tests
# =============================================================================

class TestAnnouncementRepository:
    """Tests for SQLiteAnnouncementRepository."""

    @pytest.mark.asyncio
    async def test_initialize_creates_schema(self, announcement_repo):
        async with aiosqlite.connect(announcement_repo.db_path) as conn:
            async with conn.execute("SELECT name FROM sqlite_master WHERE type='table'") as cursor:
                tables = [row[0] async for row in cursor]
            async with conn.execute("PRAGMA index_list(announcement_records)") as cursor:
                indexes = [row[1] async for row in cursor]
        assert "announcement_records" in tables
        assert "idx_announcement_sent_at" in indexes

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, announcement_repo):
        await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW)
        await announcement_repo.initialize()
        assert await announcement_repo.count() == 1

    @pytest.mark.asyncio
    async def test_record_and_check(self, announcement_repo):
        assert not await announcement_repo.has_been_sent("111", AnnouncementType.START, "2025-06-14")

        result = await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW)

        assert result == RecordResult.RECORDED
        assert await announcement_repo.has_been_sent("111", AnnouncementType.START, "2025-06-14")

    @pytest.mark.asyncio
    async def test_duplicate_record_reports_existing(self, announcement_repo):
        await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW)

        result = await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW + 5)

        assert result == RecordResult.ALREADY_EXISTS
        assert await announcement_repo.count() == 1

    @pytest.mark.asyncio
    async def test_key_is_channel_type_and_day(self, announcement_repo):
        await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW)

        assert not await announcement_repo.has_been_sent("222", AnnouncementType.START, "2025-06-14")
        assert not await announcement_repo.has_been_sent("111", AnnouncementType.END, "2025-06-14")
        assert not await announcement_repo.has_been_sent("111", AnnouncementType.START, "2025-06-15")

    @pytest.mark.asyncio
    async def test_string_announcement_type_accepted(self, announcement_repo):
        await announcement_repo.record_sent("111", "end", "2025-06-17", NOW)
        assert await announcement_repo.has_been_sent("111", AnnouncementType.END, "2025-06-17")

    @pytest.mark.asyncio
    async def test_concurrent_claims_record_once(self, announcement_repo):
        results = await asyncio.gather(*[
            announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW)
            for _ in range(5)
        ])

        assert results.count(RecordResult.RECORDED) == 1
        assert results.count(RecordResult.ALREADY_EXISTS) == 4

    @pytest.mark.asyncio
    async def test_release(self, announcement_repo):
        await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW)

        assert await announcement_repo.release("111", AnnouncementType.START, "2025-06-14")
        assert not await announcement_repo.has_been_sent("111", AnnouncementType.START, "2025-06-14")
        assert not await announcement_repo.release("111", AnnouncementType.START, "2025-06-14")

    @pytest.mark.asyncio
    async def test_cleanup_respects_retention(self, announcement_repo):
        await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-01", NOW - 10 * DAY)
        await announcement_repo.record_sent("111", AnnouncementType.END, "2025-06-08", NOW - 8 * DAY)
        await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW - 2 * DAY)

        deleted = await announcement_repo.cleanup(7, current_time=NOW)

        assert deleted == 2
        assert await announcement_repo.count() == 1
        assert await announcement_repo.has_been_sent("111", AnnouncementType.START, "2025-06-14")

    @pytest.mark.asyncio
    async def test_cleanup_rejects_negative_retention(self, announcement_repo):
        with pytest.raises(ValueError):
            await announcement_repo.cleanup(-1, current_time=NOW)

    @pytest.mark.asyncio
    async def test_get_recent(self, announcement_repo):
        await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW - 100)
        await announcement_repo.record_sent("222", AnnouncementType.END, "2025-06-17", NOW)

        records = await announcement_repo.get_recent(limit=1)

        assert len(records) == 1
        assert records[0].channel_id == "222"
        assert records[0].announcement_type == AnnouncementType.END
        assert records[0].key == ("222", "end", "2025-06-17")

    @pytest.mark.asyncio
    async def test_records_survive_new_instance(self, temp_db_path, announcement_repo):
        await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", NOW)

        reopened = SQLiteAnnouncementRepository(temp_db_path)
        await reopened.initialize()

        assert await reopened.has_been_sent("111", AnnouncementType.START, "2025-06-14")

    def test_creates_missing_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "data" / "events.db"
        SQLiteAnnouncementRepository(str(db_path))
        assert db_path.parent.is_dir()


# =============================================================================
# Trigger State Repository Tests
# =============================================================================

class TestTriggerStateRepository:
    """Tests for SQLiteTriggerStateRepository."""

    @pytest.mark.asyncio
    async def test_missing_key(self, trigger_state_repo):
        assert await trigger_state_repo.get_last_trigger_time("global_raid_cooldown") is None

    @pytest.mark.asyncio
    async def test_set_and_overwrite(self, trigger_state_repo):
        await trigger_state_repo.set_last_trigger_time("global_raid_cooldown", NOW)
        await trigger_state_repo.set_last_trigger_time("global_raid_cooldown", NOW + 60)

        assert await trigger_state_repo.get_last_trigger_time("global_raid_cooldown") == NOW + 60

    @pytest.mark.asyncio
    async def test_clear(self, trigger_state_repo):
        await trigger_state_repo.set_last_trigger_time("global_raid_cooldown", NOW)

        assert await trigger_state_repo.clear("global_raid_cooldown")
        assert await trigger_state_repo.get_last_trigger_time("global_raid_cooldown") is None
        assert not await trigger_state_repo.clear("global_raid_cooldown")

    @pytest.mark.asyncio
    async def test_shares_database_with_announcements(self, temp_db_path, announcement_repo):
        repo = SQLiteTriggerStateRepository(temp_db_path)
        await repo.initialize()
        await repo.set_last_trigger_time("global_raid_cooldown", NOW)
        await announcement_repo.record_sent("111", AnnouncementType.START, "2025-06-14", sent_at=NOW)

        assert await repo.get_last_trigger_time("global_raid_cooldown") == NOW
        assert await announcement_repo.has_been_sent("111", AnnouncementType.START, "2025-06-14")
