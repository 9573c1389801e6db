"""
Pytest configuration and shared fixtures for testing.

This file contains shared fixtures and in-memory fakes of the engine's
collaborators (monster catalog, raid dispatcher, channels, announcer).
"""

import asyncio
from datetime import datetime
from typing import Dict, List, Optional

import pytest
import pytz

from world_events.core.interfaces import (
    Announcer,
    ChannelDirectory,
    ChannelHandle,
    ChannelNotFoundError,
    MonsterCatalog,
    RaidDispatcher,
)
from world_events.core.models import MonsterDescriptor, RaidOutcome
from world_events.core.repositories import (
    SQLiteAnnouncementRepository,
    SQLiteTriggerStateRepository,
)


NEW_YORK = pytz.timezone("America/New_York")


def ny_time(year, month, day, hour=0, minute=0, second=0) -> datetime:
    """Aware datetime in America/New_York."""
    return NEW_YORK.localize(datetime(year, month, day, hour, minute, second))


# =============================================================================
# Collaborator fakes
# =============================================================================

class FakeMonsterCatalog(MonsterCatalog):
    """Returns a fixed monster per region (or None)."""

    def __init__(self, monsters: Optional[Dict[str, MonsterDescriptor]] = None, default=None):
        self.monsters = monsters or {}
        self.default = default
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None

    async def get_above_tier_by_region(self, min_tier, region):
        self.calls.append((min_tier, region))
        if self.error:
            raise self.error
        return self.monsters.get(region, self.default)


class FakeRaidDispatcher(RaidDispatcher):
    """Records every raid and returns a configurable outcome."""

    def __init__(self, outcome: Optional[RaidOutcome] = None):
        self.outcome = outcome or RaidOutcome(success=True, raid_id="R12345")
        self.calls: List[tuple] = []

    async def trigger(self, monster, target, village, is_automated=True):
        self.calls.append((monster, target, village, is_automated))
        return self.outcome


class FakeChannelHandle(ChannelHandle):

    def __init__(self, channel_id: str, name: str, renameable: bool = True, rename_error=None):
        self._channel_id = channel_id
        self._name = name
        self.renameable = renameable
        self.rename_error = rename_error
        self.renames: List[str] = []

    @property
    def channel_id(self) -> str:
        return self._channel_id

    @property
    def name(self) -> str:
        return self._name

    def can_rename(self) -> bool:
        return self.renameable

    async def rename(self, new_name: str) -> None:
        if self.rename_error:
            raise self.rename_error
        self.renames.append(new_name)
        self._name = new_name


class FakeChannelDirectory(ChannelDirectory):
    """Resolves channels from a dict; ``errors`` makes fetch raise for an id."""

    def __init__(self, handles: Optional[Dict[str, FakeChannelHandle]] = None):
        self.handles = handles or {}
        self.errors: Dict[str, Exception] = {}
        self.fetches: List[str] = []

    def add(self, channel_id: str, name: str, **kwargs) -> FakeChannelHandle:
        handle = FakeChannelHandle(channel_id, name, **kwargs)
        self.handles[channel_id] = handle
        return handle

    async def fetch(self, channel_id: str) -> ChannelHandle:
        self.fetches.append(channel_id)
        if channel_id in self.errors:
            raise self.errors[channel_id]
        if channel_id not in self.handles:
            raise ChannelNotFoundError(f"Unknown channel {channel_id}")
        return self.handles[channel_id]


class FakeAnnouncer(Announcer):
    """Records announcements; channels in ``failing`` raise on send, ``delay`` slows every send."""

    def __init__(self):
        self.sent: List[tuple] = []
        self.failing: Dict[str, Exception] = {}
        self.delay: float = 0

    async def announce(self, channel_id, announcement_type, anchor_date, now):
        if self.delay:
            await asyncio.sleep(self.delay)
        if channel_id in self.failing:
            raise self.failing[channel_id]
        self.sent.append((channel_id, announcement_type, anchor_date, now))

    def sent_to(self, announcement_type=None) -> List[str]:
        return [
            channel_id for channel_id, kind, _, _ in self.sent
            if announcement_type is None or kind == announcement_type
        ]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def temp_db_path(tmp_path):
    """
    Provide a temporary file path for database testing.

    Args:
        tmp_path: pytest's built-in temporary directory fixture

    Returns:
        str: Temporary database file path
    """
    return str(tmp_path / "world_events.db")


@pytest.fixture
async def announcement_repo(temp_db_path):
    repo = SQLiteAnnouncementRepository(temp_db_path)
    await repo.initialize()
    return repo


@pytest.fixture
async def trigger_state_repo(temp_db_path):
    repo = SQLiteTriggerStateRepository(temp_db_path)
    await repo.initialize()
    return repo


@pytest.fixture
def monster_catalog():
    return FakeMonsterCatalog(default=MonsterDescriptor("Silver Lynel", 6))


@pytest.fixture
def raid_dispatcher():
    return FakeRaidDispatcher()


@pytest.fixture
def channel_directory():
    return FakeChannelDirectory()


@pytest.fixture
def announcer():
    return FakeAnnouncer()
