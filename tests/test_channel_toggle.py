"""
Tests for the channel presentation toggle.
"""

import pytest

from world_events.core.interfaces import (
    ChannelNotFoundError,
    ChannelPermissionError,
    TransientExternalError,
)
from world_events.core.models import RenameOutcome, ToggleResult
from world_events.core.services import ChannelPresentationToggle


class TestChannelPresentationToggle:
    """Tests for ChannelPresentationToggle."""

    @pytest.fixture
    def toggle(self, channel_directory):
        return ChannelPresentationToggle(channel_directory)

    @pytest.mark.asyncio
    async def test_renames_each_channel(self, toggle, channel_directory):
        a = channel_directory.add("111", "town-a")
        b = channel_directory.add("222", "town-b")

        result = await toggle.apply({"111": "🔴town-a", "222": "🔴town-b"})

        assert result.all_succeeded
        assert result.renamed == {"111", "222"}
        assert a.name == "🔴town-a"
        assert b.renames == ["🔴town-b"]

    @pytest.mark.asyncio
    async def test_matching_name_is_left_alone(self, toggle, channel_directory):
        handle = channel_directory.add("111", "town-a")

        result = await toggle.apply({"111": "town-a"})

        assert result.outcomes["111"] == RenameOutcome.UNCHANGED
        assert handle.renames == []
        assert "111" in result.succeeded

    @pytest.mark.asyncio
    async def test_missing_permission_is_checked_before_rename(self, toggle, channel_directory):
        handle = channel_directory.add("111", "town-a", renameable=False)

        result = await toggle.apply({"111": "🔴town-a"})

        assert result.outcomes["111"] == RenameOutcome.PERMISSION_DENIED
        assert handle.renames == []

    @pytest.mark.asyncio
    async def test_failures_do_not_abort_the_batch(self, toggle, channel_directory):
        channel_directory.add("111", "town-a")
        channel_directory.add("222", "town-b", rename_error=ChannelPermissionError("Missing Permissions"))
        channel_directory.add("333", "town-c", rename_error=TransientExternalError("rate limited"))
        channel_directory.errors["444"] = TransientExternalError("503 Service Unavailable")
        channel_directory.add("666", "town-f", rename_error=RuntimeError("boom"))

        result = await toggle.apply({
            "111": "x", "222": "x", "333": "x", "444": "x", "555": "x", "666": "x",
        })

        assert result.outcomes == {
            "111": RenameOutcome.RENAMED,
            "222": RenameOutcome.PERMISSION_DENIED,
            "333": RenameOutcome.TRANSIENT_ERROR,
            "444": RenameOutcome.TRANSIENT_ERROR,
            "555": RenameOutcome.NOT_FOUND,
            "666": RenameOutcome.TRANSIENT_ERROR,
        }
        assert result.succeeded == {"111"}
        assert result.errors["444"] == "503 Service Unavailable"
        assert len(result) == 6

    @pytest.mark.asyncio
    async def test_fetch_permission_error(self, toggle, channel_directory):
        channel_directory.errors["111"] = ChannelPermissionError("Missing Access")

        result = await toggle.apply({"111": "x"})

        assert result.outcomes["111"] == RenameOutcome.PERMISSION_DENIED

    @pytest.mark.asyncio
    async def test_channel_removed_before_rename(self, toggle, channel_directory):
        channel_directory.add("111", "town-a", rename_error=ChannelNotFoundError("Unknown Channel"))

        result = await toggle.apply({"111": "x"})

        assert result.outcomes["111"] == RenameOutcome.NOT_FOUND

    @pytest.mark.asyncio
    async def test_empty_mapping(self, toggle, channel_directory):
        result = await toggle.apply({})

        assert len(result) == 0
        assert result.all_succeeded
        assert channel_directory.fetches == []


class TestToggleResult:
    """Tests for the composite rename result."""

    def test_outcome_classification(self):
        result = ToggleResult()
        result.record("1", RenameOutcome.RENAMED)
        result.record("2", RenameOutcome.UNCHANGED)
        result.record("3", RenameOutcome.NOT_FOUND, "gone")

        assert result.succeeded == {"1", "2"}
        assert result.renamed == {"1"}
        assert result.failed == {"3"}
        assert result.errors == {"3": "gone"}
        assert not result.all_succeeded
