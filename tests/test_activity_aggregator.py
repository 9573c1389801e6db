"""
Tests for the activity aggregator and its window model.
"""

import pytest

from world_events.core.models import ActivityWindow
from world_events.core.services import ActivityAggregator


WINDOW = 30 * 60
T0 = 1_700_000_000.0


# =============================================================================
# ActivityWindow Tests
# =============================================================================

class TestActivityWindow:
    """Tests for the per-channel window."""

    def test_evict_keeps_entries_inside_window(self):
        window = ActivityWindow("c1")
        window.add(T0, "u1")
        window.add(T0 + 10, "u2")

        removed = window.evict(T0 + WINDOW, WINDOW)

        assert removed == 0
        assert window.message_count == 2

    def test_evict_drops_old_entries(self):
        window = ActivityWindow("c1")
        window.add(T0, "u1")
        window.add(T0 + 100, "u2")

        removed = window.evict(T0 + WINDOW + 50, WINDOW)

        assert removed == 1
        assert window.user_ids == frozenset({"u2"})

    def test_evict_handles_out_of_order_entries(self):
        window = ActivityWindow("c1")
        window.add(T0 + 500, "u1")
        window.add(T0, "u2")  # arrived late
        window.add(T0 + 600, "u3")

        window.evict(T0 + WINDOW + 100, WINDOW)

        assert window.message_count == 2
        assert "u2" not in window.user_ids

    def test_user_forgotten_when_last_message_expires(self):
        window = ActivityWindow("c1")
        window.add(T0, "u1")
        window.add(T0 + 1000, "u2")
        window.evict(T0 + WINDOW + 1, WINDOW)

        snapshot = window.to_snapshot()
        assert snapshot.unique_user_count == 1
        assert snapshot.user_ids == frozenset({"u2"})

    def test_oldest_timestamp(self):
        window = ActivityWindow("c1")
        assert window.oldest_timestamp() == 0
        window.add(T0 + 5, "u1")
        window.add(T0, "u2")
        assert window.oldest_timestamp() == T0


# =============================================================================
# ActivityAggregator Tests
# =============================================================================

class TestActivityAggregator:
    """Tests for ActivityAggregator."""

    @pytest.fixture
    def aggregator(self):
        return ActivityAggregator(window_seconds=WINDOW, excluded_channels=["excluded"])

    def test_rejects_non_positive_window(self):
        with pytest.raises(ValueError):
            ActivityAggregator(window_seconds=0)

    def test_bot_messages_are_ignored(self, aggregator):
        assert aggregator.record("c1", "bot", True, T0) is False
        assert aggregator.snapshot(T0) == {}

    def test_excluded_channel_is_ignored(self, aggregator):
        assert aggregator.record("excluded", "u1", False, T0) is False
        assert len(aggregator) == 0

    def test_record_counts_messages_and_users(self, aggregator):
        for i in range(5):
            aggregator.record("c1", f"u{i % 2}", False, T0 + i)

        activity = aggregator.snapshot(T0 + 10)["c1"]

        assert activity.message_count == 5
        assert activity.unique_user_count == 2

    def test_snapshot_counts_only_recent_messages(self, aggregator):
        """Every counted message lies within the window as of now."""
        aggregator.record("c1", "u1", False, T0)
        aggregator.record("c1", "u2", False, T0 + 1200)
        aggregator.record("c1", "u3", False, T0 + 1700)

        activity = aggregator.snapshot(T0 + 2400)["c1"]

        assert activity.message_count == 2
        assert activity.user_ids == frozenset({"u2", "u3"})

    def test_snapshot_drops_empty_channels(self, aggregator):
        aggregator.record("c1", "u1", False, T0)
        aggregator.record("c2", "u2", False, T0 + 2000)

        snapshot = aggregator.snapshot(T0 + WINDOW + 100)

        assert set(snapshot) == {"c2"}
        assert aggregator.tracked_channels == {"c2"}

    def test_record_evicts_stale_entries(self, aggregator):
        aggregator.record("c1", "u1", False, T0)
        aggregator.record("c1", "u2", False, T0 + WINDOW + 1)

        assert aggregator.snapshot(T0 + WINDOW + 1)["c1"].message_count == 1

    def test_totals_count_distinct_users_across_channels(self, aggregator):
        aggregator.record("c1", "u1", False, T0)
        aggregator.record("c1", "u2", False, T0)
        aggregator.record("c2", "u1", False, T0)
        aggregator.record("c3", "u3", False, T0)

        assert aggregator.totals(T0 + 1) == (4, 3)

    def test_reset_all_clears_every_window(self, aggregator):
        aggregator.record("c1", "u1", False, T0)
        aggregator.record("c2", "u2", False, T0)

        aggregator.reset_all()

        assert aggregator.snapshot(T0) == {}
        assert len(aggregator) == 0
        assert aggregator.totals(T0) == (0, 0)

    def test_channel_ids_are_normalized_to_strings(self, aggregator):
        aggregator.record(123, 456, False, T0)
        assert "123" in aggregator.snapshot(T0)
