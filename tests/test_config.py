"""
Tests for engine configuration and environment loading.
"""

import os

import pytest

from world_events.config import (
    BLOOD_MOON_ANCHORS,
    EngineConfig,
    VillageConfig,
    load_config,
)
from world_events.core.interfaces import ConfigurationError


ENV_VARS = [
    "RUDANIA_TOWNHALL", "INARIKO_TOWNHALL", "VHINTL_TOWNHALL",
    "RAID_MESSAGE_THRESHOLD", "RAID_MIN_ACTIVE_USERS", "RAID_WINDOW_MINUTES",
    "RAID_COOLDOWN_HOURS", "EVENT_TICK_SECONDS", "BLOOD_MOON_HOUR",
    "EVENT_TIMEZONE", "EXCLUDED_CHANNELS", "RESTRICTED_ROLE_IDS", "WORLD_EVENTS_DB",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolated os.environ (load_dotenv writes to it) and an empty .env path."""
    environ = os.environ.copy()
    for name in ENV_VARS:
        environ.pop(name, None)
    monkeypatch.setattr(os, "environ", environ)
    return tmp_path / ".env"


def configured() -> EngineConfig:
    config = EngineConfig()
    for i, village in enumerate(config.villages):
        village.channel_id = str(1000 + i)
    return config


class TestEngineConfig:
    """Tests for EngineConfig defaults and validation."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.message_threshold == 100
        assert config.min_unique_users == 4
        assert config.window_seconds == 30 * 60
        assert config.cooldown_seconds == 4 * 60 * 60
        assert config.activation_hour == 20
        assert config.timezone == "America/New_York"
        assert config.retention_days == 7
        assert len(config.anchors) == len(BLOOD_MOON_ANCHORS) == 14
        assert config.village_regions == {"Rudania": "Eldin", "Inariko": "Lanayru", "Vhintl": "Faron"}

    def test_valid_config_passes(self):
        configured().validate()

    def test_missing_village_channel(self):
        with pytest.raises(ConfigurationError, match="Rudania"):
            EngineConfig().validate()

    def test_bad_values_are_all_reported(self):
        config = configured()
        config.activation_hour = 25
        config.timezone = "Mars/Olympus_Mons"
        config.anchors = []

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        message = str(exc_info.value)
        assert "activation_hour" in message
        assert "Mars/Olympus_Mons" in message
        assert "anchor" in message

    def test_rename_mappings(self):
        config = configured()

        assert config.default_mapping["1000"] == "🔥》rudania-townhall"
        assert config.active_mapping["1000"] == "🔴🔥》rudania-townhall"
        assert config.announcement_channels == ["1000", "1001", "1002"]

    def test_unconfigured_villages_left_out_of_mappings(self):
        config = EngineConfig()
        config.villages[1].channel_id = "2000"

        assert list(config.active_mapping) == ["2000"]

    def test_explicit_active_name(self):
        village = VillageConfig("Rudania", "1", "Eldin", "town", active_name="red-town")
        assert village.active_name == "red-town"


class TestLoadConfig:
    """Tests for load_config()."""

    def test_reads_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("RUDANIA_TOWNHALL", "111")
        monkeypatch.setenv("INARIKO_TOWNHALL", "222")
        monkeypatch.setenv("VHINTL_TOWNHALL", "333")
        monkeypatch.setenv("RAID_MESSAGE_THRESHOLD", "50")
        monkeypatch.setenv("RAID_COOLDOWN_HOURS", "1.5")
        monkeypatch.setenv("EXCLUDED_CHANNELS", "1, 2 3")
        monkeypatch.setenv("EVENT_TIMEZONE", "UTC")

        config = load_config(str(clean_env))

        assert config.village_channels == {"Rudania": "111", "Inariko": "222", "Vhintl": "333"}
        assert config.message_threshold == 50
        assert config.cooldown_seconds == 5400
        assert config.excluded_channels == ["1", "2", "3"]
        assert config.timezone == "UTC"
        config.validate()

    def test_reads_dotenv_file(self, clean_env):
        clean_env.write_text(
            "RUDANIA_TOWNHALL=111\n"
            "BLOOD_MOON_HOUR=21\n"
            "WORLD_EVENTS_DB=/tmp/events.db\n",
            encoding="utf-8",
        )

        config = load_config(str(clean_env))

        assert config.village_channels["Rudania"] == "111"
        assert config.village_channels["Inariko"] is None
        assert config.activation_hour == 21
        assert config.db_path == "/tmp/events.db"

    def test_defaults_without_environment(self, clean_env):
        config = load_config(str(clean_env))

        assert config.message_threshold == 100
        assert config.excluded_channels == ["606126567302627329"]
        assert config.restricted_role_ids == ["788137818135330837"]

    def test_non_numeric_value(self, clean_env, monkeypatch):
        monkeypatch.setenv("RAID_MIN_ACTIVE_USERS", "four")

        with pytest.raises(ConfigurationError, match="RAID_MIN_ACTIVE_USERS"):
            load_config(str(clean_env))
