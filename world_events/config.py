"""
Configuration for the world events engine.

Defaults mirror the live server setup; every value can be overridden from the
environment (a .env file is loaded through python-dotenv).
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dotenv import load_dotenv

from world_events.core.interfaces import ConfigurationError
from world_events.core.models import CalendarAnchor
from world_events.utils import get_timezone, parse_id_list

# Blood Moon anchor dates (MM-DD); each opens a window from the day before to the day after
BLOOD_MOON_ANCHORS = [
    ("01-13", "Yowaka Ita"),
    ("02-08", "Noe Rajee"),
    ("03-06", "Ha Dahamar"),
    ("04-01", "Shae Katha"),
    ("04-27", "Keo Ruug"),
    ("05-23", "Gee Ha'rah"),
    ("06-18", "Jitan Sa'mi"),
    ("07-14", "Sha Warvo"),
    ("08-09", "Tutsuwa Nima"),
    ("09-04", "Shae Mo'sah"),
    ("09-30", "Hawa Koth"),
    ("10-26", "Maka Rah"),
    ("11-21", "Ya Naga"),
    ("12-17", "Etsu Korima"),
]

# Channels never counted towards raid activity
EXCLUDED_CHANNELS = ['606126567302627329']

# Members holding these roles cannot trigger raids
RESTRICTED_ROLE_IDS = ['788137818135330837']

ACTIVE_NAME_PREFIX = "🔴"


@dataclass
class VillageConfig:
    """
    A village that can host raids and shows the Blood Moon in its townhall.

    Attributes:
        name: Village name (e.g. "Rudania")
        channel_id: Townhall channel id (raids and announcements go here)
        region: Region the village belongs to, used for monster lookup
        default_name: Townhall channel name outside the Blood Moon
        active_name: Townhall channel name during the Blood Moon
    """
    name: str
    channel_id: Optional[str]
    region: str
    default_name: str
    active_name: str = ""

    def __post_init__(self):
        if not self.active_name:
            self.active_name = f"{ACTIVE_NAME_PREFIX}{self.default_name}"


def default_villages() -> List[VillageConfig]:
    return [
        VillageConfig("Rudania", None, "Eldin", "🔥》rudania-townhall"),
        VillageConfig("Inariko", None, "Lanayru", "💧》inariko-townhall"),
        VillageConfig("Vhintl", None, "Faron", "🌱》vhintl-townhall"),
    ]


def default_anchors() -> List[CalendarAnchor]:
    return [CalendarAnchor.from_string(value, label) for value, label in BLOOD_MOON_ANCHORS]


@dataclass
class EngineConfig:
    """All tunables of the world events engine."""

    # Raid trigger
    message_threshold: int = 100
    min_unique_users: int = 4
    window_minutes: int = 30
    cooldown_hours: float = 4
    min_monster_tier: int = 5

    # Blood Moon
    activation_hour: int = 20
    timezone: str = "America/New_York"
    anchors: List[CalendarAnchor] = field(default_factory=default_anchors)

    # Scheduling
    tick_seconds: int = 60
    job_timeout_seconds: int = 45
    cleanup_interval_hours: int = 24
    retention_days: int = 7

    villages: List[VillageConfig] = field(default_factory=default_villages)
    excluded_channels: List[str] = field(default_factory=lambda: list(EXCLUDED_CHANNELS))
    restricted_role_ids: List[str] = field(default_factory=lambda: list(RESTRICTED_ROLE_IDS))

    db_path: str = "data/world_events.db"

    # ==================== Derived values ====================

    @property
    def window_seconds(self) -> int:
        return int(self.window_minutes * 60)

    @property
    def cooldown_seconds(self) -> float:
        return self.cooldown_hours * 60 * 60

    @property
    def cleanup_interval_seconds(self) -> int:
        return int(self.cleanup_interval_hours * 60 * 60)

    @property
    def village_channels(self) -> Dict[str, Optional[str]]:
        return {v.name: v.channel_id for v in self.villages}

    @property
    def village_regions(self) -> Dict[str, str]:
        return {v.name: v.region for v in self.villages}

    @property
    def announcement_channels(self) -> List[str]:
        return [v.channel_id for v in self.villages if v.channel_id]

    @property
    def active_mapping(self) -> Dict[str, str]:
        """channel id -> Blood Moon name."""
        return {v.channel_id: v.active_name for v in self.villages if v.channel_id}

    @property
    def default_mapping(self) -> Dict[str, str]:
        """channel id -> regular name."""
        return {v.channel_id: v.default_name for v in self.villages if v.channel_id}

    # ==================== Validation ====================

    def validate(self):
        """
        Check every value the engine depends on.

        Raises:
            ConfigurationError: Describing every problem found
        """
        problems = []

        if self.message_threshold < 1:
            problems.append("message_threshold must be at least 1")
        if self.min_unique_users < 1:
            problems.append("min_unique_users must be at least 1")
        if self.window_minutes <= 0:
            problems.append("window_minutes must be positive")
        if self.cooldown_hours < 0:
            problems.append("cooldown_hours must not be negative")
        if not 0 <= self.activation_hour <= 23:
            problems.append(f"activation_hour must be 0-23, got {self.activation_hour}")
        if self.tick_seconds <= 0:
            problems.append("tick_seconds must be positive")
        if self.job_timeout_seconds <= 0:
            problems.append("job_timeout_seconds must be positive")
        if self.retention_days < 0:
            problems.append("retention_days must not be negative")
        if not self.anchors:
            problems.append("at least one calendar anchor is required")

        try:
            get_timezone(self.timezone)
        except ValueError as e:
            problems.append(str(e))

        if not self.villages:
            problems.append("at least one village is required")
        for village in self.villages:
            if not village.channel_id:
                problems.append(f"no channel id configured for {village.name}")
            if not village.region:
                problems.append(f"no region configured for {village.name}")

        if problems:
            raise ConfigurationError("Invalid world events configuration: " + "; ".join(problems))


# =============================================================================
# Environment loading
# =============================================================================

VILLAGE_ENV_VARS = {
    "Rudania": "RUDANIA_TOWNHALL",
    "Inariko": "INARIKO_TOWNHALL",
    "Vhintl": "VHINTL_TOWNHALL",
}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def load_config(env_file: Optional[str] = None) -> EngineConfig:
    """
    Build an EngineConfig from the defaults and the environment.

    Args:
        env_file: Optional .env path (defaults to python-dotenv's lookup)

    Returns:
        EngineConfig (not yet validated)

    Raises:
        ConfigurationError: If a numeric variable cannot be parsed
    """
    load_dotenv(env_file)

    config = EngineConfig()
    config.message_threshold = _env_int("RAID_MESSAGE_THRESHOLD", config.message_threshold)
    config.min_unique_users = _env_int("RAID_MIN_ACTIVE_USERS", config.min_unique_users)
    config.window_minutes = _env_int("RAID_WINDOW_MINUTES", config.window_minutes)
    config.cooldown_hours = _env_float("RAID_COOLDOWN_HOURS", config.cooldown_hours)
    config.tick_seconds = _env_int("EVENT_TICK_SECONDS", config.tick_seconds)
    config.activation_hour = _env_int("BLOOD_MOON_HOUR", config.activation_hour)
    config.timezone = os.getenv("EVENT_TIMEZONE") or config.timezone
    config.db_path = os.getenv("WORLD_EVENTS_DB") or config.db_path

    excluded = os.getenv("EXCLUDED_CHANNELS")
    if excluded is not None:
        config.excluded_channels = parse_id_list(excluded)
    restricted = os.getenv("RESTRICTED_ROLE_IDS")
    if restricted is not None:
        config.restricted_role_ids = parse_id_list(restricted)

    for village in config.villages:
        env_var = VILLAGE_ENV_VARS.get(village.name)
        if env_var:
            village.channel_id = os.getenv(env_var) or None

    return config
