"""
Encounter models for the activity-triggered raid.

This module defines the monster and raid shapes exchanged with the monster
catalog and raid dispatcher, and the result of one trigger evaluation.
"""

from dataclasses import dataclass
from typing import Optional

from .enums import TriggerStatus


@dataclass(frozen=True)
class MonsterDescriptor:
    """
    A monster returned by the monster catalog.

    Attributes:
        name: Monster name
        tier: Monster tier (raids use tier 5 and above)
        species: Optional species (e.g. "Yiga")
    """
    name: str
    tier: int
    species: Optional[str] = None


@dataclass(frozen=True)
class EncounterTarget:
    """Where an automated raid is created."""
    village: str
    channel_id: str
    region: str


@dataclass(frozen=True)
class RaidOutcome:
    """Result reported by the raid dispatcher."""
    success: bool
    error: Optional[str] = None
    raid_id: Optional[str] = None


@dataclass
class TriggerResult:
    """
    Result of one encounter trigger evaluation.

    Attributes:
        status: What happened
        total_messages: Server-wide messages inside the window
        total_unique_users: Distinct users across all tracked channels
        cooldown_remaining: Seconds left on the cooldown (SKIPPED_COOLDOWN only)
        target: Selected village/channel (once fired)
        monster: Selected monster (once found)
        outcome: Raid dispatcher outcome (once dispatched)
        error: Failure description
    """

    status: TriggerStatus
    total_messages: int = 0
    total_unique_users: int = 0
    cooldown_remaining: float = 0
    target: Optional[EncounterTarget] = None
    monster: Optional[MonsterDescriptor] = None
    outcome: Optional[RaidOutcome] = None
    error: Optional[str] = None

    @property
    def fired(self) -> bool:
        return self.status == TriggerStatus.FIRED

    @property
    def consumed_cooldown(self) -> bool:
        return self.status.consumed_cooldown
