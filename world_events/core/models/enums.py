"""
Core enums for the world events engine.

This module defines the enumerations shared by the calendar detector,
the encounter trigger and the channel toggle.
"""

from enum import Enum


class AnnouncementType(str, Enum):
    """Which edge of a calendar event an announcement belongs to."""
    START = "start"
    END = "end"


class RecordResult(str, Enum):
    """Outcome of claiming an announcement slot."""
    RECORDED = "recorded"
    ALREADY_EXISTS = "already_exists"


class RenameOutcome(str, Enum):
    """Per-channel outcome of a rename batch."""
    RENAMED = "renamed"
    UNCHANGED = "unchanged"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"

    @property
    def is_success(self) -> bool:
        """A channel is in its target state after RENAMED or UNCHANGED."""
        return self in (RenameOutcome.RENAMED, RenameOutcome.UNCHANGED)


class TriggerStatus(str, Enum):
    """Result of one encounter trigger evaluation."""
    SKIPPED_COOLDOWN = "skipped: cooldown"
    SKIPPED_BELOW_THRESHOLD = "skipped: below threshold"
    FAILED_NO_MONSTER = "failed: no monster"
    FAILED_DISPATCH = "failed: dispatch"
    FIRED = "fired"

    @property
    def consumed_cooldown(self) -> bool:
        """Whether this evaluation started a new cooldown period."""
        return self in (
            TriggerStatus.FIRED,
            TriggerStatus.FAILED_NO_MONSTER,
            TriggerStatus.FAILED_DISPATCH,
        )
