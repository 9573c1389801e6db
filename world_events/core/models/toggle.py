"""
Channel rename batch result.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from .enums import RenameOutcome


@dataclass
class ToggleResult:
    """
    Composite result of a rename batch.

    Each channel is tracked independently; a failure on one entry says
    nothing about the others.
    """

    outcomes: Dict[str, RenameOutcome] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    def record(self, channel_id: str, outcome: RenameOutcome, error: Optional[str] = None):
        self.outcomes[channel_id] = outcome
        if error:
            self.errors[channel_id] = error

    @property
    def succeeded(self) -> Set[str]:
        """Channel ids now showing their target name."""
        return {cid for cid, outcome in self.outcomes.items() if outcome.is_success}

    @property
    def renamed(self) -> Set[str]:
        return {cid for cid, outcome in self.outcomes.items() if outcome == RenameOutcome.RENAMED}

    @property
    def failed(self) -> Set[str]:
        return {cid for cid, outcome in self.outcomes.items() if not outcome.is_success}

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    def __len__(self) -> int:
        return len(self.outcomes)
