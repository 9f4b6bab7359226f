"""GlobalState - derived view of whether the resource currently exists."""
from __future__ import annotations

from dataclasses import dataclass

from tick_relic.types import ParticipantId


@dataclass
class GlobalState:
    """Process-wide cached view, never the source of truth.

    ``exists == False`` always implies ``owner is None``. Mutated only by
    reconciliation, manual repair, and connection handlers.
    """

    exists: bool = False
    owner: ParticipantId | None = None

    def mark(self, owner: ParticipantId | None) -> bool:
        """Record an existing instance. Returns True if it did not exist before."""
        was = self.exists
        self.exists = True
        self.owner = owner
        return not was

    def reset(self) -> bool:
        """Forget the instance. Returns True if it existed before."""
        was = self.exists
        self.exists = False
        self.owner = None
        return was
