"""Host events consumed by the warden, and the outcome of handling them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tick_relic.types import Decision

if TYPE_CHECKING:
    from tick_relic.notices import Notice
    from tick_relic.world import Block, Fixture, Participant


@dataclass(frozen=True)
class ServerStarting:
    pass


@dataclass(frozen=True)
class ServerStopping:
    pass


@dataclass(frozen=True)
class PlayerJoined:
    participant: Participant


@dataclass(frozen=True)
class PlayerLeft:
    """Delivered after the participant left the roster; their containers are
    still readable through ``participant``."""

    participant: Participant


@dataclass(frozen=True)
class UseEntity:
    actor: Participant
    target: Fixture


@dataclass(frozen=True)
class UseBlock:
    actor: Participant
    target: Block


@dataclass
class Outcome:
    """Decision for the host plus the notices queued while handling."""

    decision: Decision = Decision.PASS
    notices: list[Notice] = field(default_factory=list)

    @property
    def denied(self) -> bool:
        return self.decision is Decision.DENY
