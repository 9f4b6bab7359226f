"""Shared types for tick-relic."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

ParticipantId = str


@dataclass
class ItemStack:
    """A quantity of one item type. A stack with count <= 0 is empty."""

    item: str
    count: int = 1

    def empty(self) -> bool:
        return self.count <= 0

    def copy(self) -> ItemStack:
        return ItemStack(self.item, self.count)


class ContainerKind(enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    OUTPUT = "output"
    OTHER = "other"


class Decision(enum.Enum):
    """Result of an interaction veto point."""

    PASS = "pass"
    DENY = "deny"


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int


@dataclass(frozen=True)
class SessionResult:
    """Outcome of scanning one participant's open session.

    ``changed`` counts slots that were cleared. A failed scan carries the
    exception and leaves other sessions untouched.
    """

    participant: ParticipantId
    ok: bool = True
    changed: int = 0
    error: Exception | None = None


class RelicError(Exception):
    """Base class for errors raised by tick-relic."""


class PermissionDenied(RelicError):
    """Raised when a command source lacks the required permission level."""


class UnknownCommand(RelicError):
    """Raised when a command line names no registered command."""


if TYPE_CHECKING:
    from tick_relic.world import World

System = Callable[["World", TickContext], None]
