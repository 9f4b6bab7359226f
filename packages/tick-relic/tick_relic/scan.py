"""Deterministic scans over participant storage."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from tick_relic.types import ContainerKind, ItemStack, SessionResult

if TYPE_CHECKING:
    from tick_relic.cache import OfflineHolderCache
    from tick_relic.identity import ResourceIdentity
    from tick_relic.world import Container, Participant, World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sighting:
    """One resource stack observed during a storage scan."""

    participant: Participant
    container: Container
    index: int
    stack: ItemStack

    @property
    def kind(self) -> ContainerKind:
        return self.container.kind


def storage_of(participant: Participant) -> tuple[Container, Container]:
    return participant.primary, participant.secondary


def iter_sightings(world: World, identity: ResourceIdentity) -> Iterator[Sighting]:
    """Yield resource stacks in scan order: join order, primary then secondary,
    slot index order."""
    for participant in world.online():
        yield from iter_participant(participant, identity)


def iter_participant(participant: Participant, identity: ResourceIdentity) -> Iterator[Sighting]:
    for container in storage_of(participant):
        for index, stack in enumerate(container.slots):
            if identity(stack):
                assert stack is not None
                yield Sighting(participant, container, index, stack)


def holds_anywhere(participant: Participant, identity: ResourceIdentity) -> bool:
    return next(iter_participant(participant, identity), None) is not None


def first_sighting(world: World, identity: ResourceIdentity) -> Sighting | None:
    return next(iter_sightings(world, identity), None)


def in_transit(world: World, identity: ResourceIdentity) -> bool:
    return any(identity(d.stack) for d in world.drops())


def scan_sessions(
    participants: Iterable[Participant],
    fn: Callable[[Participant], int],
    label: str,
) -> list[SessionResult]:
    """Apply *fn* to each participant in isolation.

    A failure is recorded and logged; it never stops the remaining
    participants from being scanned.
    """
    results: list[SessionResult] = []
    for participant in participants:
        try:
            changed = fn(participant)
        except Exception as exc:
            logger.warning("%s: scan of %s failed", label, participant.id, exc_info=True)
            results.append(SessionResult(participant.id, ok=False, error=exc))
        else:
            results.append(SessionResult(participant.id, changed=changed))
    return results


def locked(world: World, identity: ResourceIdentity, cache: OfflineHolderCache) -> bool:
    """True if taking another instance out of a crafting output would be a violation."""
    return first_sighting(world, identity) is not None or cache.any_flagged()
