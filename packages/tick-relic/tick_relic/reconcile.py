"""Reconciliation - the periodic authoritative pass and manual repair.

The pass scans every connected participant's primary then secondary storage
in join order. The first resource unit seen is kept; every later unit is a
duplicate, deleted and refunded to whoever held it. Instances carry no
identity, so the survivor is decided purely by scan position.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tick_relic.notices import SOUND_DUPLICATE, SOUND_LOST
from tick_relic.recipe import refund
from tick_relic.scan import Sighting, in_transit, iter_sightings
from tick_relic.types import ItemStack, ParticipantId

if TYPE_CHECKING:
    from tick_relic.cache import OfflineHolderCache
    from tick_relic.config import RelicConfig
    from tick_relic.identity import ResourceIdentity
    from tick_relic.notices import NoticeBus
    from tick_relic.state import GlobalState
    from tick_relic.types import TickContext
    from tick_relic.world import World

logger = logging.getLogger(__name__)


@dataclass
class PassReport:
    """What one duplicate-resolution sweep saw and did."""

    kept: Sighting | None = None
    removed: int = 0
    refunded: list[ParticipantId] = field(default_factory=list)

    @property
    def owner(self) -> ParticipantId | None:
        return self.kept.participant.id if self.kept is not None else None


@dataclass(frozen=True)
class RepairReport:
    removed: int
    owner: ParticipantId | None
    unlocked: bool


class Reconciler:
    """Owns every mutation path of GlobalState driven by storage scans."""

    def __init__(
        self,
        identity: ResourceIdentity,
        cache: OfflineHolderCache,
        state: GlobalState,
        config: RelicConfig,
        bus: NoticeBus,
    ) -> None:
        self._identity = identity
        self._cache = cache
        self._state = state
        self._config = config
        self._bus = bus

    def resolve_duplicates(self, world: World) -> PassReport:
        """Keep the first unit in scan order, delete and refund the rest."""
        report = PassReport()
        for sighting in list(iter_sightings(world, self._identity)):
            if report.kept is None:
                report.kept = sighting
                surplus = sighting.stack.count - 1
                if surplus > 0:
                    sighting.container.set(sighting.index, ItemStack(sighting.stack.item, 1))
                    self._refund(world, sighting, surplus, report)
                continue
            units = sighting.stack.count
            sighting.container.set(sighting.index, None)
            self._refund(world, sighting, units, report)

        if report.removed:
            logger.info(
                "removed %d duplicate(s), kept instance held by %s",
                report.removed, report.owner,
            )
            self._bus.broadcast(self._config.message("duplicates", count=report.removed))
            self._bus.world_sound(SOUND_DUPLICATE)
        return report

    def _refund(self, world: World, sighting: Sighting, units: int, report: PassReport) -> None:
        report.removed += units
        report.refunded.append(sighting.participant.id)
        dropped = refund(world, sighting.participant, self._config.recipe, units)
        if dropped:
            logger.debug("refund to %s overflowed, dropped %d stack(s)", sighting.participant.id, dropped)

    def reconcile(self, world: World) -> PassReport:
        """Full pass: resolve duplicates, then re-derive global state."""
        report = self.resolve_duplicates(world)
        if report.kept is not None:
            if self._state.mark(report.owner):
                logger.info("%s now exists, held by %s", self._config.item, report.owner)
                if self._config.announce:
                    self._bus.broadcast(self._config.message("crafted"))
            return report

        flagged = self._offline_owner()
        if flagged is not None or in_transit(world, self._identity):
            self._state.mark(flagged if flagged is not None else self._state.owner)
        elif self._state.exists:
            self.reset(announce=self._config.announce)
        return report

    def _offline_owner(self) -> ParticipantId | None:
        """Current owner if still flagged offline, else the first flagged id."""
        owner = self._state.owner
        if owner is not None and self._cache.get(owner):
            return owner
        return self._cache.first_flagged()

    def reset(self, announce: bool) -> None:
        """Forget the instance, clear the offline cache, re-enable crafting."""
        self._state.reset()
        self._cache.clear()
        logger.info("%s lost, crafting re-enabled", self._config.item)
        if announce:
            self._bus.broadcast(self._config.message("lost"))
            self._bus.world_sound(SOUND_LOST, volume=20.0)

    def refresh(self, world: World) -> None:
        """Re-derive global state without deleting anything.

        Used by connection handlers: the first connected holder wins, then any
        flagged offline holder. An instance in the in-transit pool keeps the
        current state. Otherwise the state resets silently.
        """
        for sighting in iter_sightings(world, self._identity):
            self._state.mark(sighting.participant.id)
            return
        flagged = self._offline_owner()
        if flagged is not None or in_transit(world, self._identity):
            self._state.mark(flagged if flagged is not None else self._state.owner)
            return
        if self._state.exists:
            self.reset(announce=False)

    def repair(self, world: World) -> RepairReport:
        """Operator-invoked sweep of what is currently observable.

        Ignores the cadence and the offline cache. With nothing found it
        unlocks crafting outright.
        """
        report = self.resolve_duplicates(world)
        if report.kept is None:
            self.reset(announce=False)
            return RepairReport(removed=0, owner=None, unlocked=True)
        self._state.mark(report.owner)
        return RepairReport(removed=report.removed, owner=report.owner, unlocked=False)


class ReconcileSystem:
    """Runs the full pass once every ``interval`` invocations."""

    def __init__(self, reconciler: Reconciler, interval: int) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self._reconciler = reconciler
        self._interval = interval
        self._counter = 0
        self.last_report: PassReport | None = None

    @property
    def interval(self) -> int:
        return self._interval

    def __call__(self, world: World, ctx: TickContext) -> None:
        self._counter += 1
        if self._counter % self._interval != 0:
            return
        self.last_report = self._reconciler.reconcile(world)


def make_reconcile_system(reconciler: Reconciler, interval: int) -> ReconcileSystem:
    """Return a system that reconciles every *interval* ticks."""
    return ReconcileSystem(reconciler, interval)
