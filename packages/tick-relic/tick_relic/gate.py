"""CraftOutputGate - clears crafting outputs holding the resource while locked."""
from __future__ import annotations

from typing import TYPE_CHECKING

from tick_relic.notices import SOUND_BLOCKED
from tick_relic.scan import locked, scan_sessions
from tick_relic.types import ContainerKind, SessionResult

if TYPE_CHECKING:
    from tick_relic.cache import OfflineHolderCache
    from tick_relic.config import RelicConfig
    from tick_relic.identity import ResourceIdentity
    from tick_relic.notices import NoticeBus
    from tick_relic.types import TickContext
    from tick_relic.world import Participant, World


class OutputGateSystem:
    """Runs first each tick, before sanitizing or reconciling.

    Every open session is gated on its own; clearing one participant's
    output never affects another's.
    """

    def __init__(
        self,
        identity: ResourceIdentity,
        cache: OfflineHolderCache,
        config: RelicConfig,
        bus: NoticeBus,
    ) -> None:
        self._identity = identity
        self._cache = cache
        self._config = config
        self._bus = bus
        self.last_results: list[SessionResult] = []

    def __call__(self, world: World, ctx: TickContext) -> None:
        if not locked(world, self._identity, self._cache):
            self.last_results = []
            return
        self.last_results = scan_sessions(world.online(), self._gate, "output gate")

    def _gate(self, participant: Participant) -> int:
        cleared = 0
        for slot in participant.session.slots:
            if slot.container.kind is not ContainerKind.OUTPUT:
                continue
            if not self._identity(slot.get()):
                continue
            slot.set(None)
            cleared += 1
            self._bus.sound(participant.id, SOUND_BLOCKED)
            self._bus.message(participant.id, self._config.message("blocked"), action_bar=True)
        return cleared


def make_output_gate_system(
    identity: ResourceIdentity,
    cache: OfflineHolderCache,
    config: RelicConfig,
    bus: NoticeBus,
) -> OutputGateSystem:
    """Return the per-tick crafting output gate."""
    return OutputGateSystem(identity, cache, config, bus)
