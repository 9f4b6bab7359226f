"""ContainerSanitizer - pulls the resource out of foreign containers."""
from __future__ import annotations

from typing import TYPE_CHECKING

from tick_relic.inventory import ContainerHelper
from tick_relic.notices import SOUND_RETURNED
from tick_relic.scan import scan_sessions
from tick_relic.types import ContainerKind, SessionResult

if TYPE_CHECKING:
    from tick_relic.config import RelicConfig
    from tick_relic.identity import ResourceIdentity
    from tick_relic.notices import NoticeBus
    from tick_relic.types import TickContext
    from tick_relic.world import Participant, Slot, World


class SanitizerSystem:
    """Moves resource stacks from foreign slots back to primary storage.

    Slots backed by the participant's primary storage, secondary storage, or a
    crafting output are never touched. Participants on their own screen or at
    a transformation station are skipped.
    """

    def __init__(self, identity: ResourceIdentity, config: RelicConfig, bus: NoticeBus) -> None:
        self._identity = identity
        self._config = config
        self._bus = bus
        self.last_results: list[SessionResult] = []

    def __call__(self, world: World, ctx: TickContext) -> None:
        if self._config.allow_in_containers:
            self.last_results = []
            return
        self.last_results = scan_sessions(
            world.online(), lambda p: self._sanitize(world, p), "sanitizer"
        )

    def foreign(self, participant: Participant, slot: Slot) -> bool:
        container = slot.container
        if container is participant.primary or container is participant.secondary:
            return False
        return container.kind is not ContainerKind.OUTPUT

    def _sanitize(self, world: World, participant: Participant) -> int:
        if participant.on_own_screen() or participant.session.station:
            return 0
        moved = 0
        for slot in participant.session.slots:
            if not self.foreign(participant, slot):
                continue
            stack = slot.get()
            if not self._identity(stack):
                continue
            assert stack is not None
            carried = stack.copy()
            slot.set(None)
            ContainerHelper.give_or_drop(world, participant, carried, limit=1)
            moved += 1
            self._bus.sound(participant.id, SOUND_RETURNED)
            self._bus.message(participant.id, self._config.message("returned"), action_bar=True)
        return moved


def make_sanitizer_system(
    identity: ResourceIdentity, config: RelicConfig, bus: NoticeBus
) -> SanitizerSystem:
    """Return the per-tick container sanitizer."""
    return SanitizerSystem(identity, config, bus)
