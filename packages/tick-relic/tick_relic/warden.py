"""Warden - owns the enforcement state and routes host events to it."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from tick_relic.cache import CACHE_FILE_NAME, OfflineHolderCache
from tick_relic.config import RelicConfig
from tick_relic.events import (
    Outcome,
    PlayerJoined,
    PlayerLeft,
    ServerStarting,
    ServerStopping,
    UseBlock,
    UseEntity,
)
from tick_relic.gate import make_output_gate_system
from tick_relic.guards import ContainmentGuard
from tick_relic.identity import ResourceIdentity
from tick_relic.notices import NoticeBus, make_notice_system
from tick_relic.reconcile import Reconciler, make_reconcile_system
from tick_relic.sanitizer import make_sanitizer_system
from tick_relic.scan import holds_anywhere
from tick_relic.state import GlobalState
from tick_relic.types import Decision, ParticipantId, System

if TYPE_CHECKING:
    from tick_relic.server import Server
    from tick_relic.types import TickContext
    from tick_relic.world import Participant, World

logger = logging.getLogger(__name__)

Handler = Callable[[Any, "World"], Decision]


class Warden:
    """Single owner of GlobalState and the offline cache.

    Host events go through ``dispatch``, an explicit table keyed by event
    type. Tick work goes through ``tick``: output gate, then sanitizer, then
    the reconciliation cadence.
    """

    def __init__(
        self,
        config: RelicConfig | None = None,
        data_dir: str | Path | None = None,
        bus: NoticeBus | None = None,
        cache: OfflineHolderCache | None = None,
    ) -> None:
        self.config: RelicConfig = config if config is not None else RelicConfig()
        self.data_dir = Path(data_dir) if data_dir is not None else None
        self.bus = bus if bus is not None else NoticeBus()
        self.cache = cache if cache is not None else OfflineHolderCache()
        self.state = GlobalState()
        self.identity = ResourceIdentity(self.config.item)

        self.guard = ContainmentGuard(self.identity, self.config)
        self.reconciler = Reconciler(self.identity, self.cache, self.state, self.config, self.bus)
        self.gate = make_output_gate_system(self.identity, self.cache, self.config, self.bus)
        self.sanitizer = make_sanitizer_system(self.identity, self.config, self.bus)
        self.reconcile_system = make_reconcile_system(self.reconciler, self.config.scan_interval)
        self._tick_systems: list[tuple[str, System]] = [
            ("output gate", self.gate),
            ("sanitizer", self.sanitizer),
            ("reconcile", self.reconcile_system),
        ]

        self._loaded = False
        self._persisted = False
        self._handlers: dict[type, Handler] = {
            ServerStarting: self._on_starting,
            ServerStopping: self._on_stopping,
            PlayerJoined: self._on_joined,
            PlayerLeft: self._on_left,
            UseEntity: self._on_use_entity,
            UseBlock: self._on_use_block,
        }

    @property
    def cache_path(self) -> Path | None:
        if self.data_dir is None:
            return None
        return self.data_dir / CACHE_FILE_NAME

    # --- Dispatch ---

    def handle(self, event_type: type, handler: Handler) -> None:
        """Register or replace the handler for an event type."""
        self._handlers[event_type] = handler

    def dispatch(self, event: Any, world: World) -> Outcome:
        """Route one host event. Raises TypeError for unknown event types."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"No handler registered for {type(event).__qualname__}")
        before = len(self.bus.pending())
        decision = handler(event, world)
        return Outcome(decision=decision, notices=self.bus.pending()[before:])

    # --- Host convenience ---

    def connect(self, world: World, participant: Participant) -> Outcome:
        world.join(participant)
        return self.dispatch(PlayerJoined(participant), world)

    def disconnect(self, world: World, pid: ParticipantId) -> Outcome:
        participant = world.leave(pid)
        return self.dispatch(PlayerLeft(participant), world)

    def install(self, server: Server) -> None:
        """Hook lifecycle events and the tick systems into *server*."""
        server.on_start(lambda world, ctx: self.dispatch(ServerStarting(), world))
        server.on_stop(lambda world, ctx: self.dispatch(ServerStopping(), world))
        server.add_system(self.tick)
        server.add_system(make_notice_system(self.bus))

    def tick(self, world: World, ctx: TickContext) -> None:
        """Run gate, sanitizer and reconcile in order.

        A system that fails is logged and skipped for this tick; the systems
        after it still run.
        """
        if not world.online():
            return
        for name, system in self._tick_systems:
            try:
                system(world, ctx)
            except Exception:
                logger.warning("%s failed on tick %d, skipped", name, ctx.tick_number, exc_info=True)

    # --- Handlers ---

    def _on_starting(self, event: ServerStarting, world: World) -> Decision:
        path = self.cache_path
        if path is None or self._loaded:
            return Decision.PASS
        self._loaded = True
        self.cache.load(path)
        self.reconciler.refresh(world)
        return Decision.PASS

    def _on_stopping(self, event: ServerStopping, world: World) -> Decision:
        path = self.cache_path
        if path is None or self._persisted:
            return Decision.PASS
        self._persisted = True
        for participant in world.online():
            self.cache.on_disconnect(participant.id, holds_anywhere(participant, self.identity))
        self.cache.persist(path)
        return Decision.PASS

    def _on_joined(self, event: PlayerJoined, world: World) -> Decision:
        self.cache.on_reconnect(event.participant.id)
        self.reconciler.refresh(world)
        return Decision.PASS

    def _on_left(self, event: PlayerLeft, world: World) -> Decision:
        holding = holds_anywhere(event.participant, self.identity)
        self.cache.on_disconnect(event.participant.id, holding)
        if holding:
            logger.info("%s left holding the %s", event.participant.id, self.config.item)
        self.reconciler.refresh(world)
        return Decision.PASS

    def _on_use_entity(self, event: UseEntity, world: World) -> Decision:
        return self.guard.on_use_entity(event.actor, event.target)

    def _on_use_block(self, event: UseBlock, world: World) -> Decision:
        return self.guard.on_use_block(event.actor, event.target)
