"""ContainmentGuard - synchronous vetoes on interactions while holding the resource."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tick_relic.types import Decision

if TYPE_CHECKING:
    from tick_relic.config import RelicConfig
    from tick_relic.identity import ResourceIdentity
    from tick_relic.world import Block, Fixture, Participant

logger = logging.getLogger(__name__)


class ContainmentGuard:
    """Two stateless veto points. Never mutates containers; fails open."""

    def __init__(self, identity: ResourceIdentity, config: RelicConfig) -> None:
        self._identity = identity
        self._config = config

    def holding(self, actor: Participant) -> bool:
        """True if the resource is in either hand."""
        return self._identity(actor.main_hand()) or self._identity(actor.off_hand())

    def on_use_entity(self, actor: Participant, target: Fixture) -> Decision:
        """Veto depositing the resource into a display frame."""
        try:
            if target.display and self.holding(actor):
                return Decision.DENY
        except Exception:
            logger.warning("entity-use guard failed for %s, allowing", actor.id, exc_info=True)
        return Decision.PASS

    def on_use_block(self, actor: Participant, target: Block) -> Decision:
        """Veto opening storage blocks. Transformation stations stay usable."""
        try:
            if self._config.allow_in_containers or target.station:
                return Decision.PASS
            if target.storage and self.holding(actor):
                return Decision.DENY
        except Exception:
            logger.warning("block-use guard failed for %s, allowing", actor.id, exc_info=True)
        return Decision.PASS
