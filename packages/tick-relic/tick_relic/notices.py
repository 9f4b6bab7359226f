"""In-memory notice bus between the core and the presentation layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from tick_relic.types import TickContext
    from tick_relic.world import World

MESSAGE = "message"
SOUND = "sound"
BROADCAST = "broadcast"
WORLD_SOUND = "world_sound"

SOUND_BLOCKED = "block.anvil.land"
SOUND_RETURNED = "block.note_block.harp"
SOUND_DUPLICATE = "entity.item.break"
SOUND_LOST = "entity.lightning_bolt.thunder"

_Handler = Callable[[str, dict[str, Any]], None]


@dataclass(frozen=True)
class Notice:
    kind: str
    data: dict[str, Any] = field(default_factory=dict)


class NoticeBus:
    """Queues notices during a tick and delivers them on ``flush``."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[_Handler]] = {}
        self._queue: list[Notice] = []

    def subscribe(self, kind: str, handler: _Handler) -> None:
        self._subscribers.setdefault(kind, []).append(handler)

    def unsubscribe(self, kind: str, handler: _Handler) -> None:
        handlers = self._subscribers.get(kind)
        if handlers is None:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def publish(self, kind: str, **data: Any) -> Notice:
        notice = Notice(kind, data)
        self._queue.append(notice)
        return notice

    # Convenience publishers

    def message(self, target: str, text: str, action_bar: bool = False) -> Notice:
        return self.publish(MESSAGE, target=target, text=text, action_bar=action_bar)

    def sound(self, target: str, sound: str, volume: float = 1.0, pitch: float = 1.0) -> Notice:
        return self.publish(SOUND, target=target, sound=sound, volume=volume, pitch=pitch)

    def broadcast(self, text: str) -> Notice:
        return self.publish(BROADCAST, text=text)

    def world_sound(self, sound: str, volume: float = 1.0, pitch: float = 1.0) -> Notice:
        return self.publish(WORLD_SOUND, sound=sound, volume=volume, pitch=pitch)

    def pending(self) -> list[Notice]:
        return list(self._queue)

    def flush(self) -> None:
        snapshot = self._queue
        self._queue = []
        for notice in snapshot:
            for handler in self._subscribers.get(notice.kind, []):
                handler(notice.kind, notice.data)

    def clear(self) -> None:
        self._queue.clear()


def make_notice_system(bus: NoticeBus) -> Callable[[World, TickContext], None]:
    def notice_system(world: World, ctx: TickContext) -> None:
        bus.flush()

    return notice_system
