"""Container helper functions."""
from __future__ import annotations

from typing import TYPE_CHECKING

from tick_relic.types import ItemStack

if TYPE_CHECKING:
    from tick_relic.world import Container, Participant, World


class ContainerHelper:
    """Pure functions for container manipulation."""

    @staticmethod
    def insert(container: Container, stack: ItemStack, limit: int | None = None) -> bool:
        """Insert a whole stack, merging first. Returns False (and changes
        nothing) if it does not fit.

        *limit* caps the per-slot count below the container's ``max_stack``.
        """
        if stack.empty():
            return True
        cap = _cap(container, limit)
        if ContainerHelper.room_for(container, stack.item, limit) < stack.count:
            return False

        remaining = stack.count
        for i, current in enumerate(container.slots):
            if remaining == 0:
                break
            if current is None or current.item != stack.item:
                continue
            moved = min(remaining, cap - current.count)
            if moved > 0:
                container.set(i, ItemStack(current.item, current.count + moved))
                remaining -= moved
        for i, current in enumerate(container.slots):
            if remaining == 0:
                break
            if current is None:
                moved = min(remaining, cap)
                container.set(i, ItemStack(stack.item, moved))
                remaining -= moved
        return True

    @staticmethod
    def room_for(container: Container, item: str, limit: int | None = None) -> int:
        """How many units of *item* the container can still accept."""
        cap = _cap(container, limit)
        room = 0
        for current in container.slots:
            if current is None:
                room += cap
            elif current.item == item:
                room += max(0, cap - current.count)
        return room

    @staticmethod
    def take(container: Container, index: int) -> ItemStack | None:
        """Empty a slot and return what it held."""
        current = container.get(index)
        if current is None:
            return None
        container.set(index, None)
        return current

    @staticmethod
    def count(container: Container, item: str) -> int:
        """Total quantity of *item* across all slots."""
        return sum(s.count for s in container.slots if s is not None and s.item == item)

    @staticmethod
    def give_or_drop(
        world: World, participant: Participant, stack: ItemStack, limit: int | None = None
    ) -> bool:
        """Insert into primary storage, dropping at the participant on overflow.

        Returns True if the stack landed in primary storage.
        """
        if ContainerHelper.insert(participant.primary, stack, limit):
            return True
        world.drop(stack, participant.position)
        return False


def _cap(container: Container, limit: int | None) -> int:
    if limit is None:
        return container.max_stack
    if limit <= 0:
        raise ValueError(f"limit must be > 0, got {limit}")
    return min(limit, container.max_stack)
