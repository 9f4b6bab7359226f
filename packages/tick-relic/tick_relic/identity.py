"""Recognition of the designated resource."""
from __future__ import annotations

from dataclasses import dataclass

from tick_relic.types import ItemStack


@dataclass(frozen=True)
class ResourceIdentity:
    """Decides whether a stack denotes the scarce resource.

    Instances carry no identity of their own, so recognition is structural:
    matching item type and a positive count.
    """

    item: str

    def __call__(self, stack: ItemStack | None) -> bool:
        return stack is not None and stack.item == self.item and stack.count > 0

    def is_resource(self, stack: ItemStack | None) -> bool:
        return self(stack)
