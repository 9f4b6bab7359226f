"""Recipe dataclass and refund of consumed inputs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tick_relic.inventory import ContainerHelper
from tick_relic.types import ItemStack

if TYPE_CHECKING:
    from tick_relic.world import Participant, World


@dataclass(frozen=True)
class Recipe:
    """Immutable crafting recipe definition.

    Attributes:
        name: Recipe identifier.
        inputs: Materials consumed per craft (item -> quantity).
    """

    name: str
    inputs: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Recipe name must be non-empty")
        for item, amount in self.inputs.items():
            if amount <= 0:
                raise ValueError(f"input {item!r} must be > 0, got {amount}")


def refund(world: World, participant: Participant, recipe: Recipe, times: int = 1) -> int:
    """Give back the inputs of *times* crafts. Returns how many stacks were dropped."""
    if times < 0:
        raise ValueError(f"times must be >= 0, got {times}")
    dropped = 0
    for item, amount in recipe.inputs.items():
        total = amount * times
        if total == 0:
            continue
        if not ContainerHelper.give_or_drop(world, participant, ItemStack(item, total)):
            dropped += 1
    return dropped
