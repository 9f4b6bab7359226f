"""World - connected participants, their containers, and the in-transit pool."""
from __future__ import annotations

from dataclasses import dataclass, field

from tick_relic.types import ContainerKind, ItemStack, ParticipantId

PRIMARY_SIZE = 37  # 36 carried slots + off hand
SECONDARY_SIZE = 27

Position = tuple[float, float, float]


@dataclass
class Container:
    """Fixed-size slot storage.

    Attributes:
        kind: Role of the container relative to its participant or session.
        slots: Slot contents; ``None`` is an empty slot.
        max_stack: Maximum count per slot when merging stacks.
        dirty: Set whenever a slot is rewritten; cleared by the host on sync.
    """

    kind: ContainerKind
    slots: list[ItemStack | None] = field(default_factory=list)
    max_stack: int = 64
    dirty: bool = False

    @classmethod
    def sized(cls, kind: ContainerKind, size: int, max_stack: int = 64) -> Container:
        return cls(kind=kind, slots=[None] * size, max_stack=max_stack)

    def get(self, index: int) -> ItemStack | None:
        return self.slots[index]

    def set(self, index: int, stack: ItemStack | None) -> None:
        if stack is not None and stack.empty():
            stack = None
        self.slots[index] = stack
        self.dirty = True

    def __len__(self) -> int:
        return len(self.slots)


@dataclass
class Slot:
    """One entry of an open session, backed by a container slot."""

    container: Container
    index: int

    def get(self) -> ItemStack | None:
        return self.container.get(self.index)

    def set(self, stack: ItemStack | None) -> None:
        self.container.set(self.index, stack)


@dataclass
class Session:
    """An open interaction screen.

    ``station`` marks a transformation station (anvil-like); such sessions
    are exempt from containment.
    """

    name: str
    slots: list[Slot] = field(default_factory=list)
    station: bool = False


@dataclass
class Participant:
    id: ParticipantId
    name: str
    primary: Container
    secondary: Container
    screen: Session
    session: Session
    selected: int = 0
    position: Position = (0.0, 0.0, 0.0)

    def main_hand(self) -> ItemStack | None:
        return self.primary.get(self.selected)

    def off_hand(self) -> ItemStack | None:
        return self.primary.get(len(self.primary) - 1)

    def on_own_screen(self) -> bool:
        return self.session is self.screen

    def open(self, session: Session) -> None:
        self.session = session

    def close(self) -> None:
        self.session = self.screen


def new_participant(
    pid: ParticipantId,
    name: str | None = None,
    primary_size: int = PRIMARY_SIZE,
    secondary_size: int = SECONDARY_SIZE,
) -> Participant:
    """Build a participant with empty storage and their own screen.

    The own screen exposes every primary slot plus a one-slot personal
    crafting output.
    """
    primary = Container.sized(ContainerKind.PRIMARY, primary_size)
    secondary = Container.sized(ContainerKind.SECONDARY, secondary_size)
    output = Container.sized(ContainerKind.OUTPUT, 1)
    slots = [Slot(output, 0)] + [Slot(primary, i) for i in range(primary_size)]
    screen = Session(name="inventory", slots=slots)
    return Participant(
        id=pid,
        name=name if name is not None else pid,
        primary=primary,
        secondary=secondary,
        screen=screen,
        session=screen,
    )


def container_session(
    participant: Participant,
    container: Container,
    name: str = "container",
    station: bool = False,
) -> Session:
    """Session showing *container* above the participant's primary storage."""
    slots = [Slot(container, i) for i in range(len(container))]
    slots.extend(Slot(participant.primary, i) for i in range(len(participant.primary)))
    return Session(name=name, slots=slots, station=station)


@dataclass
class Drop:
    """A stack lying in the shared world."""

    stack: ItemStack
    position: Position = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Fixture:
    """Target of an entity-use interaction. ``display`` marks frame-like entities."""

    kind: str
    display: bool = False


@dataclass(frozen=True)
class Block:
    """Target of a block-use interaction."""

    kind: str
    storage: bool = False
    station: bool = False


class World:
    """Connected participants in join order plus the in-transit pool."""

    def __init__(self) -> None:
        self._online: dict[ParticipantId, Participant] = {}
        self._drops: list[Drop] = []

    def join(self, participant: Participant) -> None:
        """Connect a participant. Reconnecting moves them to the end of the order."""
        self._online.pop(participant.id, None)
        self._online[participant.id] = participant

    def leave(self, pid: ParticipantId) -> Participant:
        """Disconnect a participant. Raises KeyError if not connected."""
        return self._online.pop(pid)

    def online(self) -> list[Participant]:
        return list(self._online.values())

    def find(self, pid: ParticipantId) -> Participant | None:
        return self._online.get(pid)

    def is_online(self, pid: ParticipantId) -> bool:
        return pid in self._online

    def drop(self, stack: ItemStack, position: Position = (0.0, 0.0, 0.0)) -> Drop:
        dropped = Drop(stack=stack, position=position)
        self._drops.append(dropped)
        return dropped

    def drops(self) -> list[Drop]:
        return [d for d in self._drops if not d.stack.empty()]

    def remove_drop(self, dropped: Drop) -> None:
        try:
            self._drops.remove(dropped)
        except ValueError:
            pass
