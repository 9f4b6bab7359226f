"""Tests for the crafting output gate."""
from __future__ import annotations

from tick_relic import (
    Container,
    ContainerKind,
    ItemStack,
    NoticeBus,
    OfflineHolderCache,
    Participant,
    RelicConfig,
    ResourceIdentity,
    Session,
    Slot,
    TickContext,
    World,
    make_output_gate_system,
    new_participant,
)
from tick_relic.notices import MESSAGE, SOUND, SOUND_BLOCKED


def _setup() -> tuple[World, OfflineHolderCache, NoticeBus, object]:
    world = World()
    cache = OfflineHolderCache()
    bus = NoticeBus()
    gate = make_output_gate_system(ResourceIdentity("mace"), cache, RelicConfig(), bus)
    return world, cache, bus, gate


def _crafting_table(p: Participant) -> Session:
    grid = Container.sized(ContainerKind.OTHER, 9)
    output = Container.sized(ContainerKind.OUTPUT, 1)
    slots = [Slot(output, 0)] + [Slot(grid, i) for i in range(9)]
    slots.extend(Slot(p.primary, i) for i in range(len(p.primary)))
    return Session("crafting", slots=slots)


def _output(p: Participant) -> Slot:
    return p.session.slots[0]


class _BrokenSession:
    name = "broken"
    station = False

    @property
    def slots(self) -> list[Slot]:
        raise RuntimeError("boom")


class TestGate:
    def test_clears_output_when_locked(self) -> None:
        world, cache, bus, gate = _setup()
        holder = new_participant("holder")
        holder.primary.set(0, ItemStack("mace"))
        crafter = new_participant("crafter")
        crafter.open(_crafting_table(crafter))
        world.join(holder)
        world.join(crafter)

        _output(crafter).set(ItemStack("mace"))
        _output(crafter).container.dirty = False
        gate(world, TickContext(1))

        assert _output(crafter).get() is None
        assert _output(crafter).container.dirty
        notices = [(n.kind, n.data.get("target")) for n in bus.pending()]
        assert (SOUND, "crafter") in notices
        assert (MESSAGE, "crafter") in notices
        assert bus.pending()[0].data["sound"] == SOUND_BLOCKED

    def test_leaves_output_when_unlocked(self) -> None:
        world, cache, bus, gate = _setup()
        crafter = new_participant("crafter")
        world.join(crafter)
        _output(crafter).set(ItemStack("mace"))

        gate(world, TickContext(1))

        assert _output(crafter).get() == ItemStack("mace")
        assert bus.pending() == []

    def test_flagged_offline_holder_locks(self) -> None:
        world, cache, bus, gate = _setup()
        cache.on_disconnect("gone", True)
        crafter = new_participant("crafter")
        world.join(crafter)
        _output(crafter).set(ItemStack("mace"))

        gate(world, TickContext(1))

        assert _output(crafter).get() is None

    def test_other_outputs_untouched(self) -> None:
        world, cache, bus, gate = _setup()
        cache.on_disconnect("gone", True)
        crafter = new_participant("crafter")
        world.join(crafter)
        _output(crafter).set(ItemStack("bread", 3))

        gate(world, TickContext(1))

        assert _output(crafter).get() == ItemStack("bread", 3)

    def test_each_session_gated_independently(self) -> None:
        world, cache, bus, gate = _setup()
        cache.on_disconnect("gone", True)
        a, b, c = new_participant("a"), new_participant("b"), new_participant("c")
        b.open(_crafting_table(b))
        for p in (a, b, c):
            world.join(p)
        _output(a).set(ItemStack("mace"))
        _output(b).set(ItemStack("mace"))
        _output(c).set(ItemStack("bread"))

        gate(world, TickContext(1))

        assert _output(a).get() is None
        assert _output(b).get() is None
        assert _output(c).get() == ItemStack("bread")
        assert [r.changed for r in gate.last_results] == [1, 1, 0]

    def test_repeated_attempts_behave_identically(self) -> None:
        world, cache, bus, gate = _setup()
        holder = new_participant("holder")
        holder.primary.set(0, ItemStack("mace"))
        crafter = new_participant("crafter")
        crafter.open(_crafting_table(crafter))
        world.join(holder)
        world.join(crafter)

        for tick in (1, 2):
            _output(crafter).set(ItemStack("mace"))
            gate(world, TickContext(tick))
            assert _output(crafter).get() is None
            assert [r.changed for r in gate.last_results] == [0, 1]
            bus.flush()

    def test_failing_session_is_isolated(self) -> None:
        world, cache, bus, gate = _setup()
        cache.on_disconnect("gone", True)
        broken = new_participant("broken")
        broken.session = _BrokenSession()  # type: ignore[assignment]
        fine = new_participant("fine")
        world.join(broken)
        world.join(fine)
        _output(fine).set(ItemStack("mace"))

        gate(world, TickContext(1))

        assert _output(fine).get() is None
        first, second = gate.last_results
        assert not first.ok
        assert isinstance(first.error, RuntimeError)
        assert second.ok and second.changed == 1
