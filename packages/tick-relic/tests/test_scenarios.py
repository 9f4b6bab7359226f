"""End-to-end runs through Server and Warden."""
from __future__ import annotations

from pathlib import Path

from tick_relic import (
    Block,
    CommandRouter,
    CommandSource,
    Container,
    ContainerHelper,
    ContainerKind,
    Decision,
    ItemStack,
    RelicConfig,
    Server,
    UseBlock,
    Warden,
    container_session,
    new_participant,
)

OP = CommandSource("op", permission_level=4)


def _server(tmp_path: Path | None = None, **config: object) -> tuple[Server, Warden, list[str]]:
    config.setdefault("scan_interval", 2)
    server = Server(tps=20)
    warden = Warden(RelicConfig(**config), data_dir=tmp_path)  # type: ignore[arg-type]
    warden.install(server)
    broadcasts: list[str] = []
    warden.bus.subscribe("broadcast", lambda kind, data: broadcasts.append(data["text"]))
    return server, warden, broadcasts


class TestScenarios:
    def test_two_holders_resolved_on_cadence(self) -> None:
        server, warden, broadcasts = _server()
        alice, bob = new_participant("alice"), new_participant("bob")
        alice.primary.set(0, ItemStack("mace"))
        bob.primary.set(0, ItemStack("mace"))
        warden.connect(server.world, alice)
        warden.connect(server.world, bob)

        server.step()
        assert ContainerHelper.count(bob.primary, "mace") == 1
        server.step()

        assert ContainerHelper.count(alice.primary, "mace") == 1
        assert ContainerHelper.count(bob.primary, "mace") == 0
        assert ContainerHelper.count(bob.primary, "heavy_core") == 1
        assert ContainerHelper.count(bob.primary, "breeze_rod") == 1
        assert broadcasts == [warden.config.message("duplicates", count=1)]

    def test_offline_holder_keeps_crafting_blocked(self) -> None:
        server, warden, broadcasts = _server()
        holder = new_participant("holder")
        holder.primary.set(0, ItemStack("mace"))
        crafter = new_participant("crafter")
        warden.connect(server.world, holder)
        warden.connect(server.world, crafter)
        warden.disconnect(server.world, "holder")

        crafter.screen.slots[0].set(ItemStack("mace"))
        server.run(4)

        assert warden.state.exists and warden.state.owner == "holder"
        assert crafter.screen.slots[0].get() is None
        assert broadcasts == []

    def test_lost_resource_unlocks_crafting(self) -> None:
        server, warden, broadcasts = _server()
        alice = new_participant("alice")
        alice.primary.set(0, ItemStack("mace"))
        server.world.join(alice)
        server.run(2)
        assert broadcasts == [warden.config.message("crafted")]

        alice.primary.set(0, None)
        server.run(4)

        assert not warden.state.exists
        assert broadcasts == [warden.config.message("crafted"), warden.config.message("lost")]

        alice.screen.slots[0].set(ItemStack("mace"))
        server.step()
        assert alice.screen.slots[0].get() == ItemStack("mace")

    def test_dropped_resource_survives_a_join(self) -> None:
        server, warden, broadcasts = _server(scan_interval=1)
        alice = new_participant("alice")
        warden.connect(server.world, alice)
        alice.primary.set(0, ItemStack("mace"))
        server.step()
        assert broadcasts == [warden.config.message("crafted")]

        dropped = server.world.drop(ContainerHelper.take(alice.primary, 0))
        warden.connect(server.world, new_participant("bob"))
        assert warden.state.exists

        server.world.remove_drop(dropped)
        alice.primary.set(0, dropped.stack)
        server.step()

        assert broadcasts == [warden.config.message("crafted")]
        assert warden.state.owner == "alice"

    def test_foreign_container_emptied_same_tick(self) -> None:
        server, warden, _ = _server()
        alice = new_participant("alice")
        warden.connect(server.world, alice)
        chest_block = Block("chest", storage=True)
        assert warden.dispatch(UseBlock(alice, chest_block), server.world).decision is Decision.PASS

        chest = Container.sized(ContainerKind.OTHER, 27)
        chest.set(13, ItemStack("mace"))
        alice.open(container_session(alice, chest))
        server.step()

        assert chest.get(13) is None
        assert ContainerHelper.count(alice.primary, "mace") == 1
        assert warden.dispatch(UseBlock(alice, chest_block), server.world).denied

    def test_repeated_craft_attempts(self) -> None:
        server, warden, _ = _server()
        holder, crafter = new_participant("holder"), new_participant("crafter")
        holder.secondary.set(0, ItemStack("mace"))
        warden.connect(server.world, holder)
        warden.connect(server.world, crafter)

        for _ in range(3):
            crafter.screen.slots[0].set(ItemStack("mace"))
            server.step()
            assert crafter.screen.slots[0].get() is None
            assert warden.gate.last_results[1].changed == 1

    def test_restart_restores_offline_lock(self, tmp_path: Path) -> None:
        alice_id = "5f0e1c52-8f5e-4a8e-9a43-2b1f1c7d9b11"
        server, warden, _ = _server(tmp_path)
        server.start()
        alice = new_participant(alice_id)
        alice.primary.set(0, ItemStack("mace"))
        warden.connect(server.world, alice)
        server.step()
        server.stop()

        restarted, fresh, _ = _server(tmp_path)
        restarted.start()

        assert fresh.cache.get(alice_id) is True
        assert fresh.state.exists and fresh.state.owner == alice_id

    def test_fix_command_against_running_server(self) -> None:
        server, warden, _ = _server(scan_interval=1000)
        for pid in ("a", "b"):
            p = new_participant(pid)
            p.primary.set(0, ItemStack("mace"))
            warden.connect(server.world, p)
        server.step()

        router = CommandRouter(warden, server.world)
        assert router.dispatch("/rl fix", OP) == ["Fixed. Kept one mace, removed 1 duplicate(s)."]
        assert router.dispatch("/rl locate", OP) == ["The mace is in a's inventory."]
