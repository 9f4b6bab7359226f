"""Duplicate sweep -- two players end up holding the relic.

Demonstrates:
- Installing a Warden on a Server
- Subscribing the presentation layer to the notice bus
- The reconciliation pass keeping the first instance in scan order
- Offline tracking keeping crafting locked after the holder logs out
- The operator ``locate`` and ``fix`` commands

Run: python -m examples.duplicates
"""

from tick_relic import (
    CommandRouter,
    CommandSource,
    ItemStack,
    RelicConfig,
    Server,
    Warden,
    new_participant,
)


def main() -> None:
    print("=== Duplicate sweep ===\n")

    server = Server(tps=20)
    warden = Warden(RelicConfig(scan_interval=20))
    warden.install(server)
    warden.bus.subscribe("broadcast", lambda kind, data: print(f"  [broadcast] {data['text']}"))

    world = server.world
    alice = new_participant("alice")
    bob = new_participant("bob")
    warden.connect(world, alice)
    warden.connect(world, bob)

    alice.primary.set(0, ItemStack("mace"))
    bob.secondary.set(4, ItemStack("mace"))

    server.run(20)
    print(f"\n  state: exists={warden.state.exists} owner={warden.state.owner}")
    print(f"  bob's refund: {[s for s in bob.primary.slots if s is not None]}")

    warden.disconnect(world, "alice")
    print(f"  after alice leaves: exists={warden.state.exists} cache={warden.cache.items()}")

    router = CommandRouter(warden, world)
    op = CommandSource("operator", permission_level=4)
    for line in router.dispatch("relic locate", op) + router.dispatch("rl fix", op):
        print(f"  > {line}")


if __name__ == "__main__":
    main()
