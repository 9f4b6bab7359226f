"""Server - fixed-timestep tick driver, pacing, and lifecycle hooks."""
from __future__ import annotations

import time
from typing import Callable

from tick_relic.types import System, TickContext
from tick_relic.world import World


class Server:
    """Runs end-of-tick systems in registration order.

    Host events (joins, leaves, interactions) are delivered between ticks by
    whoever owns the server; systems only see ``(world, ctx)``.
    """

    def __init__(self, tps: int = 20, world: World | None = None) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        self._tps = tps
        self._dt = 1.0 / tps
        self._tick_number = 0
        self._world = world if world is not None else World()
        self._systems: list[System] = []
        self._start_hooks: list[Callable[[World, TickContext], None]] = []
        self._stop_hooks: list[Callable[[World, TickContext], None]] = []
        self._stop_requested: bool = False
        self._running: bool = False

    @property
    def world(self) -> World:
        return self._world

    @property
    def tps(self) -> int:
        return self._tps

    @property
    def tick_number(self) -> int:
        return self._tick_number

    def add_system(self, system: System) -> None:
        self._systems.append(system)

    def on_start(self, hook: Callable[[World, TickContext], None]) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: Callable[[World, TickContext], None]) -> None:
        self._stop_hooks.append(hook)

    def request_stop(self) -> None:
        self._stop_requested = True

    def _context(self) -> TickContext:
        return TickContext(tick_number=self._tick_number)

    def _tick(self) -> None:
        self._tick_number += 1
        ctx = self._context()
        for system in self._systems:
            system(self._world, ctx)

    def start(self) -> None:
        """Fire start hooks once. Later calls are no-ops until ``stop``."""
        if self._running:
            return
        self._running = True
        ctx = self._context()
        for hook in self._start_hooks:
            hook(self._world, ctx)

    def stop(self) -> None:
        """Fire stop hooks once."""
        if not self._running:
            return
        self._running = False
        ctx = self._context()
        for hook in self._stop_hooks:
            hook(self._world, ctx)

    def step(self) -> None:
        self._tick()

    def run(self, n: int) -> None:
        """Run exactly *n* ticks, bracketed by start and stop hooks."""
        self._stop_requested = False
        self.start()
        for _ in range(n):
            self._tick()
            if self._stop_requested:
                break
        self.stop()

    def run_forever(self) -> None:
        self._stop_requested = False
        self.start()
        while not self._stop_requested:
            began = time.monotonic()
            self._tick()
            if self._stop_requested:
                break
            sleep_time = self._dt - (time.monotonic() - began)
            if sleep_time > 0:
                time.sleep(sleep_time)
        self.stop()
