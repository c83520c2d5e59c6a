"""HazardEngine - fixed-timestep loop that drives timelines and zones."""

import os
import random
import threading
import time
from typing import Callable

from loguru import logger

from tick_hazard.clock import Clock
from tick_hazard.types import TickContext

System = Callable[[TickContext], None]


class HazardEngine:
    """Runs systems once per tick against a shared millisecond clock.

    ``stop()`` may be called from any thread; a tick in progress always
    finishes before the loop exits.
    """

    def __init__(self, tps: int = 20, seed: int | None = None) -> None:
        self._clock = Clock(tps)
        self._systems: list[System] = []
        self._stopping = threading.Event()
        self._tick_lock = threading.Lock()

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def random(self) -> random.Random:
        return self._rng

    def add_system(self, system: System) -> None:
        self._systems.append(system)

    def stop(self) -> None:
        self._stopping.set()

    def _tick(self) -> bool:
        """Advance one tick. Returns False once a stop was requested."""
        with self._tick_lock:
            self._clock.advance()
            ctx = self._clock.context(self.stop, self._rng)
            for system in self._systems:
                system(ctx)
                if self._stopping.is_set():
                    return False
        return True

    def step(self) -> None:
        self._stopping.clear()
        self._tick()

    def run(self, n: int) -> None:
        self._stopping.clear()
        for _ in range(n):
            if not self._tick():
                break

    def run_for(self, ms: int) -> None:
        """Run enough ticks to cover ``ms`` milliseconds of engine time."""
        self.run(self._clock.ticks_until(self._clock.elapsed_ms + ms))

    def run_forever(self) -> None:
        self._stopping.clear()
        logger.info("Hazard engine running at {} tps", self._clock.tps)
        dt = self._clock.dt
        while not self._stopping.is_set():
            started = time.monotonic()
            if not self._tick():
                break
            remaining = dt - (time.monotonic() - started)
            if remaining > 0:
                self._stopping.wait(remaining)
        logger.info("Hazard engine stopped at tick {}", self._clock.tick_number)
