"""Clock - tick counter and millisecond time source for the hazard engine."""

import random
from typing import Callable

from tick_hazard.types import TickContext


class Clock:
    """Counts ticks and reports engine time in whole milliseconds.

    Phase offsets and zone intervals are integer milliseconds, so elapsed
    time is floored to the millisecond rather than kept as a float.
    """

    __slots__ = ("tps", "dt", "_ticks")

    def __init__(self, tps: int) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        self.tps = tps
        self.dt = 1.0 / tps
        self._ticks = 0

    @property
    def tick_number(self) -> int:
        return self._ticks

    @property
    def elapsed_ms(self) -> int:
        return self._ticks * 1000 // self.tps

    def now_ms(self) -> int:
        """Time source for the scheduler and the zone registry."""
        return self.elapsed_ms

    def ticks_until(self, ms: int) -> int:
        """Ticks still needed before ``elapsed_ms`` reaches ``ms``."""
        target = -(-ms * self.tps // 1000)
        return max(0, target - self._ticks)

    def advance(self, ticks: int = 1) -> int:
        self._ticks += ticks
        return self._ticks

    def context(self, stop_fn: Callable[[], None], rng: random.Random) -> TickContext:
        return TickContext(
            tick_number=self._ticks,
            dt=self.dt,
            elapsed_ms=self.elapsed_ms,
            request_stop=stop_fn,
            random=rng,
        )

    def reset(self, tick_number: int = 0) -> None:
        self._ticks = tick_number
