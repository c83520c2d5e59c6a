"""System factories for incident timelines and hazard zones."""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from tick_hazard.scheduler import TimelineScheduler
from tick_hazard.zones import HazardZoneRegistry

if TYPE_CHECKING:
    from tick_hazard.types import TickContext


def make_timeline_system(scheduler: TimelineScheduler) -> Callable[[TickContext], None]:
    """Return a system that fires every phase due at the current tick."""

    def timeline_system(ctx: TickContext) -> None:
        scheduler.advance(ctx.elapsed_ms)

    return timeline_system


def make_zone_system(registry: HazardZoneRegistry) -> Callable[[TickContext], None]:
    """Return a system that expires zones and runs due DOT ticks.

    Add it after the timeline system so zones created this tick are visible.
    """

    def zone_system(ctx: TickContext) -> None:
        registry.tick(ctx.elapsed_ms)

    return zone_system
