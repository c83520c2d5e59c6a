"""Fuel tanker rupture -- one incident played out on the hazard engine.

Demonstrates:
- Wiring an IncidentCoordinator to a HazardEngine
- Fill level picking the full or partial variant and scaling it
- The randomized secondary ignition burst
- A fire zone ticking damage on a bystander until it expires

Run: python -m examples.tanker_rupture
"""

import random

from tick_hazard import DotTick, FiredPhase, IncidentCoordinator, IncidentStarted

ORIGIN = (0.0, 0.0, 0.0)


def print_fire(event: FiredPhase) -> None:
    label = event.phase_name
    if event.sub_index is not None:
        label = f"{label}[{event.sub_index}]"
    x, y, _ = event.epicenter
    print(f"  +{event.offset_ms:>6}ms  {label:<24} r={event.radius:5.1f}  at ({x:+6.1f}, {y:+6.1f})")


def run(fill_level: float, seed: int) -> None:
    coordinator, engine = IncidentCoordinator.with_engine(seed=seed)
    burns: list[DotTick] = []

    def on_start(event: IncidentStarted) -> None:
        print(f"{event.label} (fill {event.fill_level:.0%}, smoke {event.smoke_column_s:.0f}s)")

    coordinator.on_start(on_start)
    coordinator.scheduler.on_fire(print_fire)
    coordinator.registry.on_dot(burns.append)

    # A bystander 10m from the tanker, inside the outer fire band.
    coordinator.registry.report_occupant(1, (10.0, 0.0, 0.0))

    coordinator.report_incident("fuel_tanker", ORIGIN, fill_level, rng=random.Random(seed))
    engine.run_for(20_000)

    total = sum(b.amount for b in burns)
    zones = coordinator.registry.active_zones()
    print(f"  bystander took {total:.0f} fire damage over {len(burns)} ticks")
    for zone in zones:
        left = "until cleanup" if zone.persistent else f"{zone.remaining_ms}ms left"
        print(f"  zone {zone.zone_id}: {zone.hazard_type} r={zone.radius}, {left}")
    print()


def main() -> None:
    print("=== Tanker Rupture ===\n")
    run(fill_level=1.0, seed=7)
    run(fill_level=0.35, seed=7)
    run(fill_level=0.05, seed=7)


if __name__ == "__main__":
    main()
