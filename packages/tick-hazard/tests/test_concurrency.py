"""Tests for thread safety — scheduler, registry and coordinator under load."""
from __future__ import annotations

import random
import threading
from collections import Counter

from tick_hazard import (
    DotTick,
    FiredPhase,
    HazardZoneRegistry,
    IncidentCoordinator,
    IncidentState,
    TimelineScheduler,
    ZoneRequest,
)
from tick_hazard.builtin import FUEL_TANKER_FULL, HAZMAT_CLASS6
from tick_hazard.profiles import HazardProfile, PhaseTemplate
from tick_hazard.scaler import resolve
from tick_hazard.types import Fixed

ORIGIN = (0.0, 0.0, 0.0)
JOIN_TIMEOUT = 20.0


def _run_threads(*targets) -> list[Exception]:
    """Run each target in its own thread; return what they raised."""
    errors: list[Exception] = []

    def wrap(fn):
        def body() -> None:
            try:
                fn()
            except Exception as exc:
                errors.append(exc)

        return body

    threads = [threading.Thread(target=wrap(t), daemon=True) for t in targets]
    for t in threads:
        t.start()
    for t in threads:
        t.join(JOIN_TIMEOUT)
    stuck = [t for t in threads if t.is_alive()]
    assert not stuck, f"{len(stuck)} thread(s) still running, likely deadlocked"
    return errors


def _phases(count: int = 5):
    profile = HazardProfile(
        key="steps",
        label="Steps",
        phases=tuple(
            PhaseTemplate(name=f"p{i}", delay=i * 100, radius=Fixed(1.0), damage=Fixed(1.0))
            for i in range(count)
        ),
    )
    return resolve(profile, 1.0)


def _persistent_cloud() -> ZoneRequest:
    cloud = next(p for p in resolve(HAZMAT_CLASS6, 1.0) if p.name == "full_cloud")
    return ZoneRequest(
        incident_id="seed",
        phase_name="full_cloud",
        center=ORIGIN,
        zone=cloud.hazard,
    )


class TestSchedulerThreads:
    def test_start_cancel_advance_concurrently(self) -> None:
        fires: Counter[str] = Counter()
        fires_lock = threading.Lock()

        def on_fire(event: FiredPhase) -> None:
            with fires_lock:
                fires[event.incident_id] += 1

        sched = TimelineScheduler(on_fire=on_fire, time_source=lambda: 0)
        handles = []
        handles_lock = threading.Lock()
        cancelled: dict[str, int] = {}
        stop = threading.Event()

        def starter() -> None:
            for _ in range(300):
                handle = sched.start(_phases(), ORIGIN, now_ms=0)
                with handles_lock:
                    handles.append(handle)

        def canceller() -> None:
            rng = random.Random(1)
            while not stop.is_set():
                with handles_lock:
                    if not handles:
                        continue
                    handle = rng.choice(handles)
                if sched.cancel(handle):
                    with fires_lock:
                        cancelled[handle.incident_id] = fires[handle.incident_id]

        def driver() -> None:
            for now in range(0, 600, 5):
                sched.advance(now)
            stop.set()

        assert _run_threads(starter, canceller, driver) == []
        sched.advance(10_000)

        assert sched.active_incidents() == []
        for handle in handles:
            assert handle.state in (IncidentState.COMPLETED, IncidentState.CANCELLED)
            if handle.state is IncidentState.COMPLETED:
                assert fires[handle.incident_id] == 5
        for incident_id, seen in cancelled.items():
            # At most the one fire already taken off the queue lands after cancel.
            assert fires[incident_id] - seen <= 1
            assert fires[incident_id] < 5

    def test_parallel_advance_keeps_incident_order(self) -> None:
        seen: dict[str, list[int]] = {}
        lock = threading.Lock()

        def on_fire(event: FiredPhase) -> None:
            with lock:
                seen.setdefault(event.incident_id, []).append(event.offset_ms)

        sched = TimelineScheduler(on_fire=on_fire)
        for _ in range(50):
            sched.start(resolve(FUEL_TANKER_FULL, 1.0), ORIGIN, now_ms=0)

        def driver(offset: int):
            def body() -> None:
                for now in range(offset, 20_000, 40):
                    sched.advance(now)

            return body

        assert _run_threads(driver(0), driver(20), driver(35)) == []
        sched.advance(20_000)
        assert len(seen) == 50
        for offsets in seen.values():
            assert offsets == sorted(offsets)


class TestRegistryThreads:
    def test_register_query_tick_cleanup(self) -> None:
        dots: list[DotTick] = []
        registry = HazardZoneRegistry(on_dot=dots.append, time_source=lambda: 0)
        registry.report_occupant(1, ORIGIN)
        cloud = _persistent_cloud()
        registered: list[str] = []

        def writer(prefix: str):
            def body() -> None:
                for i in range(200):
                    request = ZoneRequest(
                        incident_id=f"{prefix}-{i}",
                        phase_name="full_cloud",
                        center=ORIGIN,
                        zone=cloud.zone,
                    )
                    registered.append(registry.register(request, now_ms=0))
                    if i % 2:
                        registry.cleanup(request.zone_id)

            return body

        def reader() -> None:
            for _ in range(400):
                for zone_id in registry.contains(ORIGIN):
                    assert zone_id.endswith(":full_cloud")
                registry.active_zones()
                registry.zones_near(ORIGIN, 100.0)

        def ticker() -> None:
            for now in range(1000, 50_000, 1000):
                registry.tick(now)

        assert _run_threads(writer("a"), writer("b"), reader, ticker) == []
        assert len(registry.active_zones()) == 200
        assert len(registered) == 400


class TestCrossCalls:
    def test_dot_listener_starts_incident_while_zones_register(self) -> None:
        scheduler = TimelineScheduler(time_source=lambda: 0)
        registry = HazardZoneRegistry(time_source=lambda: 0)
        coordinator = IncidentCoordinator(scheduler, registry)
        registry.register(_persistent_cloud(), now_ms=0)
        registry.report_occupant(1, ORIGIN)
        spawned = []

        def on_dot(tick: DotTick) -> None:
            if tick.zone_id == "seed:full_cloud":
                spawned.append(coordinator.report_incident("hazmat_class7", (500.0, 500.0, 0.0)))

        registry.on_dot(on_dot)

        def ticker() -> None:
            for i in range(1, 200):
                registry.tick(i * 1000)

        def driver() -> None:
            for i in range(200):
                coordinator.report_incident("fuel_tanker", ORIGIN, 1.0)
                scheduler.advance(4000 + i * 100)

        assert _run_threads(ticker, driver) == []
        assert len(spawned) == 199
        assert any(z.hazard_type == "fire" for z in registry.active_zones())
