"""HazardZoneRegistry - live hazard zones, containment queries and DOT ticks."""
from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from loguru import logger

from tick_hazard.events import DotTick, ZoneRequest
from tick_hazard.types import Point, ZoneNotFound


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def _distance(a: Point, b: Point) -> float:
    return math.dist(a, b)


@dataclass
class Occupant:
    entity_id: int
    position: Point
    vehicle: bool = False


@dataclass
class HazardZone:
    """Mutable zone state. Only the registry touches it."""

    zone_id: str
    incident_id: str
    hazard_type: str
    center: Point
    radius: float
    dot: float
    interval_ms: int
    created_at_ms: int
    expires_at_ms: int | None  # None persists until cleanup or restart
    next_tick_ms: int
    inner_radius: float | None = None
    inner_dot: float | None = None
    vehicle_damage: float = 0.0
    grip_reduction: float = 0.0
    tire_damage_after_ms: int | None = None
    geiger_intensity: float = 0.0
    geiger_approach_radius: float | None = None
    fire_points: int = 0
    cleanup_item: str | None = None
    ticks: int = 0
    exposure_ms: dict[int, int] = field(default_factory=dict)  # vehicle id -> ms inside
    popped: set[int] = field(default_factory=set)

    def covers(self, point: Point) -> bool:
        return _distance(self.center, point) <= self.radius

    def alive_at(self, now_ms: int) -> bool:
        return self.expires_at_ms is None or now_ms < self.expires_at_ms


@dataclass(frozen=True)
class ZoneSnapshot:
    zone_id: str
    incident_id: str
    hazard_type: str
    center: Point
    radius: float
    dot: float
    interval_ms: int
    inner_radius: float | None
    inner_dot: float | None
    vehicle_damage: float
    grip_reduction: float
    geiger_intensity: float
    geiger_approach_radius: float | None
    fire_points: int
    cleanup_item: str | None
    created_at_ms: int
    expires_at_ms: int | None
    remaining_ms: int | None  # None for persistent zones
    ticks: int

    @property
    def persistent(self) -> bool:
        return self.expires_at_ms is None


class HazardZoneRegistry:
    """Single source of truth for "is this point hazardous".

    Reads return frozen snapshots and may come from any thread. Zones are
    never persisted: a new registry (or clear()) is an empty world.
    """

    def __init__(
        self,
        on_dot: Callable[[DotTick], None] | None = None,
        on_remove: Callable[[str, str], None] | None = None,
        time_source: Callable[[], int] | None = None,
    ) -> None:
        self._dot_listeners: list[Callable[[DotTick], None]] = []
        self._remove_listeners: list[Callable[[str, str], None]] = []
        if on_dot is not None:
            self._dot_listeners.append(on_dot)
        if on_remove is not None:
            self._remove_listeners.append(on_remove)
        self._now = time_source or _monotonic_ms
        self._zones: dict[str, HazardZone] = {}
        self._occupants: dict[int, Occupant] = {}
        self._lock = threading.RLock()

    def on_dot(self, listener: Callable[[DotTick], None]) -> None:
        self._dot_listeners.append(listener)

    def on_remove(self, listener: Callable[[str, str], None]) -> None:
        """Listener receives (zone_id, reason) with reason expired/cleanup."""
        self._remove_listeners.append(listener)

    # --- Registration / removal ---

    def register(self, request: ZoneRequest, now_ms: int | None = None) -> str:
        """Create a zone from a fired phase. Re-registering an id replaces it."""
        resolved = request.zone
        with self._lock:
            now = self._now() if now_ms is None else now_ms
            expires = None if resolved.persistent else now + int(resolved.duration_s * 1000)
            tire_after = (
                None
                if resolved.tire_damage_after_s is None
                else int(resolved.tire_damage_after_s * 1000)
            )
            zone = HazardZone(
                zone_id=request.zone_id,
                incident_id=request.incident_id,
                hazard_type=resolved.hazard_type,
                center=request.center,
                radius=resolved.radius,
                dot=resolved.dot,
                interval_ms=resolved.interval_ms,
                created_at_ms=now,
                expires_at_ms=expires,
                next_tick_ms=now + resolved.interval_ms,
                inner_radius=resolved.inner_radius,
                inner_dot=resolved.inner_dot,
                vehicle_damage=resolved.vehicle_damage,
                grip_reduction=resolved.grip_reduction,
                tire_damage_after_ms=tire_after,
                geiger_intensity=resolved.geiger_intensity,
                geiger_approach_radius=resolved.geiger_approach_radius,
                fire_points=resolved.fire_points,
                cleanup_item=request.cleanup_item,
            )
            self._zones[zone.zone_id] = zone
        logger.info(
            "Hazard zone {} registered ({}, r={}, {})",
            zone.zone_id,
            zone.hazard_type,
            zone.radius,
            "persistent" if expires is None else f"expires at {expires}ms",
        )
        return zone.zone_id

    def cleanup(self, zone_id: str) -> bool:
        """Remove a zone. Returns False if it is absent or already gone."""
        with self._lock:
            zone = self._zones.get(zone_id)
            if zone is None or not zone.alive_at(self._now()):
                return False
            del self._zones[zone_id]
        logger.info("Hazard zone {} cleaned up", zone_id)
        self._notify_remove(zone_id, "cleanup")
        return True

    def clear(self) -> None:
        """Forget every zone and occupant, as a process restart would."""
        with self._lock:
            self._zones.clear()
            self._occupants.clear()

    # --- Queries ---

    def contains(self, point: Point) -> list[str]:
        """Ids of every live zone covering ``point``."""
        with self._lock:
            now = self._now()
            return [
                z.zone_id
                for z in self._zones.values()
                if z.alive_at(now) and z.covers(point)
            ]

    def describe(self, zone_id: str) -> ZoneSnapshot:
        """Snapshot of a live zone. Raises ZoneNotFound."""
        with self._lock:
            zone = self._zones.get(zone_id)
            now = self._now()
            if zone is None or not zone.alive_at(now):
                raise ZoneNotFound(zone_id)
            return self._snapshot(zone, now)

    def has(self, zone_id: str) -> bool:
        with self._lock:
            zone = self._zones.get(zone_id)
            return zone is not None and zone.alive_at(self._now())

    def active_zones(self) -> list[ZoneSnapshot]:
        with self._lock:
            now = self._now()
            return [self._snapshot(z, now) for z in self._zones.values() if z.alive_at(now)]

    def zones_near(self, point: Point, radius: float) -> list[ZoneSnapshot]:
        """Live zones whose center lies within ``radius`` of ``point``."""
        with self._lock:
            now = self._now()
            return [
                self._snapshot(z, now)
                for z in self._zones.values()
                if z.alive_at(now) and _distance(z.center, point) <= radius
            ]

    def __len__(self) -> int:
        return len(self.active_zones())

    # --- Occupancy (reported by an external entity tracker) ---

    def report_occupant(self, entity_id: int, position: Point, vehicle: bool = False) -> None:
        with self._lock:
            self._occupants[entity_id] = Occupant(entity_id, position, vehicle)

    def remove_occupant(self, entity_id: int) -> None:
        with self._lock:
            self._occupants.pop(entity_id, None)
            for zone in self._zones.values():
                zone.exposure_ms.pop(entity_id, None)

    def occupants(self, zone_id: str) -> list[int]:
        """Entity ids currently inside a zone. Raises ZoneNotFound."""
        with self._lock:
            zone = self._zones.get(zone_id)
            if zone is None or not zone.alive_at(self._now()):
                raise ZoneNotFound(zone_id)
            return [o.entity_id for o in self._occupants.values() if zone.covers(o.position)]

    # --- Ticking (called by the zone system) ---

    def tick(self, now_ms: int) -> int:
        """Expire finished zones and run every DOT tick due. Returns ticks run.

        Damage is worked out under the lock and delivered after it is released,
        so DOT listeners may start incidents or query the registry.
        """
        expired: list[str] = []
        due: list[DotTick] = []
        ran = 0
        with self._lock:
            for zone_id, zone in list(self._zones.items()):
                while zone.next_tick_ms <= now_ms and zone.alive_at(zone.next_tick_ms):
                    due.extend(self._apply_dot(zone))
                    zone.ticks += 1
                    zone.next_tick_ms += zone.interval_ms
                    ran += 1
                if not zone.alive_at(now_ms):
                    del self._zones[zone_id]
                    expired.append(zone_id)
        for dot in due:
            self._deliver(dot)
        for zone_id in expired:
            logger.info("Hazard zone {} expired", zone_id)
            self._notify_remove(zone_id, "expired")
        return ran

    def _apply_dot(self, zone: HazardZone) -> list[DotTick]:
        per_tick = zone.interval_ms / 1000.0
        ticks: list[DotTick] = []
        for occupant in list(self._occupants.values()):
            dist = _distance(zone.center, occupant.position)
            if dist > zone.radius:
                zone.exposure_ms.pop(occupant.entity_id, None)
                continue
            inner = (
                zone.inner_radius is not None
                and zone.inner_dot is not None
                and dist <= zone.inner_radius
            )
            rate = zone.inner_dot if inner else zone.dot
            tick = DotTick(
                zone_id=zone.zone_id,
                hazard_type=zone.hazard_type,
                entity_id=occupant.entity_id,
                amount=(rate or 0.0) * per_tick,
                inner=inner,
            )
            if occupant.vehicle:
                tick = self._vehicle_tick(zone, occupant, tick, per_tick)
            ticks.append(tick)
        return ticks

    def _vehicle_tick(
        self, zone: HazardZone, occupant: Occupant, tick: DotTick, per_tick: float
    ) -> DotTick:
        popped = False
        if zone.tire_damage_after_ms is not None and occupant.entity_id not in zone.popped:
            exposure = zone.exposure_ms.get(occupant.entity_id, 0) + zone.interval_ms
            zone.exposure_ms[occupant.entity_id] = exposure
            if exposure >= zone.tire_damage_after_ms:
                zone.popped.add(occupant.entity_id)
                popped = True
        return DotTick(
            zone_id=tick.zone_id,
            hazard_type=tick.hazard_type,
            entity_id=tick.entity_id,
            amount=tick.amount,
            inner=tick.inner,
            vehicle_damage=zone.vehicle_damage * per_tick,
            grip_reduction=zone.grip_reduction,
            tire_popped=popped,
        )

    def _deliver(self, tick: DotTick) -> None:
        for listener in self._dot_listeners:
            try:
                listener(tick)
            except Exception:
                # The next tick of this zone retries the occupant.
                logger.exception(
                    "DOT delivery failed for zone {} entity {}", tick.zone_id, tick.entity_id
                )

    def _notify_remove(self, zone_id: str, reason: str) -> None:
        for listener in self._remove_listeners:
            try:
                listener(zone_id, reason)
            except Exception:
                logger.exception("Removal listener failed for zone {}", zone_id)

    @staticmethod
    def _snapshot(zone: HazardZone, now: int) -> ZoneSnapshot:
        return ZoneSnapshot(
            zone_id=zone.zone_id,
            incident_id=zone.incident_id,
            hazard_type=zone.hazard_type,
            center=zone.center,
            radius=zone.radius,
            dot=zone.dot,
            interval_ms=zone.interval_ms,
            inner_radius=zone.inner_radius,
            inner_dot=zone.inner_dot,
            vehicle_damage=zone.vehicle_damage,
            grip_reduction=zone.grip_reduction,
            geiger_intensity=zone.geiger_intensity,
            geiger_approach_radius=zone.geiger_approach_radius,
            fire_points=zone.fire_points,
            cleanup_item=zone.cleanup_item,
            created_at_ms=zone.created_at_ms,
            expires_at_ms=zone.expires_at_ms,
            remaining_ms=None if zone.expires_at_ms is None else max(0, zone.expires_at_ms - now),
            ticks=zone.ticks,
        )
