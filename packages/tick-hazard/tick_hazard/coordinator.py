"""IncidentCoordinator - wires selection, scaling, timelines and zones."""
from __future__ import annotations

import random as _random_mod
import threading
from dataclasses import dataclass
from typing import Callable

from loguru import logger

from tick_hazard.catalog import ProfileCatalog, default_catalog
from tick_hazard.config import HazardConfig
from tick_hazard.engine import HazardEngine
from tick_hazard.events import DispatchAlert, IncidentStarted, ZoneRequest
from tick_hazard.scaler import resolve, resolve_smoke_duration
from tick_hazard.scheduler import IncidentHandle, TimelineScheduler
from tick_hazard.selector import ProfileSelector, clamp_fill_level
from tick_hazard.systems import make_timeline_system, make_zone_system
from tick_hazard.types import Point, ProfileNotFound
from tick_hazard.zones import HazardZoneRegistry

_STARTING = "<starting>"


@dataclass
class FlammableVehicle:
    """A tracked vehicle whose failure should start an incident."""

    plate: str
    cargo_key: str
    fill_level: float
    hazmat_class: int | None = None
    incident_id: str | None = None


class IncidentCoordinator:
    """Entry point for the vehicle-failure detector.

    Either pass a scheduler and registry you drive yourself, or use
    ``IncidentCoordinator.with_engine()`` to get both wired to a HazardEngine.
    """

    def __init__(
        self,
        scheduler: TimelineScheduler,
        registry: HazardZoneRegistry,
        catalog: ProfileCatalog | None = None,
        config: HazardConfig | None = None,
        on_start: Callable[[IncidentStarted], None] | None = None,
    ) -> None:
        self._config = config or HazardConfig()
        self._selector = ProfileSelector(catalog or default_catalog(), self._config)
        self._scheduler = scheduler
        self._registry = registry
        self._start_listeners: list[Callable[[IncidentStarted], None]] = []
        if on_start is not None:
            self._start_listeners.append(on_start)
        self._vehicles: dict[str, FlammableVehicle] = {}
        self._by_incident: dict[str, str] = {}
        self._lock = threading.RLock()

        scheduler.on_zone(self._register_zone)
        scheduler.on_end(self._incident_ended)

    @classmethod
    def with_engine(
        cls,
        config: HazardConfig | None = None,
        seed: int | None = None,
        catalog: ProfileCatalog | None = None,
    ) -> tuple[IncidentCoordinator, HazardEngine]:
        """Build an engine with the timeline and zone systems installed."""
        config = config or HazardConfig()
        engine = HazardEngine(tps=config.tps, seed=seed)
        scheduler = TimelineScheduler(
            seed=engine.random.getrandbits(64), time_source=engine.clock.now_ms
        )
        registry = HazardZoneRegistry(time_source=engine.clock.now_ms)
        engine.add_system(make_timeline_system(scheduler))
        engine.add_system(make_zone_system(registry))
        return cls(scheduler, registry, catalog=catalog, config=config), engine

    @property
    def scheduler(self) -> TimelineScheduler:
        return self._scheduler

    @property
    def registry(self) -> HazardZoneRegistry:
        return self._registry

    @property
    def selector(self) -> ProfileSelector:
        return self._selector

    def on_start(self, listener: Callable[[IncidentStarted], None]) -> None:
        self._start_listeners.append(listener)

    # --- Trigger ---

    def report_incident(
        self,
        cargo_key: str,
        origin: Point,
        fill_level: float | None = None,
        hazmat_class: int | None = None,
        rng: _random_mod.Random | None = None,
    ) -> IncidentHandle | None:
        """Start the incident for a failed vehicle.

        Returns None when the cargo carries no hazard profile.
        """
        selection = self._selector.find(cargo_key, fill_level, hazmat_class)
        if selection is None:
            logger.debug("No hazard profile for cargo {!r}", cargo_key)
            return None
        profile = selection.profile
        phases = resolve(profile, selection.fill_level, self._config.min_scale)
        handle = self._scheduler.start(
            phases,
            origin,
            profile_key=profile.key,
            rng=rng,
            cleanup_item=profile.cleanup_item,
        )

        dispatch = None
        if profile.dispatch_alert:
            dispatch = DispatchAlert(
                incident_id=handle.incident_id,
                profile_key=profile.key,
                label=profile.label,
                priority=profile.dispatch_priority,
                origin=origin,
                hazmat_class=profile.hazmat_class,
            )
        started = IncidentStarted(
            incident_id=handle.incident_id,
            profile_key=profile.key,
            label=profile.label,
            origin=origin,
            fill_level=selection.fill_level,
            smoke_column_s=resolve_smoke_duration(
                profile, selection.fill_level, self._config.min_scale
            ),
            dispatch=dispatch,
        )
        logger.info(
            "Incident {} started: {} at {} (fill {:.0%})",
            handle.incident_id,
            profile.key,
            origin,
            selection.fill_level,
        )
        for listener in self._start_listeners:
            listener(started)
        return handle

    def cancel(self, handle: IncidentHandle | str) -> bool:
        return self._scheduler.cancel(handle)

    def cleanup(self, zone_id: str) -> bool:
        return self._registry.cleanup(zone_id)

    # --- Flammable vehicles ---

    def register_vehicle(
        self,
        plate: str,
        cargo_key: str,
        fill_level: float | None = None,
        hazmat_class: int | None = None,
    ) -> bool:
        """Track a vehicle. Returns False for an empty plate or harmless cargo."""
        if not plate:
            logger.warning("register_vehicle called with empty plate")
            return False
        if fill_level is None:
            fill_level = self._config.default_fill_level
        fill = clamp_fill_level(fill_level)
        try:
            self._selector.select(cargo_key, fill, hazmat_class)
        except ProfileNotFound:
            logger.debug("Cargo {!r} on {} has no hazard profile", cargo_key, plate)
            return False
        with self._lock:
            self._vehicles[plate] = FlammableVehicle(plate, cargo_key, fill, hazmat_class)
        logger.info("Registered flammable vehicle {} ({}, fill {:.0%})", plate, cargo_key, fill)
        return True

    def deregister_vehicle(self, plate: str) -> bool:
        """Stop tracking a vehicle, cancelling its running incident if any."""
        with self._lock:
            vehicle = self._vehicles.pop(plate, None)
            if vehicle is None:
                return False
            incident_id = vehicle.incident_id
            if incident_id is not None:
                self._by_incident.pop(incident_id, None)
        # The scheduler calls back into this object under its own lock, so
        # self._lock is never held while calling the scheduler.
        if incident_id is not None and incident_id != _STARTING:
            self._scheduler.cancel(incident_id)
        logger.info("Deregistered flammable vehicle {}", plate)
        return True

    def update_fill_level(self, plate: str, fill_level: float) -> bool:
        with self._lock:
            vehicle = self._vehicles.get(plate)
            if vehicle is None:
                return False
            vehicle.fill_level = clamp_fill_level(fill_level)
            return True

    def vehicle(self, plate: str) -> FlammableVehicle | None:
        with self._lock:
            return self._vehicles.get(plate)

    def vehicles(self) -> list[FlammableVehicle]:
        with self._lock:
            return list(self._vehicles.values())

    def handle_vehicle_failure(self, plate: str, origin: Point) -> IncidentHandle | None:
        """Start the incident for a tracked vehicle, at most one at a time."""
        with self._lock:
            vehicle = self._vehicles.get(plate)
            if vehicle is None:
                return None
            if vehicle.incident_id is not None:
                logger.warning("Incident already active for vehicle {}", plate)
                return None
            vehicle.incident_id = _STARTING
            cargo_key, hazmat_class = vehicle.cargo_key, vehicle.hazmat_class
            fill = vehicle.fill_level if self._selector.is_tanker(cargo_key) else None

        handle = self.report_incident(cargo_key, origin, fill, hazmat_class)

        with self._lock:
            tracked = self._vehicles.get(plate) is vehicle
            if handle is None:
                vehicle.incident_id = None
                return None
            if tracked and not handle.done:
                vehicle.incident_id = handle.incident_id
                self._by_incident[handle.incident_id] = plate
                return handle
            if tracked:
                self._vehicles.pop(plate, None)

        if not tracked:
            # Deregistered while the incident was starting.
            self._scheduler.cancel(handle)
        return handle

    # --- Scheduler callbacks ---

    def _register_zone(self, request: ZoneRequest) -> str:
        return self._registry.register(request)

    def _incident_ended(self, handle: IncidentHandle) -> None:
        with self._lock:
            plate = self._by_incident.pop(handle.incident_id, None)
            if plate is not None:
                self._vehicles.pop(plate, None)
                logger.info("Vehicle {} released after incident {}", plate, handle.incident_id)
