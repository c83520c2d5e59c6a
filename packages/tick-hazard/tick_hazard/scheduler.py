"""TimelineScheduler - drives incident phases at their relative delays."""
from __future__ import annotations

import heapq
import itertools
import math
import os
import random as _random_mod
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from loguru import logger

from tick_hazard.events import DamageDescriptor, FiredPhase, ZoneRequest
from tick_hazard.profiles import PhaseKind
from tick_hazard.scaler import ResolvedPhase
from tick_hazard.types import IncidentNotFound, Point


class IncidentState(Enum):
    SCHEDULED = "scheduled"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_FINISHED = (IncidentState.COMPLETED, IncidentState.CANCELLED)


@dataclass
class Incident:
    """Runtime state of one incident. Private to the scheduler."""

    incident_id: str
    profile_key: str | None
    origin: Point
    started_at_ms: int
    phases: tuple[ResolvedPhase, ...]
    rng: _random_mod.Random
    cleanup_item: str | None = None
    state: IncidentState = IncidentState.SCHEDULED
    # (offset_ms, seq, phase, epicenter, sub_index)
    pending: list[tuple[int, int, ResolvedPhase, Point, int | None]] = field(
        default_factory=list
    )
    fired: int = 0
    next_seq: int = 0


@dataclass(frozen=True)
class IncidentHandle:
    incident_id: str
    profile_key: str | None
    started_at_ms: int
    _incident: Incident = field(repr=False, compare=False, hash=False)

    @property
    def state(self) -> IncidentState:
        return self._incident.state

    @property
    def done(self) -> bool:
        return self._incident.state in _FINISHED


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def random_point_in_radius(origin: Point, radius: float, rng: _random_mod.Random) -> Point:
    """Uniform point in the horizontal disk of ``radius`` around ``origin``."""
    angle = rng.uniform(0.0, 2.0 * math.pi)
    dist = radius * math.sqrt(rng.random())
    x, y, z = origin
    return (x + math.cos(angle) * dist, y + math.sin(angle) * dist, z)


class TimelineScheduler:
    """Runs many incidents at once, each on its own relative clock.

    Phases of one incident fire in order of their offsets (ties in phase
    order). Nothing is ordered across incidents. All mutation happens under
    one re-entrant lock, and each fire is taken off the queue under that
    lock, so a cancel that lands before a phase's fire boundary always wins.

    Listeners are called after the lock is released, one fire at a time.
    They may call back into the scheduler or into other locked collaborators.
    A listener that raises is logged and skipped.
    """

    def __init__(
        self,
        on_fire: Callable[[FiredPhase], None] | None = None,
        on_zone: Callable[[ZoneRequest], object] | None = None,
        on_end: Callable[[IncidentHandle], None] | None = None,
        seed: int | None = None,
        time_source: Callable[[], int] | None = None,
    ) -> None:
        self._fire_listeners: list[Callable[[FiredPhase], None]] = []
        self._zone_listeners: list[Callable[[ZoneRequest], object]] = []
        self._end_listeners: list[Callable[[IncidentHandle], None]] = []
        if on_fire is not None:
            self._fire_listeners.append(on_fire)
        if on_zone is not None:
            self._zone_listeners.append(on_zone)
        if on_end is not None:
            self._end_listeners.append(on_end)

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._rng = _random_mod.Random(seed)
        self._now = time_source or _monotonic_ms
        self._ids = itertools.count(1)
        self._incidents: dict[str, Incident] = {}
        self._handles: dict[str, IncidentHandle] = {}
        self._lock = threading.RLock()
        # Serializes advance() so one incident's fires are delivered in order.
        self._drive_lock = threading.RLock()

    # --- Listeners ---

    def on_fire(self, listener: Callable[[FiredPhase], None]) -> None:
        self._fire_listeners.append(listener)

    def on_zone(self, listener: Callable[[ZoneRequest], object]) -> None:
        self._zone_listeners.append(listener)

    def on_end(self, listener: Callable[[IncidentHandle], None]) -> None:
        self._end_listeners.append(listener)

    # --- Lifecycle ---

    def start(
        self,
        phases: Iterable[ResolvedPhase],
        origin: Point,
        profile_key: str | None = None,
        rng: _random_mod.Random | None = None,
        now_ms: int | None = None,
        cleanup_item: str | None = None,
    ) -> IncidentHandle:
        """Schedule a resolved phase list. An empty list completes at once."""
        with self._lock:
            started = self._now() if now_ms is None else now_ms
            if rng is None:
                rng = _random_mod.Random(self._rng.getrandbits(64))
            incident = Incident(
                incident_id=f"incident-{next(self._ids)}",
                profile_key=profile_key,
                origin=origin,
                started_at_ms=started,
                phases=tuple(phases),
                rng=rng,
                cleanup_item=cleanup_item,
            )
            for phase in incident.phases:
                self._push(incident, phase.delay, phase, origin, None)

            handle = IncidentHandle(
                incident_id=incident.incident_id,
                profile_key=profile_key,
                started_at_ms=started,
                _incident=incident,
            )
            if incident.pending:
                self._incidents[incident.incident_id] = incident
                self._handles[incident.incident_id] = handle
            else:
                incident.state = IncidentState.COMPLETED

        if incident.state is IncidentState.COMPLETED:
            logger.info("Incident {} has no phases, completed", incident.incident_id)
            self._notify_end(handle)
        else:
            logger.info(
                "Incident {} scheduled ({} phases, profile {})",
                incident.incident_id,
                len(incident.phases),
                profile_key,
            )
        return handle

    def cancel(self, handle: IncidentHandle | str) -> bool:
        """Suppress every phase that has not fired yet.

        Returns False for unknown or already finished incidents. Zones that
        were already created stay in the registry.
        """
        incident_id = handle if isinstance(handle, str) else handle.incident_id
        with self._lock:
            incident = self._incidents.pop(incident_id, None)
            if incident is None:
                return False
            ended = self._handles.pop(incident_id)
            incident.state = IncidentState.CANCELLED
            suppressed = len(incident.pending)
            incident.pending.clear()
        logger.info(
            "Incident {} cancelled, {} pending fires suppressed", incident_id, suppressed
        )
        self._notify_end(ended)
        return True

    def clear(self) -> None:
        """Drop every running incident without firing anything (restart)."""
        with self._lock:
            for incident in self._incidents.values():
                incident.state = IncidentState.CANCELLED
                incident.pending.clear()
            self._incidents.clear()
            self._handles.clear()

    # --- Queries ---

    def get(self, incident_id: str) -> IncidentHandle:
        """Handle of a running incident. Raises IncidentNotFound."""
        with self._lock:
            try:
                return self._handles[incident_id]
            except KeyError:
                raise IncidentNotFound(incident_id) from None

    def state(self, handle: IncidentHandle | str) -> IncidentState:
        """State of an incident. Finished incidents are only known by handle."""
        if isinstance(handle, IncidentHandle):
            return handle.state
        return self.get(handle).state

    def is_active(self, incident_id: str) -> bool:
        with self._lock:
            return incident_id in self._incidents

    def active_incidents(self) -> list[IncidentHandle]:
        with self._lock:
            return list(self._handles.values())

    def pending_count(self, incident_id: str) -> int:
        """Fires still queued for an incident, including chain sub-events."""
        with self._lock:
            incident = self._incidents.get(incident_id)
            if incident is None:
                raise IncidentNotFound(incident_id)
            return len(incident.pending)

    # --- Driving (called by the timeline system) ---

    def advance(self, now_ms: int) -> int:
        """Fire everything due at ``now_ms``. Returns the number of fires."""
        fired = 0
        with self._drive_lock:
            with self._lock:
                incident_ids = list(self._incidents)
            for incident_id in incident_ids:
                while True:
                    with self._lock:
                        event, ended = self._next_due(incident_id, now_ms)
                    if event is None:
                        break
                    self._deliver(event)
                    fired += 1
                    if ended is not None:
                        self._notify_end(ended)
                        break
        return fired

    def _next_due(
        self, incident_id: str, now_ms: int
    ) -> tuple[FiredPhase | None, IncidentHandle | None]:
        """Take the next due fire off an incident's queue. Caller holds the lock.

        The second item is the incident's handle when that fire was its last.
        """
        incident = self._incidents.get(incident_id)
        if incident is None:
            return None, None
        if not incident.pending or incident.pending[0][0] > now_ms - incident.started_at_ms:
            return None, None

        offset, _, phase, epicenter, sub_index = heapq.heappop(incident.pending)
        incident.state = IncidentState.RUNNING
        incident.fired += 1
        if sub_index is None and phase.kind is PhaseKind.CHAIN:
            self._expand_chain(incident, phase)
        event = self._build_fire(incident, phase, offset, epicenter, sub_index, now_ms)

        ended = None
        if not incident.pending:
            incident.state = IncidentState.COMPLETED
            del self._incidents[incident_id]
            ended = self._handles.pop(incident_id)
            logger.info("Incident {} completed after {} fires", incident_id, incident.fired)
        return event, ended

    def _push(
        self,
        incident: Incident,
        offset: int,
        phase: ResolvedPhase,
        epicenter: Point,
        sub_index: int | None,
    ) -> None:
        heapq.heappush(
            incident.pending, (offset, incident.next_seq, phase, epicenter, sub_index)
        )
        incident.next_seq += 1

    def _expand_chain(self, incident: Incident, phase: ResolvedPhase) -> None:
        """Queue a random burst of sub-events inside the phase's window."""
        chain = phase.chain
        if chain is None:
            return
        rng = incident.rng
        lo, hi = sorted(chain.count)
        count = rng.randint(max(lo, 0), max(hi, 0))
        ilo, ihi = sorted(chain.interval)
        clock = phase.delay
        for i in range(count):
            clock = min(clock + rng.randint(ilo, ihi), phase.delay_end)
            epicenter = random_point_in_radius(incident.origin, chain.radius, rng)
            self._push(incident, clock, phase, epicenter, i)
        logger.debug(
            "Incident {} phase {} expanded into {} sub-events",
            incident.incident_id,
            phase.name,
            count,
        )

    def _build_fire(
        self,
        incident: Incident,
        phase: ResolvedPhase,
        offset: int,
        epicenter: Point,
        sub_index: int | None,
        now_ms: int,
    ) -> FiredPhase:
        damage = None
        if phase.damage > 0 and phase.radius > 0:
            damage = DamageDescriptor(
                center=epicenter,
                radius=phase.radius,
                amount=phase.damage,
                knockback_force=phase.knockback_force,
                launch_force=phase.launch_force,
                ignite=not phase.suppress_fire,
            )
        zone = None
        if phase.hazard is not None and sub_index is None:
            zone = ZoneRequest(
                incident_id=incident.incident_id,
                phase_name=phase.name,
                center=epicenter,
                zone=phase.hazard,
                cleanup_item=incident.cleanup_item,
            )
        return FiredPhase(
            incident_id=incident.incident_id,
            phase_name=phase.name,
            offset_ms=offset,
            fired_at_ms=now_ms,
            epicenter=epicenter,
            explosion_type=phase.explosion_type,
            radius=phase.radius,
            camera_shake=phase.camera_shake,
            sound=phase.sound,
            effects=phase.effects,
            damage=damage,
            zone=zone,
            sub_index=sub_index,
        )

    def _deliver(self, fired: FiredPhase) -> None:
        """Hand a fire to the zone listeners first, then the fire listeners."""
        logger.debug(
            "Incident {} fired {} at +{}ms", fired.incident_id, fired.phase_name, fired.offset_ms
        )
        if fired.zone is not None:
            for listener in self._zone_listeners:
                try:
                    listener(fired.zone)
                except Exception:
                    logger.exception("Zone listener failed for {}", fired.zone.zone_id)
        for listener in self._fire_listeners:
            try:
                listener(fired)
            except Exception:
                logger.exception(
                    "Fire listener failed for incident {} phase {}",
                    fired.incident_id,
                    fired.phase_name,
                )

    def _notify_end(self, handle: IncidentHandle) -> None:
        for listener in self._end_listeners:
            try:
                listener(handle)
            except Exception:
                logger.exception("End listener failed for incident {}", handle.incident_id)
