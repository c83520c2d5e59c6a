"""Descriptors emitted to rendering, damage and dispatch collaborators."""
from __future__ import annotations

from dataclasses import dataclass

from tick_hazard.profiles import Priority
from tick_hazard.scaler import ResolvedEffect, ResolvedHazardZone
from tick_hazard.types import Point


@dataclass(frozen=True)
class DamageDescriptor:
    """One-time blast damage around a point."""

    center: Point
    radius: float
    amount: float
    knockback_force: float | None = None
    launch_force: float | None = None
    ignite: bool = True


@dataclass(frozen=True)
class ZoneRequest:
    """Asks the zone registry to create a hazard zone."""

    incident_id: str
    phase_name: str
    center: Point
    zone: ResolvedHazardZone
    cleanup_item: str | None = None

    @property
    def zone_id(self) -> str:
        return f"{self.incident_id}:{self.phase_name}"


@dataclass(frozen=True)
class FiredPhase:
    """Everything one phase (or chain sub-event) produced when it fired."""

    incident_id: str
    phase_name: str
    offset_ms: int  # scheduled offset from incident start
    fired_at_ms: int  # clock time the scheduler observed
    epicenter: Point
    explosion_type: int | None
    radius: float  # blast radius, reported even when the phase deals no damage
    camera_shake: float
    sound: str | None
    effects: tuple[ResolvedEffect, ...]
    damage: DamageDescriptor | None = None
    zone: ZoneRequest | None = None
    sub_index: int | None = None  # set for chain sub-events


@dataclass(frozen=True)
class DispatchAlert:
    incident_id: str
    profile_key: str
    label: str
    priority: Priority
    origin: Point
    hazmat_class: int | None = None


@dataclass(frozen=True)
class IncidentStarted:
    incident_id: str
    profile_key: str
    label: str
    origin: Point
    fill_level: float
    smoke_column_s: float  # 0 when the profile has no smoke column
    dispatch: DispatchAlert | None = None


@dataclass(frozen=True)
class DotTick:
    """Damage-over-time applied to one occupant of a zone on one tick."""

    zone_id: str
    hazard_type: str
    entity_id: int
    amount: float
    inner: bool
    vehicle_damage: float = 0.0
    grip_reduction: float = 0.0
    tire_popped: bool = False
