"""Hazard incident timelines and hazard zones for the tick engine."""
from tick_hazard.catalog import ProfileCatalog, default_catalog
from tick_hazard.clock import Clock
from tick_hazard.config import HazardConfig
from tick_hazard.coordinator import FlammableVehicle, IncidentCoordinator
from tick_hazard.engine import HazardEngine
from tick_hazard.events import (
    DamageDescriptor,
    DispatchAlert,
    DotTick,
    FiredPhase,
    IncidentStarted,
    ZoneRequest,
)
from tick_hazard.profiles import (
    ChainTemplate,
    EffectTemplate,
    HazardProfile,
    HazardZoneTemplate,
    PhaseKind,
    PhaseTemplate,
    Priority,
)
from tick_hazard.scaler import ResolvedPhase, resolve
from tick_hazard.scheduler import IncidentHandle, IncidentState, TimelineScheduler
from tick_hazard.selector import ProfileSelector, Selection
from tick_hazard.systems import make_timeline_system, make_zone_system
from tick_hazard.types import (
    Fixed,
    IncidentNotFound,
    InvalidFillLevel,
    ProfileNotFound,
    Scalable,
    TickContext,
    ZoneNotFound,
)
from tick_hazard.zones import HazardZoneRegistry, ZoneSnapshot

__all__ = [
    "HazardProfile",
    "PhaseTemplate",
    "PhaseKind",
    "Priority",
    "EffectTemplate",
    "HazardZoneTemplate",
    "ChainTemplate",
    "Fixed",
    "Scalable",
    "ProfileCatalog",
    "default_catalog",
    "HazardConfig",
    "ProfileSelector",
    "Selection",
    "ResolvedPhase",
    "resolve",
    "TimelineScheduler",
    "IncidentHandle",
    "IncidentState",
    "HazardZoneRegistry",
    "ZoneSnapshot",
    "IncidentCoordinator",
    "FlammableVehicle",
    "HazardEngine",
    "Clock",
    "TickContext",
    "make_timeline_system",
    "make_zone_system",
    "FiredPhase",
    "DamageDescriptor",
    "ZoneRequest",
    "DotTick",
    "DispatchAlert",
    "IncidentStarted",
    "ProfileNotFound",
    "ZoneNotFound",
    "IncidentNotFound",
    "InvalidFillLevel",
]
