"""Hazard profile and phase template definitions. Immutable, never serialized."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from tick_hazard.types import Fixed, Num, NumRange


class PhaseKind(Enum):
    PLAIN = "plain"
    ALWAYS_FIRE = "always_fire"  # bypasses the min_fill_level gate
    CHAIN = "chain"  # spawns a randomized burst of sub-events


class Priority(Enum):
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class EffectTemplate:
    """A presentation-layer effect (particles, sound, screen effect, decal)."""

    kind: str  # ptfx, shockwave, fire_zone, screen_effect, sound, decal
    name: str | None = None
    asset: str | None = None
    scale: Num = Fixed(1.0)
    radius: Num | None = None
    duration_ms: Num | None = None  # -1 for looped until cleanup
    looped: bool = False
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HazardZoneTemplate:
    """Zone spawned when the owning phase fires."""

    hazard_type: str
    radius: Num
    dot: Num  # damage per second, outer band
    interval_ms: int = 1000
    duration_s: Num = Fixed(-1)  # -1 persists until cleanup or restart
    inner_radius: Num | None = None
    inner_dot: Num | None = None
    vehicle_damage: Num | None = None  # vehicle body damage per second
    grip_reduction: float = 0.0
    tire_damage_after_s: float | None = None
    geiger_intensity: float = 0.0
    geiger_approach_radius: float | None = None
    fire_points: Num | None = None

    def __post_init__(self) -> None:
        if not self.hazard_type:
            raise ValueError("HazardZoneTemplate hazard_type must be non-empty")
        if self.interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {self.interval_ms}")
        if not 0.0 <= self.grip_reduction <= 1.0:
            raise ValueError(
                f"grip_reduction must be in [0, 1], got {self.grip_reduction}"
            )


@dataclass(frozen=True)
class ChainTemplate:
    count: NumRange  # (min, max) sub-events, integer
    interval: NumRange  # (min, max) ms between sub-events
    radius: Num  # max distance of a sub-event epicenter from the origin


@dataclass(frozen=True)
class PhaseTemplate:
    name: str
    delay: int  # ms from incident start
    kind: PhaseKind = PhaseKind.PLAIN
    delay_end: int | None = None  # end of the chain window
    explosion_type: int | None = None
    radius: Num = Fixed(0.0)
    damage: Num = Fixed(0.0)
    camera_shake: Num = Fixed(0.0)
    knockback_force: Num | None = None
    launch_force: Num | None = None
    suppress_fire: bool = False
    sound: str | None = None
    effects: tuple[EffectTemplate, ...] = ()
    hazard: HazardZoneTemplate | None = None
    chain: ChainTemplate | None = None
    min_fill_level: float = 0.0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("PhaseTemplate name must be non-empty")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")
        if self.delay_end is not None and self.delay_end < self.delay:
            raise ValueError(
                f"delay_end ({self.delay_end}) must be >= delay ({self.delay})"
            )
        if self.kind is PhaseKind.CHAIN and self.chain is None:
            raise ValueError(f"Chain phase {self.name!r} needs a ChainTemplate")
        if self.kind is not PhaseKind.CHAIN and self.chain is not None:
            raise ValueError(f"Phase {self.name!r} has a chain but kind {self.kind.value}")

    @property
    def window_end(self) -> int:
        return self.delay if self.delay_end is None else self.delay_end


@dataclass(frozen=True)
class HazardProfile:
    key: str
    label: str
    phases: tuple[PhaseTemplate, ...]
    description: str = ""
    scalable: bool = False
    smoke_column: bool = False
    smoke_duration_s: Num = Fixed(0)
    dispatch_alert: bool = False
    dispatch_priority: Priority = Priority.HIGH
    hazmat_class: int | None = None
    cleanup_item: str | None = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("HazardProfile key must be non-empty")
        names = [p.name for p in self.phases]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate phase names in profile {self.key!r}")

    def phase(self, name: str) -> PhaseTemplate:
        """Look up a phase template. Raises KeyError if absent."""
        for p in self.phases:
            if p.name == name:
                return p
        raise KeyError(name)
