"""Phase scaling - turns phase templates into concrete, per-incident phases."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from tick_hazard.profiles import (
    ChainTemplate,
    EffectTemplate,
    HazardProfile,
    HazardZoneTemplate,
    PhaseKind,
    PhaseTemplate,
)
from tick_hazard.types import Fixed, InvalidFillLevel, Num, NumRange, Scalable

MIN_SCALE = 0.1


@dataclass(frozen=True)
class ResolvedEffect:
    kind: str
    name: str | None
    asset: str | None
    scale: float
    radius: float | None
    duration_ms: float | None
    looped: bool
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedHazardZone:
    hazard_type: str
    radius: float
    dot: float
    interval_ms: int
    duration_s: float  # -1 persists until cleanup or restart
    inner_radius: float | None
    inner_dot: float | None
    vehicle_damage: float
    grip_reduction: float
    tire_damage_after_s: float | None
    geiger_intensity: float
    geiger_approach_radius: float | None
    fire_points: int

    @property
    def persistent(self) -> bool:
        return self.duration_s < 0


@dataclass(frozen=True)
class ResolvedChain:
    count: tuple[int, int]
    interval: tuple[int, int]
    radius: float


@dataclass(frozen=True)
class ResolvedPhase:
    name: str
    delay: int
    delay_end: int
    kind: PhaseKind
    explosion_type: int | None
    radius: float
    damage: float
    camera_shake: float
    knockback_force: float | None
    launch_force: float | None
    suppress_fire: bool
    sound: str | None
    effects: tuple[ResolvedEffect, ...]
    hazard: ResolvedHazardZone | None
    chain: ResolvedChain | None


def effective_scale(fill_level: float, min_scale: float = MIN_SCALE) -> float:
    """Scale factor for a fill level, clamped to [min_scale, 1].

    Raises InvalidFillLevel for NaN.
    """
    if math.isnan(fill_level):
        raise InvalidFillLevel("fill level is NaN")
    return max(min(fill_level, 1.0), min_scale)


def scale_value(num: Num, scale: float) -> float:
    if isinstance(num, Fixed):
        return num.value
    value = num.base * scale
    if num.integer:
        # 0.29 * 100 is 28.999999999999996; round before flooring.
        return float(math.floor(round(value, 9)))
    return value


def _opt(num: Num | None, scale: float) -> float | None:
    return None if num is None else scale_value(num, scale)


def _range(pair: NumRange, scale: float) -> tuple[int, int]:
    lo, hi = pair
    return int(scale_value(lo, scale)), int(scale_value(hi, scale))


def _resolve_effect(effect: EffectTemplate, scale: float) -> ResolvedEffect:
    return ResolvedEffect(
        kind=effect.kind,
        name=effect.name,
        asset=effect.asset,
        scale=scale_value(effect.scale, scale),
        radius=_opt(effect.radius, scale),
        duration_ms=_opt(effect.duration_ms, scale),
        looped=effect.looped,
        params=dict(effect.params),
    )


def _resolve_zone(zone: HazardZoneTemplate, scale: float) -> ResolvedHazardZone:
    duration = zone.duration_s
    # A persistent zone stays persistent whatever the fill level.
    if isinstance(duration, Fixed) and duration.value < 0:
        duration_s = -1.0
    else:
        duration_s = scale_value(duration, scale)
    fire_points = _opt(zone.fire_points, scale)
    return ResolvedHazardZone(
        hazard_type=zone.hazard_type,
        radius=scale_value(zone.radius, scale),
        dot=scale_value(zone.dot, scale),
        interval_ms=zone.interval_ms,
        duration_s=duration_s,
        inner_radius=_opt(zone.inner_radius, scale),
        inner_dot=_opt(zone.inner_dot, scale),
        vehicle_damage=_opt(zone.vehicle_damage, scale) or 0.0,
        grip_reduction=zone.grip_reduction,
        tire_damage_after_s=zone.tire_damage_after_s,
        geiger_intensity=zone.geiger_intensity,
        geiger_approach_radius=zone.geiger_approach_radius,
        fire_points=int(fire_points or 0),
    )


def _resolve_chain(chain: ChainTemplate, scale: float) -> ResolvedChain:
    return ResolvedChain(
        count=_range(chain.count, scale),
        interval=_range(chain.interval, scale),
        radius=scale_value(chain.radius, scale),
    )


def resolve_phase(phase: PhaseTemplate, scale: float) -> ResolvedPhase:
    """Resolve a single template at a fixed scale factor."""
    return ResolvedPhase(
        name=phase.name,
        delay=phase.delay,
        delay_end=phase.window_end,
        kind=phase.kind,
        explosion_type=phase.explosion_type,
        radius=scale_value(phase.radius, scale),
        damage=scale_value(phase.damage, scale),
        camera_shake=scale_value(phase.camera_shake, scale),
        knockback_force=_opt(phase.knockback_force, scale),
        launch_force=_opt(phase.launch_force, scale),
        suppress_fire=phase.suppress_fire,
        sound=phase.sound,
        effects=tuple(_resolve_effect(e, scale) for e in phase.effects),
        hazard=None if phase.hazard is None else _resolve_zone(phase.hazard, scale),
        chain=None if phase.chain is None else _resolve_chain(phase.chain, scale),
    )


def resolve(
    profile: HazardProfile, fill_level: float, min_scale: float = MIN_SCALE
) -> tuple[ResolvedPhase, ...]:
    """Resolve every phase of a profile for one incident.

    Non-scalable profiles ignore the fill level and the gates. For scalable
    profiles, ``min_fill_level`` is compared against the effective scale, so
    any fill below ``min_scale`` behaves exactly like ``min_scale``.
    """
    if not profile.scalable:
        return tuple(resolve_phase(p, 1.0) for p in profile.phases)

    scale = effective_scale(fill_level, min_scale)
    resolved: list[ResolvedPhase] = []
    for phase in profile.phases:
        if phase.kind is not PhaseKind.ALWAYS_FIRE and scale < phase.min_fill_level:
            continue
        resolved.append(resolve_phase(phase, scale))
    return tuple(resolved)


def resolve_smoke_duration(
    profile: HazardProfile, fill_level: float, min_scale: float = MIN_SCALE
) -> float:
    """Smoke column lifetime in seconds, 0 when the profile has none."""
    if not profile.smoke_column:
        return 0.0
    scale = effective_scale(fill_level, min_scale) if profile.scalable else 1.0
    return scale_value(profile.smoke_duration_s, scale)
