"""Tests for tick_hazard.scaler — resolving phase templates."""
from __future__ import annotations

import dataclasses
import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tick_hazard.builtin import FUEL_TANKER_FULL, FUEL_TANKER_PARTIAL, HAZMAT_CLASS7
from tick_hazard.profiles import (
    ChainTemplate,
    HazardProfile,
    HazardZoneTemplate,
    PhaseKind,
    PhaseTemplate,
)
from tick_hazard.scaler import (
    effective_scale,
    resolve,
    resolve_smoke_duration,
    scale_value,
)
from tick_hazard.types import Fixed, InvalidFillLevel, Scalable


def _two_phase_profile() -> HazardProfile:
    return HazardProfile(
        key="two_phase",
        label="Two phase",
        scalable=True,
        phases=(
            PhaseTemplate(name="first", delay=0, radius=Scalable(5.0)),
            PhaseTemplate(name="second", delay=2000, radius=Scalable(15.0)),
        ),
    )


def _numbers(value: object, prefix: str = "") -> dict[str, float]:
    """Flatten every numeric leaf of a resolved structure."""
    out: dict[str, float] = {}
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return out
    if isinstance(value, (int, float)):
        out[prefix] = float(value)
    elif isinstance(value, dict):
        for k, v in value.items():
            out.update(_numbers(v, f"{prefix}.{k}"))
    elif isinstance(value, (list, tuple)):
        for i, v in enumerate(value):
            out.update(_numbers(v, f"{prefix}[{i}]"))
    return out


def _flatten(phases) -> dict[str, dict[str, float]]:
    return {p.name: _numbers(dataclasses.asdict(p)) for p in phases}


class TestScaleValue:
    def test_fixed_ignores_scale(self) -> None:
        assert scale_value(Fixed(7.5), 0.2) == 7.5

    def test_scalable_multiplies(self) -> None:
        assert scale_value(Scalable(20.0), 0.5) == 10.0

    def test_integer_floors(self) -> None:
        assert scale_value(Scalable(6, integer=True), 0.5) == 3
        assert scale_value(Scalable(3, integer=True), 0.5) == 1

    def test_integer_floor_is_not_fooled_by_float_error(self) -> None:
        assert scale_value(Scalable(100, integer=True), 0.29) == 29

    def test_effective_scale_floor(self) -> None:
        assert effective_scale(0.0) == 0.1
        assert effective_scale(0.05) == 0.1
        assert effective_scale(0.5) == 0.5
        assert effective_scale(1.5) == 1.0

    def test_nan_fill_level_rejected(self) -> None:
        with pytest.raises(InvalidFillLevel):
            effective_scale(float("nan"))
        with pytest.raises(InvalidFillLevel):
            resolve(FUEL_TANKER_PARTIAL, float("nan"))

    def test_nan_ignored_by_fixed_profiles(self) -> None:
        assert resolve(HAZMAT_CLASS7, float("nan")) == resolve(HAZMAT_CLASS7, 1.0)


class TestResolve:
    def test_concrete_two_phase_scenario(self) -> None:
        phases = resolve(_two_phase_profile(), 0.5)
        assert [p.name for p in phases] == ["first", "second"]
        assert [p.radius for p in phases] == [2.5, 7.5]
        assert [p.delay for p in phases] == [0, 2000]

    def test_non_scalable_copies_through(self) -> None:
        low = resolve(HAZMAT_CLASS7, 0.0)
        high = resolve(HAZMAT_CLASS7, 1.0)
        assert low == high
        assert [p.name for p in low] == [
            "containment_failure",
            "initial_radiation",
            "full_radiation",
        ]

    def test_non_scalable_ignores_gates(self) -> None:
        profile = HazardProfile(
            key="gated",
            label="Gated",
            scalable=False,
            phases=(PhaseTemplate(name="only", delay=0, min_fill_level=0.9),),
        )
        assert len(resolve(profile, 0.1)) == 1

    def test_gating_at_thirty_percent(self) -> None:
        names_low = {p.name for p in resolve(FUEL_TANKER_PARTIAL, 0.25)}
        names_high = {p.name for p in resolve(FUEL_TANKER_PARTIAL, 0.35)}
        assert "pressure_wave" not in names_low
        assert "pressure_wave" in names_high

    def test_always_fire_bypasses_gate(self) -> None:
        profile = HazardProfile(
            key="p",
            label="P",
            scalable=True,
            phases=(
                PhaseTemplate(
                    name="always", delay=0, kind=PhaseKind.ALWAYS_FIRE, min_fill_level=0.9
                ),
                PhaseTemplate(name="gated", delay=0, min_fill_level=0.9),
            ),
        )
        assert [p.name for p in resolve(profile, 0.2)] == ["always"]

    def test_near_empty_partial_keeps_only_always_fire(self) -> None:
        names = [p.name for p in resolve(FUEL_TANKER_PARTIAL, 0.05)]
        assert names == ["initial_ignition", "tank_rupture"]

    def test_chain_count_range_is_floored(self) -> None:
        phases = {p.name: p for p in resolve(FUEL_TANKER_PARTIAL, 0.5)}
        chain = phases["secondary_ignitions"].chain
        assert chain is not None
        assert chain.count == (1, 3)
        assert chain.interval == (1500, 3000)
        assert chain.radius == 10.0

    def test_zone_duration_scales_and_persistent_stays_persistent(self) -> None:
        phases = {p.name: p for p in resolve(FUEL_TANKER_PARTIAL, 0.5)}
        fire = phases["fire_column"].hazard
        assert fire is not None
        assert fire.duration_s == 90.0
        assert fire.fire_points == 6
        assert not fire.persistent

        profile = HazardProfile(
            key="p",
            label="P",
            scalable=True,
            phases=(
                PhaseTemplate(
                    name="cloud",
                    delay=0,
                    hazard=HazardZoneTemplate(
                        hazard_type="toxic_cloud", radius=Scalable(10.0), dot=Fixed(5)
                    ),
                ),
            ),
        )
        (cloud,) = resolve(profile, 0.5)
        assert cloud.hazard is not None
        assert cloud.hazard.persistent
        assert cloud.hazard.radius == 5.0

    def test_full_profile_values_are_fixed(self) -> None:
        (first, *_rest) = resolve(FUEL_TANKER_FULL, 1.0)
        assert first.radius == 5.0
        assert first.damage == 200

    def test_deterministic(self) -> None:
        assert resolve(FUEL_TANKER_PARTIAL, 0.42) == resolve(FUEL_TANKER_PARTIAL, 0.42)

    def test_delay_end_defaults_to_delay(self) -> None:
        (phase,) = resolve(
            HazardProfile(key="p", label="P", phases=(PhaseTemplate(name="a", delay=300),)),
            1.0,
        )
        assert phase.delay_end == 300


class TestSmokeDuration:
    def test_partial_scales(self) -> None:
        assert resolve_smoke_duration(FUEL_TANKER_PARTIAL, 0.5) == 300.0

    def test_full_fixed(self) -> None:
        assert resolve_smoke_duration(FUEL_TANKER_FULL, 0.5) == 600.0

    def test_no_smoke_column(self) -> None:
        assert resolve_smoke_duration(HAZMAT_CLASS7, 1.0) == 0.0


class TestScalingProperties:
    @settings(max_examples=200, deadline=None)
    @given(
        f1=st.floats(min_value=0.1, max_value=1.0),
        f2=st.floats(min_value=0.1, max_value=1.0),
    )
    def test_monotonic_in_fill_level(self, f1: float, f2: float) -> None:
        lo, hi = sorted((f1, f2))
        low = _flatten(resolve(FUEL_TANKER_PARTIAL, lo))
        high = _flatten(resolve(FUEL_TANKER_PARTIAL, hi))
        assert set(low) <= set(high)
        for name, fields in low.items():
            for key, value in fields.items():
                assert value <= high[name][key], (name, key)

    @settings(max_examples=100, deadline=None)
    @given(f=st.floats(min_value=0.0, max_value=0.1))
    def test_floor_clamps_everything(self, f: float) -> None:
        assert resolve(FUEL_TANKER_PARTIAL, f) == resolve(FUEL_TANKER_PARTIAL, 0.1)

    @given(f=st.floats(min_value=0.0, max_value=1.0))
    def test_scaled_radii_never_zero(self, f: float) -> None:
        for phase in resolve(FUEL_TANKER_PARTIAL, f):
            assert phase.radius > 0
            assert not math.isnan(phase.radius)


def test_chain_template_round_trip_through_resolve() -> None:
    profile = HazardProfile(
        key="c",
        label="C",
        phases=(
            PhaseTemplate(
                name="burst",
                delay=5000,
                delay_end=15000,
                kind=PhaseKind.CHAIN,
                chain=ChainTemplate(
                    count=(Fixed(3), Fixed(6)),
                    interval=(Fixed(1500), Fixed(3000)),
                    radius=Fixed(20.0),
                ),
            ),
        ),
    )
    (burst,) = resolve(profile, 1.0)
    assert burst.chain is not None
    assert burst.chain.count == (3, 6)
    assert burst.delay_end == 15000
