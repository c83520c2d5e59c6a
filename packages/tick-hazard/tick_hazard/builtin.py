"""Built-in hazard profiles for tanker and hazmat cargo."""
from __future__ import annotations

from tick_hazard.profiles import (
    ChainTemplate,
    EffectTemplate,
    HazardProfile,
    HazardZoneTemplate,
    PhaseKind,
    PhaseTemplate,
    Priority,
)
from tick_hazard.types import Fixed, Scalable


def _ptfx(name: str, scale: float, **kwargs) -> EffectTemplate:
    return EffectTemplate(kind="ptfx", asset="core", name=name, scale=Fixed(scale), **kwargs)


# Fuel tanker, full load. Five phases, fixed values.
FUEL_TANKER_FULL = HazardProfile(
    key="fuel_tanker_full",
    label="Fuel Tanker Explosion (Full)",
    description="Catastrophic multi-phase detonation of a fully loaded fuel tanker",
    scalable=True,
    smoke_column=True,
    smoke_duration_s=Fixed(600),
    dispatch_alert=True,
    dispatch_priority=Priority.CRITICAL,
    phases=(
        PhaseTemplate(
            name="initial_ignition",
            delay=0,
            explosion_type=7,
            radius=Fixed(5.0),
            damage=Fixed(200),
            camera_shake=Fixed(0.3),
            sound="EXPLOSION_STD",
            effects=(_ptfx("exp_grd_grenade_smoke", 2.0),),
        ),
        PhaseTemplate(
            name="tank_rupture",
            delay=2000,
            explosion_type=11,
            radius=Fixed(15.0),
            damage=Fixed(500),
            camera_shake=Fixed(0.8),
            launch_force=Fixed(25.0),
            sound="EXPLOSION_TANKER",
            effects=(
                _ptfx("exp_grd_vehicle_lrg", 3.0),
                _ptfx("exp_grd_flare", 2.5),
            ),
        ),
        PhaseTemplate(
            name="pressure_wave",
            delay=3000,
            explosion_type=82,
            radius=Fixed(25.0),
            damage=Fixed(100),
            camera_shake=Fixed(1.0),
            knockback_force=Fixed(15.0),
            suppress_fire=True,
            sound="EXPLOSION_LARGE",
            effects=(
                _ptfx("exp_grd_bzgas_smoke", 4.0),
                EffectTemplate(
                    kind="shockwave",
                    radius=Fixed(30.0),
                    duration_ms=Fixed(500),
                    params={"distortion": 0.8},
                ),
            ),
        ),
        PhaseTemplate(
            name="fire_column",
            delay=4000,
            explosion_type=5,
            radius=Fixed(20.0),
            damage=Fixed(50),
            camera_shake=Fixed(0.2),
            sound="EXPLOSION_FIRE",
            effects=(
                _ptfx("exp_grd_flare", 5.0, looped=True, duration_ms=Fixed(180000)),
                EffectTemplate(kind="fire_zone", radius=Fixed(20.0), duration_ms=Fixed(180000)),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="fire",
                radius=Fixed(20.0),
                dot=Fixed(5),
                duration_s=Fixed(180),
                inner_radius=Fixed(6.0),
                inner_dot=Fixed(10),
                fire_points=Fixed(12),
            ),
        ),
        PhaseTemplate(
            name="secondary_ignitions",
            delay=5000,
            delay_end=15000,
            kind=PhaseKind.CHAIN,
            explosion_type=2,
            radius=Fixed(8.0),
            damage=Fixed(150),
            camera_shake=Fixed(0.4),
            sound="EXPLOSION_STD",
            effects=(_ptfx("exp_grd_grenade_smoke", 1.5),),
            chain=ChainTemplate(
                count=(Fixed(3), Fixed(6)),
                interval=(Fixed(1500), Fixed(3000)),
                radius=Fixed(20.0),
            ),
        ),
    ),
)

# Fuel tanker, partial load. Same five phases, intensity follows fill level.
FUEL_TANKER_PARTIAL = HazardProfile(
    key="fuel_tanker_partial",
    label="Fuel Tanker Explosion (Partial)",
    description="Scaled explosion based on remaining fuel volume",
    scalable=True,
    smoke_column=True,
    smoke_duration_s=Scalable(600),
    dispatch_alert=True,
    dispatch_priority=Priority.HIGH,
    phases=(
        PhaseTemplate(
            name="initial_ignition",
            delay=0,
            kind=PhaseKind.ALWAYS_FIRE,
            explosion_type=7,
            radius=Scalable(5.0),
            damage=Scalable(200),
            camera_shake=Fixed(0.3),
            effects=(_ptfx("exp_grd_grenade_smoke", 2.0),),
        ),
        PhaseTemplate(
            name="tank_rupture",
            delay=2000,
            kind=PhaseKind.ALWAYS_FIRE,
            explosion_type=11,
            radius=Scalable(15.0),
            damage=Scalable(500),
            camera_shake=Fixed(0.8),
            launch_force=Scalable(25.0),
            effects=(_ptfx("exp_grd_vehicle_lrg", 3.0),),
        ),
        PhaseTemplate(
            name="pressure_wave",
            delay=3000,
            explosion_type=82,
            radius=Scalable(25.0),
            damage=Scalable(100),
            camera_shake=Fixed(1.0),
            knockback_force=Scalable(15.0),
            suppress_fire=True,
            min_fill_level=0.30,
            effects=(
                EffectTemplate(
                    kind="shockwave",
                    radius=Scalable(30.0),
                    duration_ms=Fixed(500),
                    params={"distortion": 0.8},
                ),
            ),
        ),
        PhaseTemplate(
            name="fire_column",
            delay=4000,
            explosion_type=5,
            radius=Scalable(20.0),
            damage=Scalable(50),
            min_fill_level=0.20,
            effects=(
                EffectTemplate(
                    kind="fire_zone",
                    radius=Scalable(20.0),
                    duration_ms=Scalable(180000),
                ),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="fire",
                radius=Scalable(20.0),
                dot=Fixed(5),
                duration_s=Scalable(180),
                inner_radius=Scalable(6.0),
                inner_dot=Fixed(10),
                fire_points=Scalable(12, integer=True),
            ),
        ),
        PhaseTemplate(
            name="secondary_ignitions",
            delay=5000,
            delay_end=15000,
            kind=PhaseKind.CHAIN,
            explosion_type=2,
            radius=Scalable(8.0),
            damage=Scalable(150),
            min_fill_level=0.40,
            effects=(_ptfx("exp_grd_grenade_smoke", 1.5),),
            chain=ChainTemplate(
                count=(Scalable(3, integer=True), Scalable(6, integer=True)),
                interval=(Fixed(1500), Fixed(3000)),
                radius=Scalable(20.0),
            ),
        ),
    ),
)

# Class 3: flammable chemical, toxic smoke and sustained fire.
HAZMAT_CLASS3 = HazardProfile(
    key="hazmat_class3",
    label="Flammable Chemical Explosion (HAZMAT Class 3)",
    description="Chemical fire with toxic smoke cloud and sustained burning",
    smoke_column=True,
    smoke_duration_s=Fixed(300),
    dispatch_alert=True,
    dispatch_priority=Priority.CRITICAL,
    hazmat_class=3,
    phases=(
        PhaseTemplate(
            name="chemical_ignition",
            delay=0,
            explosion_type=7,
            radius=Fixed(6.0),
            damage=Fixed(250),
            camera_shake=Fixed(0.4),
            effects=(
                _ptfx("exp_grd_grenade_smoke", 2.5),
                _ptfx("exp_grd_flare", 2.0),
            ),
        ),
        PhaseTemplate(
            name="fire_spread",
            delay=1500,
            explosion_type=5,
            radius=Fixed(12.0),
            damage=Fixed(300),
            camera_shake=Fixed(0.6),
            effects=(_ptfx("exp_grd_vehicle_lrg", 2.0),),
        ),
        PhaseTemplate(
            name="toxic_smoke",
            delay=3000,
            radius=Fixed(18.0),
            camera_shake=Fixed(0.1),
            effects=(
                _ptfx("exp_grd_bzgas_smoke", 6.0, looped=True, duration_ms=Fixed(240000)),
                EffectTemplate(
                    kind="screen_effect",
                    name="DrugsMichaelAliensFight",
                    duration_ms=Fixed(240000),
                ),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="toxic_smoke",
                radius=Fixed(18.0),
                dot=Fixed(5),
                interval_ms=1000,
                duration_s=Fixed(240),
            ),
        ),
        PhaseTemplate(
            name="sustained_fire",
            delay=4000,
            explosion_type=5,
            radius=Fixed(15.0),
            damage=Fixed(30),
            effects=(
                EffectTemplate(kind="fire_zone", radius=Fixed(15.0), duration_ms=Fixed(240000)),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="fire",
                radius=Fixed(15.0),
                dot=Fixed(5),
                duration_s=Fixed(240),
                fire_points=Fixed(8),
            ),
        ),
        PhaseTemplate(
            name="secondary_reactions",
            delay=8000,
            delay_end=20000,
            kind=PhaseKind.CHAIN,
            explosion_type=4,
            radius=Fixed(6.0),
            damage=Fixed(100),
            effects=(_ptfx("exp_grd_flare", 1.0),),
            chain=ChainTemplate(
                count=(Fixed(2), Fixed(4)),
                interval=(Fixed(2000), Fixed(4000)),
                radius=Fixed(15.0),
            ),
        ),
    ),
)

# Class 6: toxic release. No fire, cloud persists until cleanup.
HAZMAT_CLASS6 = HazardProfile(
    key="hazmat_class6",
    label="Toxic Release (HAZMAT Class 6)",
    description="Persistent toxic cloud causing continuous health damage",
    dispatch_alert=True,
    dispatch_priority=Priority.CRITICAL,
    hazmat_class=6,
    cleanup_item="hazmat_cleanup_kit",
    phases=(
        PhaseTemplate(
            name="container_breach",
            delay=0,
            explosion_type=2,
            radius=Fixed(3.0),
            damage=Fixed(50),
            camera_shake=Fixed(0.2),
            effects=(_ptfx("exp_grd_grenade_smoke", 1.0),),
        ),
        PhaseTemplate(
            name="initial_release",
            delay=1000,
            radius=Fixed(10.0),
            effects=(
                _ptfx(
                    "exp_grd_bzgas_smoke",
                    3.0,
                    looped=True,
                    duration_ms=Fixed(30000),
                    params={"color": (120, 200, 50)},
                ),
                EffectTemplate(
                    kind="screen_effect",
                    name="DrugsMichaelAliensFight",
                    duration_ms=Fixed(30000),
                ),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="toxic_cloud",
                radius=Fixed(10.0),
                dot=Fixed(8),
                duration_s=Fixed(30),
            ),
        ),
        PhaseTemplate(
            name="full_cloud",
            delay=5000,
            radius=Fixed(25.0),
            effects=(
                _ptfx(
                    "exp_grd_bzgas_smoke",
                    8.0,
                    looped=True,
                    duration_ms=Fixed(-1),
                    params={"color": (100, 220, 40)},
                ),
                EffectTemplate(
                    kind="screen_effect",
                    name="DrugsMichaelAliensFight",
                    duration_ms=Fixed(-1),
                ),
                EffectTemplate(kind="sound", name="TOXIC_HISS", looped=True),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="toxic_cloud",
                radius=Fixed(25.0),
                dot=Fixed(10),
                duration_s=Fixed(-1),
                vehicle_damage=Fixed(2),
            ),
        ),
    ),
)

# Class 7: radiation field with an inner lethal core.
HAZMAT_CLASS7 = HazardProfile(
    key="hazmat_class7",
    label="Radiation Release (HAZMAT Class 7)",
    description="Invisible radiation field with Geiger counter detection and persistent DOT",
    dispatch_alert=True,
    dispatch_priority=Priority.CRITICAL,
    hazmat_class=7,
    cleanup_item="hazmat_cleanup_kit",
    phases=(
        PhaseTemplate(
            name="containment_failure",
            delay=0,
            explosion_type=2,
            radius=Fixed(2.0),
            damage=Fixed(25),
            camera_shake=Fixed(0.1),
            effects=(_ptfx("exp_grd_grenade_smoke", 0.5),),
        ),
        PhaseTemplate(
            name="initial_radiation",
            delay=2000,
            radius=Fixed(8.0),
            effects=(
                _ptfx(
                    "exp_grd_bzgas_smoke",
                    1.0,
                    looped=True,
                    duration_ms=Fixed(60000),
                    params={"color": (200, 200, 50), "opacity": 0.3},
                ),
                EffectTemplate(
                    kind="screen_effect",
                    name="DrugsMichaelAliensFightIn",
                    duration_ms=Fixed(-1),
                ),
                EffectTemplate(kind="sound", name="GEIGER_COUNTER", looped=True),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="radiation",
                radius=Fixed(8.0),
                dot=Fixed(15),
                duration_s=Fixed(60),
                geiger_intensity=0.8,
            ),
        ),
        PhaseTemplate(
            name="full_radiation",
            delay=60000,
            radius=Fixed(35.0),
            effects=(
                _ptfx(
                    "exp_grd_bzgas_smoke",
                    2.0,
                    looped=True,
                    duration_ms=Fixed(-1),
                    params={"color": (180, 180, 40), "opacity": 0.15},
                ),
                EffectTemplate(
                    kind="screen_effect",
                    name="DrugsMichaelAliensFightIn",
                    duration_ms=Fixed(-1),
                    params={"intensity": 0.5},
                ),
                EffectTemplate(kind="sound", name="GEIGER_COUNTER", looped=True),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="radiation",
                radius=Fixed(35.0),
                dot=Fixed(12),
                duration_s=Fixed(-1),
                inner_radius=Fixed(10.0),
                inner_dot=Fixed(25),
                geiger_intensity=1.0,
                geiger_approach_radius=50.0,
            ),
        ),
    ),
)

# Class 8: corrosive spill, mostly vehicle damage.
HAZMAT_CLASS8 = HazardProfile(
    key="hazmat_class8",
    label="Corrosive Spill (HAZMAT Class 8)",
    description="Corrosive liquid spill causing vehicle structural damage and minor health DOT",
    dispatch_alert=True,
    dispatch_priority=Priority.HIGH,
    hazmat_class=8,
    cleanup_item="hazmat_cleanup_kit",
    phases=(
        PhaseTemplate(
            name="container_rupture",
            delay=0,
            explosion_type=2,
            radius=Fixed(4.0),
            damage=Fixed(75),
            camera_shake=Fixed(0.2),
            effects=(
                _ptfx("exp_grd_grenade_smoke", 1.5),
                _ptfx("ent_sht_water", 3.0),
            ),
        ),
        PhaseTemplate(
            name="corrosive_spread",
            delay=2000,
            radius=Fixed(12.0),
            effects=(
                EffectTemplate(kind="decal", name="corrosive_puddle", radius=Fixed(12.0), duration_ms=Fixed(-1)),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="corrosive",
                radius=Fixed(12.0),
                dot=Fixed(3),
                interval_ms=2000,
                duration_s=Fixed(120),
                vehicle_damage=Fixed(8),
                tire_damage_after_s=5,
            ),
        ),
        PhaseTemplate(
            name="persistent_zone",
            delay=10000,
            radius=Fixed(18.0),
            effects=(
                EffectTemplate(kind="decal", name="corrosive_puddle", radius=Fixed(18.0), duration_ms=Fixed(-1)),
                EffectTemplate(kind="sound", name="ACID_HISS", looped=True),
            ),
            hazard=HazardZoneTemplate(
                hazard_type="corrosive",
                radius=Fixed(18.0),
                dot=Fixed(5),
                interval_ms=1500,
                duration_s=Fixed(-1),
                vehicle_damage=Fixed(12),
                grip_reduction=0.3,
                tire_damage_after_s=3,
            ),
        ),
    ),
)

BUILTIN_PROFILES: tuple[HazardProfile, ...] = (
    FUEL_TANKER_FULL,
    FUEL_TANKER_PARTIAL,
    HAZMAT_CLASS3,
    HAZMAT_CLASS6,
    HAZMAT_CLASS7,
    HAZMAT_CLASS8,
)
