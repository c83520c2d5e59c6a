"""Hazard engine configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

_HAZMAT_CARGO = MappingProxyType(
    {
        "hazmat": "hazmat_class3",
        "hazmat_class3": "hazmat_class3",
        "hazmat_class6": "hazmat_class6",
        "hazmat_class7": "hazmat_class7",
        "hazmat_class8": "hazmat_class8",
    }
)

_HAZMAT_CLASSES = MappingProxyType(
    {
        3: "hazmat_class3",
        6: "hazmat_class6",
        7: "hazmat_class7",
        8: "hazmat_class8",
    }
)


@dataclass(frozen=True)
class HazardConfig:
    """Immutable configuration for incident selection, scaling and pacing.

    Attributes:
        tps: Engine ticks per second. Phase delays are rounded up to ticks.
        full_threshold: Fill level at or above which a tanker counts as full.
        partial_floor: Fill level below which a tanker is always partial.
        min_scale: Lower bound of the effective scale factor.
        tanker_cargo: Cargo keys that select a tanker profile by fill level.
        full_profile: Profile key for a full tanker.
        partial_profile: Profile key for a partial tanker.
        hazmat_cargo: Cargo key to profile key for hazmat loads.
        hazmat_classes: Hazard class designator to profile key.
        default_fill_level: Fill level assumed for a vehicle registered without one.
        sync_radius: Distance within which zones are reported by zones_near().
    """

    tps: int = 20
    full_threshold: float = 1.0
    partial_floor: float = 0.10
    min_scale: float = 0.1
    tanker_cargo: frozenset[str] = frozenset({"fuel_tanker"})
    full_profile: str = "fuel_tanker_full"
    partial_profile: str = "fuel_tanker_partial"
    hazmat_cargo: Mapping[str, str] = field(default_factory=lambda: _HAZMAT_CARGO)
    hazmat_classes: Mapping[int, str] = field(default_factory=lambda: _HAZMAT_CLASSES)
    default_fill_level: float = 1.0
    sync_radius: float = 500.0

    def __post_init__(self) -> None:
        if self.tps <= 0:
            raise ValueError("tps must be positive")
        if not 0.0 < self.min_scale <= 1.0:
            raise ValueError(f"min_scale must be in (0, 1], got {self.min_scale}")
        if not 0.0 <= self.partial_floor <= 1.0:
            raise ValueError(f"partial_floor must be in [0, 1], got {self.partial_floor}")
        if not 0.0 <= self.full_threshold <= 1.0:
            raise ValueError(f"full_threshold must be in [0, 1], got {self.full_threshold}")
