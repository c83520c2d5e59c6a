"""ProfileSelector - maps cargo and fill level to a profile variant."""
from __future__ import annotations

import math
from dataclasses import dataclass

from loguru import logger

from tick_hazard.catalog import ProfileCatalog
from tick_hazard.config import HazardConfig
from tick_hazard.profiles import HazardProfile
from tick_hazard.types import InvalidFillLevel, ProfileNotFound


def clamp_fill_level(fill_level: float | None) -> float:
    """Clamp a fill level into [0, 1], warning on out-of-range input.

    Raises InvalidFillLevel for None or values that are not real numbers.
    """
    if fill_level is None:
        raise InvalidFillLevel("fill level is required")
    try:
        value = float(fill_level)
    except (TypeError, ValueError):
        raise InvalidFillLevel(f"fill level {fill_level!r} is not a number") from None
    if math.isnan(value):
        raise InvalidFillLevel("fill level is NaN")
    if value < 0.0 or value > 1.0:
        clamped = min(1.0, max(0.0, value))
        logger.warning("Fill level {} out of range, clamped to {}", value, clamped)
        return clamped
    return value


@dataclass(frozen=True)
class Selection:
    profile: HazardProfile
    fill_level: float  # clamped; 1.0 for profiles that ignore fill


class ProfileSelector:
    def __init__(self, catalog: ProfileCatalog, config: HazardConfig | None = None) -> None:
        self._catalog = catalog
        self._config = config or HazardConfig()

    @property
    def catalog(self) -> ProfileCatalog:
        return self._catalog

    def is_tanker(self, cargo_key: str) -> bool:
        return cargo_key in self._config.tanker_cargo

    def select(
        self,
        cargo_key: str,
        fill_level: float | None = None,
        hazmat_class: int | None = None,
    ) -> Selection:
        """Resolve the profile variant for a cargo load.

        Raises ProfileNotFound when no hazard applies, InvalidFillLevel when a
        tanker is reported without a usable fill level.
        """
        cfg = self._config
        if cargo_key in cfg.tanker_cargo:
            fill = clamp_fill_level(fill_level)
            # Both cutoffs route to the partial variant.
            if fill < cfg.partial_floor or fill < cfg.full_threshold:
                key = cfg.partial_profile
            else:
                key = cfg.full_profile
            return Selection(profile=self._catalog.get(key), fill_level=fill)

        if hazmat_class is not None and cargo_key in cfg.hazmat_cargo:
            key = cfg.hazmat_classes.get(hazmat_class)
            if key is None:
                raise ProfileNotFound(
                    cargo_key, f"No hazard profile for hazmat class {hazmat_class!r}"
                )
            return Selection(profile=self._catalog.get(key), fill_level=1.0)

        key = cfg.hazmat_cargo.get(cargo_key)
        if key is None:
            raise ProfileNotFound(cargo_key)
        return Selection(profile=self._catalog.get(key), fill_level=1.0)

    def find(
        self,
        cargo_key: str,
        fill_level: float | None = None,
        hazmat_class: int | None = None,
    ) -> Selection | None:
        """Like select(), but returns None when no hazard profile applies."""
        try:
            return self.select(cargo_key, fill_level, hazmat_class)
        except ProfileNotFound:
            return None
