"""Tests for tick_hazard.selector — ProfileSelector."""
from __future__ import annotations

import pytest

from tick_hazard import (
    HazardConfig,
    InvalidFillLevel,
    ProfileNotFound,
    ProfileSelector,
    default_catalog,
)
from tick_hazard.selector import clamp_fill_level


def _selector(**config) -> ProfileSelector:
    return ProfileSelector(default_catalog(), HazardConfig(**config))


class TestTanker:
    def test_below_floor_is_partial(self) -> None:
        assert _selector().select("fuel_tanker", 0.09).profile.key == "fuel_tanker_partial"

    def test_nearly_full_is_partial(self) -> None:
        assert _selector().select("fuel_tanker", 0.99).profile.key == "fuel_tanker_partial"

    def test_exactly_full_is_full(self) -> None:
        assert _selector().select("fuel_tanker", 1.0).profile.key == "fuel_tanker_full"

    def test_lower_threshold_config(self) -> None:
        selector = _selector(full_threshold=0.9)
        assert selector.select("fuel_tanker", 0.95).profile.key == "fuel_tanker_full"
        assert selector.select("fuel_tanker", 0.89).profile.key == "fuel_tanker_partial"

    def test_floor_still_applies_with_zero_threshold(self) -> None:
        selector = _selector(full_threshold=0.0)
        assert selector.select("fuel_tanker", 0.05).profile.key == "fuel_tanker_partial"
        assert selector.select("fuel_tanker", 0.10).profile.key == "fuel_tanker_full"

    def test_fill_level_is_clamped(self) -> None:
        high = _selector().select("fuel_tanker", 1.7)
        assert high.fill_level == 1.0
        assert high.profile.key == "fuel_tanker_full"
        low = _selector().select("fuel_tanker", -0.3)
        assert low.fill_level == 0.0
        assert low.profile.key == "fuel_tanker_partial"

    def test_fill_level_required(self) -> None:
        with pytest.raises(InvalidFillLevel):
            _selector().select("fuel_tanker")

    def test_nan_rejected(self) -> None:
        with pytest.raises(InvalidFillLevel):
            _selector().select("fuel_tanker", float("nan"))

    def test_is_tanker(self) -> None:
        assert _selector().is_tanker("fuel_tanker")
        assert not _selector().is_tanker("hazmat")


class TestHazmat:
    @pytest.mark.parametrize(
        ("cargo", "expected"),
        [
            ("hazmat", "hazmat_class3"),
            ("hazmat_class3", "hazmat_class3"),
            ("hazmat_class6", "hazmat_class6"),
            ("hazmat_class7", "hazmat_class7"),
            ("hazmat_class8", "hazmat_class8"),
        ],
    )
    def test_cargo_key_maps_to_profile(self, cargo: str, expected: str) -> None:
        selection = _selector().select(cargo)
        assert selection.profile.key == expected
        assert selection.profile.scalable is False

    def test_class_designator(self) -> None:
        assert _selector().select("hazmat", hazmat_class=7).profile.key == "hazmat_class7"

    def test_unknown_class_designator(self) -> None:
        with pytest.raises(ProfileNotFound):
            _selector().select("hazmat", hazmat_class=9)

    def test_fill_level_ignored(self) -> None:
        assert _selector().select("hazmat_class6", 0.01).fill_level == 1.0


class TestNoProfile:
    def test_ordinary_freight(self) -> None:
        with pytest.raises(ProfileNotFound):
            _selector().select("lumber")

    def test_find_returns_none(self) -> None:
        assert _selector().find("lumber") is None
        assert _selector().find("hazmat_class9") is None


class TestClampFillLevel:
    def test_in_range_unchanged(self) -> None:
        assert clamp_fill_level(0.42) == 0.42

    def test_out_of_range_clamped(self) -> None:
        assert clamp_fill_level(3) == 1.0
        assert clamp_fill_level(-1) == 0.0

    def test_not_a_number(self) -> None:
        with pytest.raises(InvalidFillLevel):
            clamp_fill_level("full")  # type: ignore[arg-type]

    def test_none(self) -> None:
        with pytest.raises(InvalidFillLevel):
            clamp_fill_level(None)
