"""ProfileCatalog - read-only registry of hazard profiles."""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator

from tick_hazard.builtin import BUILTIN_PROFILES
from tick_hazard.profiles import HazardProfile
from tick_hazard.types import ProfileNotFound


class ProfileCatalog:
    """Profiles keyed by name. Built once, shared by reference.

    Profiles are frozen dataclasses, so handing the same instance to every
    incident is safe.
    """

    def __init__(self, profiles: Iterable[HazardProfile]) -> None:
        table: dict[str, HazardProfile] = {}
        for profile in profiles:
            if profile.key in table:
                raise ValueError(f"Duplicate hazard profile key {profile.key!r}")
            table[profile.key] = profile
        self._profiles = MappingProxyType(table)

    def get(self, key: str) -> HazardProfile:
        """Look up a profile. Raises ProfileNotFound if not defined."""
        try:
            return self._profiles[key]
        except KeyError:
            raise ProfileNotFound(key) from None

    def has(self, key: str) -> bool:
        return key in self._profiles

    def keys(self) -> list[str]:
        """Return all profile keys in definition order."""
        return list(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[HazardProfile]:
        return iter(self._profiles.values())


_DEFAULT: ProfileCatalog | None = None


def default_catalog() -> ProfileCatalog:
    """Return the process-wide catalog of built-in profiles."""
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = ProfileCatalog(BUILTIN_PROFILES)
    return _DEFAULT
