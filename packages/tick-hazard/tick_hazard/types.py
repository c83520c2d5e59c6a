"""Shared type aliases, scalable numbers and errors for tick-hazard."""
from __future__ import annotations

import random as _random
from dataclasses import dataclass
from typing import Callable, Union

Point = tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class Fixed:
    """A numeric field that never changes with fill level."""

    value: float


@dataclass(frozen=True, slots=True)
class Scalable:
    """A numeric field resolved as ``base * scale`` (floored when integer)."""

    base: float
    integer: bool = False


Num = Union[Fixed, Scalable]
NumRange = tuple[Num, Num]


def fixed(value: float) -> Fixed:
    return Fixed(value)


def scalable(base: float, integer: bool = False) -> Scalable:
    return Scalable(base, integer)


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed_ms: int
    request_stop: Callable[[], None]
    random: _random.Random


class ProfileNotFound(KeyError):
    """Raised when no hazard profile applies to a cargo key.

    Ordinary freight has no profile, so callers are expected to handle this.
    """

    def __init__(self, key: str, message: str | None = None) -> None:
        self.key = key
        super().__init__(message or f"No hazard profile for {key!r}")


class ZoneNotFound(KeyError):
    """Raised when describing a zone that is absent or already removed."""

    def __init__(self, zone_id: str) -> None:
        self.zone_id = zone_id
        super().__init__(f"Hazard zone {zone_id!r} is not active")


class IncidentNotFound(KeyError):
    """Raised when querying an incident the scheduler does not know."""

    def __init__(self, incident_id: str) -> None:
        self.incident_id = incident_id
        super().__init__(f"Incident {incident_id!r} is not known")


class InvalidFillLevel(ValueError):
    """Raised when a fill level is missing or not a number."""
