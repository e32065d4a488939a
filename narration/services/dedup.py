"""Dedup keys and the registry of catalog events that already own a segment."""

from __future__ import annotations

import datetime as dt
from typing import Iterable, Optional

from ..schemas.cosmic import MajorAspect, MoonPhaseEvent, PlanetaryHighlight, SeasonalEvent

UNKNOWN_DATE = "unknown"
MOON_NO_MATCH = "moon-phase-no-match"
BEST_DAYS = "best-days"


def _iso(value: Optional[dt.date]) -> str:
    return value.isoformat() if value else UNKNOWN_DATE


def _key(*parts: object) -> str:
    return "-".join(str(part) for part in parts if part not in (None, ""))


def planet_key(planet: str, event: str, sign: Optional[str] = None, date: Optional[dt.date] = None) -> str:
    return _key("planet", planet, event, sign, _iso(date))


def aspect_key(planet_a: str, aspect: str, planet_b: str, date: Optional[dt.date] = None) -> str:
    return _key("aspect", planet_a, aspect, planet_b, _iso(date))


def moon_key(phase: str, sign: Optional[str] = None, date: Optional[dt.date] = None) -> str:
    return _key("moon", phase, sign, _iso(date))


def seasonal_key(name: str, date: Optional[dt.date] = None) -> str:
    return _key("seasonal", name, _iso(date))


def week_key(prefix: str, week_start: dt.date) -> str:
    return _key(prefix, week_start.isoformat())


def key_for(entity: object) -> str:
    """Dedup key of a catalog entity."""

    if isinstance(entity, PlanetaryHighlight):
        sign = entity.to_sign if entity.event == "enters-sign" else None
        return planet_key(entity.planet, entity.event, sign, entity.date)
    if isinstance(entity, MajorAspect):
        return aspect_key(entity.planet_a, entity.aspect, entity.planet_b, entity.date)
    if isinstance(entity, MoonPhaseEvent):
        return moon_key(entity.phase, entity.sign, entity.date)
    if isinstance(entity, SeasonalEvent):
        return seasonal_key(entity.name, entity.date)
    raise TypeError(f"Not a catalog entity: {type(entity).__name__}")


def is_unresolved(key: str) -> bool:
    return key.endswith(f"-{UNKNOWN_DATE}")


class DedupRegistry:
    """Keys of catalog events that already produced a segment.

    Keys carrying the ``unknown`` date placeholder come from heuristic matches
    with no catalog backing and are never suppressed.
    """

    def __init__(self) -> None:
        self._used: set[str] = set()

    def __contains__(self, key: str) -> bool:
        return key in self._used

    def __len__(self) -> int:
        return len(self._used)

    def is_new(self, key: str) -> bool:
        return is_unresolved(key) or key not in self._used

    def claim(self, key: str) -> bool:
        if not self.is_new(key):
            return False
        if not is_unresolved(key):
            self._used.add(key)
        return True

    def first_unused(self, entities: Iterable[object]) -> Optional[object]:
        fallback = None
        for entity in entities:
            if fallback is None:
                fallback = entity
            if key_for(entity) not in self._used:
                return entity
        return fallback

    def used_keys(self) -> frozenset[str]:
        return frozenset(self._used)


__all__ = [
    "BEST_DAYS",
    "DedupRegistry",
    "MOON_NO_MATCH",
    "UNKNOWN_DATE",
    "aspect_key",
    "is_unresolved",
    "key_for",
    "moon_key",
    "planet_key",
    "seasonal_key",
    "week_key",
]
