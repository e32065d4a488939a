from __future__ import annotations

import datetime as dt
from typing import Any, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..services.constants import (
    PLANET_EVENTS,
    canonical_aspect,
    canonical_phase,
    canonical_planet,
    canonical_sign,
)

PlanetEvent = Literal["enters-sign", "goes-retrograde", "goes-direct"]
AspectKind = Literal["conjunction", "trine", "square", "opposition", "sextile"]
Significance = Literal["low", "medium", "high", "extraordinary"]
SeasonalKind = Literal["solstice", "equinox", "cross-quarter"]


def _coerce_date(value: Any) -> Any:
    # The calculator serialises dates as full ISO timestamps ("2025-01-14T00:00:00.000Z").
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10 and value[4] == "-" and value[10] in "T ":
        return value[:10]
    return value


def _require(value: Optional[str], resolved: Optional[str], kind: str) -> Optional[str]:
    if value is None:
        return None
    if resolved is None:
        raise ValueError(f"Unknown {kind}: {value!r}")
    return resolved


class CatalogModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    @field_validator("date", mode="before", check_fields=False)
    @classmethod
    def _date(cls, value: Any) -> Any:
        return _coerce_date(value)


class PlanetaryHighlight(CatalogModel):
    planet: str
    event: PlanetEvent
    date: dt.date
    significance: Significance = "medium"
    to_sign: Optional[str] = None
    from_sign: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _lift_details(cls, data: Any) -> Any:
        # {"details": {"toSign": "Capricorn"}} is the calculator's shape
        if isinstance(data, Mapping) and isinstance(data.get("details"), Mapping):
            details = data["details"]
            data = {key: value for key, value in data.items() if key != "details"}
            for source, target in (("toSign", "to_sign"), ("fromSign", "from_sign")):
                if details.get(source) and not (data.get(target) or data.get(source)):
                    data[target] = details[source]
        return data

    @field_validator("planet")
    @classmethod
    def _planet(cls, value: str) -> str:
        return _require(value, canonical_planet(value), "planet")

    @field_validator("to_sign", "from_sign")
    @classmethod
    def _sign(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        return _require(value, canonical_sign(value), "sign")


class MajorAspect(CatalogModel):
    planet_a: str
    planet_b: str
    aspect: AspectKind
    date: dt.date
    significance: Significance = "medium"
    energy: Optional[str] = None

    @field_validator("planet_a", "planet_b")
    @classmethod
    def _planet(cls, value: str) -> str:
        return _require(value, canonical_planet(value), "planet")

    @field_validator("aspect", mode="before")
    @classmethod
    def _aspect(cls, value: Any) -> Any:
        return canonical_aspect(value) if isinstance(value, str) else value


class MoonPhaseEvent(CatalogModel):
    phase: str
    sign: str
    date: dt.date
    time: Optional[str] = None
    energy: Optional[str] = None

    @field_validator("phase")
    @classmethod
    def _phase(cls, value: str) -> str:
        return _require(value, canonical_phase(value), "moon phase")

    @field_validator("sign")
    @classmethod
    def _sign(cls, value: str) -> str:
        return _require(value, canonical_sign(value), "sign")


class SeasonalEvent(CatalogModel):
    name: str
    type: SeasonalKind
    date: dt.date
    significance: Optional[str] = None


class WeeklyCosmicData(CatalogModel):
    """Read-only catalog of one week's events, as produced by the calculator."""

    week_start: dt.date
    week_end: dt.date
    title: Optional[str] = None
    subtitle: Optional[str] = None
    planetary_highlights: Tuple[PlanetaryHighlight, ...] = ()
    major_aspects: Tuple[MajorAspect, ...] = ()
    moon_phases: Tuple[MoonPhaseEvent, ...] = ()
    seasonal_events: Tuple[SeasonalEvent, ...] = ()

    @field_validator("week_start", "week_end", mode="before")
    @classmethod
    def _week_bounds(cls, value: Any) -> Any:
        return _coerce_date(value)

    @model_validator(mode="after")
    def _ordered_week(self) -> "WeeklyCosmicData":
        if self.week_end < self.week_start:
            raise ValueError("week_end must not precede week_start")
        return self

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WeeklyCosmicData":
        """Build a catalog from a JSON-style mapping (camelCase or snake_case keys).

        Highlights whose event kind is outside the three movement kinds (the
        calculator also emits ``major-aspect`` highlights that duplicate
        ``majorAspects``) are dropped.
        """

        data = dict(payload)
        for key in ("planetaryHighlights", "planetary_highlights"):
            if key in data:
                data[key] = [
                    entry
                    for entry in data[key] or ()
                    if not isinstance(entry, Mapping) or entry.get("event") in PLANET_EVENTS
                ]
        return cls.model_validate(data)


__all__ = [
    "AspectKind",
    "MajorAspect",
    "MoonPhaseEvent",
    "PlanetEvent",
    "PlanetaryHighlight",
    "SeasonalEvent",
    "SeasonalKind",
    "Significance",
    "WeeklyCosmicData",
]
