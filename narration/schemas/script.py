from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .cosmic import MajorAspect, MoonPhaseEvent, PlanetaryHighlight, SeasonalEvent

Topic = Literal[
    "intro",
    "planetary_highlights",
    "retrogrades",
    "aspects",
    "moon_phases",
    "seasonal_events",
    "best_days",
    "conclusion",
]

CatalogReference = Union[PlanetaryHighlight, MajorAspect, MoonPhaseEvent, SeasonalEvent]


class ScriptItem(BaseModel):
    """One contiguous, time-bounded slice of narration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    topic: Topic
    text: str
    start_time: float
    end_time: float
    item: str
    exact_planet: Optional[PlanetaryHighlight] = None
    exact_aspect: Optional[MajorAspect] = None
    exact_moon_phase: Optional[MoonPhaseEvent] = None
    exact_seasonal_event: Optional[SeasonalEvent] = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def reference(self) -> Optional[CatalogReference]:
        return (
            self.exact_planet
            or self.exact_aspect
            or self.exact_moon_phase
            or self.exact_seasonal_event
        )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def reference_fields(reference: Optional[CatalogReference]) -> Dict[str, Any]:
    """Map a catalog entity onto the matching ``exact_*`` field of ``ScriptItem``."""

    if isinstance(reference, PlanetaryHighlight):
        return {"exact_planet": reference}
    if isinstance(reference, MajorAspect):
        return {"exact_aspect": reference}
    if isinstance(reference, MoonPhaseEvent):
        return {"exact_moon_phase": reference}
    if isinstance(reference, SeasonalEvent):
        return {"exact_seasonal_event": reference}
    return {}


__all__ = ["CatalogReference", "ScriptItem", "Topic", "reference_fields"]
