from .cosmic import (
    MajorAspect,
    MoonPhaseEvent,
    PlanetaryHighlight,
    SeasonalEvent,
    WeeklyCosmicData,
)
from .script import CatalogReference, ScriptItem, Topic, reference_fields
