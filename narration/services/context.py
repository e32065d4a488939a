from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Optional

from ..schemas.cosmic import WeeklyCosmicData
from . import lexicon
from .dedup import DedupRegistry
from .phase_tracker import PhaseTracker
from .settings import SegmenterSettings


def resolve_weekday(weekly_data: WeeklyCosmicData, weekday: Optional[int]) -> Optional[dt.date]:
    """First date in the catalog's week falling on ``weekday`` (Monday=0)."""

    if weekday is None:
        return None
    offset = (weekday - weekly_data.week_start.weekday()) % 7
    candidate = weekly_data.week_start + dt.timedelta(days=offset)
    if candidate > weekly_data.week_end:
        return None
    return candidate


@dataclass
class SegmentationContext:
    """Accumulation state owned by one segmentation call."""

    weekly_data: WeeklyCosmicData
    settings: SegmenterSettings
    registry: DedupRegistry = field(default_factory=DedupRegistry)
    tracker: PhaseTracker = field(default_factory=PhaseTracker)

    def target_date(self, text: str) -> Optional[dt.date]:
        return resolve_weekday(self.weekly_data, lexicon.weekday(text))


__all__ = ["SegmentationContext", "resolve_weekday"]
