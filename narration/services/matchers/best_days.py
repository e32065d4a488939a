from __future__ import annotations

import datetime as dt
from typing import Optional

from .. import lexicon
from ..context import SegmentationContext
from ..dedup import BEST_DAYS, week_key
from .base import EventMatch, EventMatcher


class BestDaysMatcher(EventMatcher):
    name = "best_days"
    topic = "best_days"

    def try_match(
        self,
        sentence: str,
        context: SegmentationContext,
        target_date: Optional[dt.date] = None,
    ) -> Optional[EventMatch]:
        if not lexicon.best_days_phrasing(sentence):
            return None
        if self._clear(sentence) or self._strict(sentence):
            return self._match(week_key(BEST_DAYS, context.weekly_data.week_start))
        return None

    @staticmethod
    def _clear(sentence: str) -> bool:
        return not (
            lexicon.non_lunar_planets(sentence)
            or lexicon.aspect_words(sentence)
            or lexicon.has_lunar_vocabulary(sentence)
        )

    @staticmethod
    def _strict(sentence: str) -> bool:
        # one incidental planet is tolerated when the phrasing is unmistakable
        return (
            lexicon.strict_best_days_phrasing(sentence)
            and len(lexicon.planets(sentence)) <= 1
            and not lexicon.aspect_words(sentence)
            and not lexicon.moon_phases(sentence)
        )


__all__ = ["BestDaysMatcher"]
