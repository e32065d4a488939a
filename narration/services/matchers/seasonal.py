from __future__ import annotations

import datetime as dt
from typing import Optional

from .. import lexicon
from ..context import SegmentationContext
from ..dedup import key_for
from .base import EventMatch, EventMatcher


class SeasonalEventMatcher(EventMatcher):
    name = "seasonal_event"
    topic = "seasonal_events"

    def try_match(
        self,
        sentence: str,
        context: SegmentationContext,
        target_date: Optional[dt.date] = None,
    ) -> Optional[EventMatch]:
        entries = context.weekly_data.seasonal_events
        if not entries:
            return None
        for mention in lexicon.seasonal_keywords(sentence):
            keyword = sentence[mention.start:mention.end].lower()
            candidates = [e for e in entries if keyword in e.name.lower()]
            if not candidates:
                candidates = [e for e in entries if e.type == mention.value]
            entry = context.registry.first_unused(candidates or entries)
            return self._match(key_for(entry), entry)
        return None


__all__ = ["SeasonalEventMatcher"]
