from __future__ import annotations

import datetime as dt
import re
from typing import Optional, Sequence

from ...schemas.cosmic import MoonPhaseEvent
from .. import lexicon
from ..context import SegmentationContext
from ..dedup import MOON_NO_MATCH, key_for, moon_key, week_key
from .base import EventMatch, EventMatcher

_EXPLICIT_LUNAR_RE = re.compile(r"\b(?:moon\s+phases?|no\s+major\s+moon\s+phases?)\b", re.I)


def sign_near(
    phase: lexicon.Mention, signs: Sequence[lexicon.Mention], window: int
) -> Optional[lexicon.Mention]:
    """Sign following the phase within ``window``, else the closest one before it."""

    sign = lexicon.first_after(signs, phase.end, window)
    if sign is not None:
        return sign
    before = lexicon.nearest_before(signs, phase.start)
    if before is not None and phase.start - before.end <= window:
        return before
    return None


class MoonPhaseMatcher(EventMatcher):
    """Phase name plus a nearby sign, falling back to plain lunar vocabulary.

    A named phase that the catalog does not hold yields a heuristic match with
    no reference; only vague lunar wording borrows the catalog's first entry.
    """

    name = "moon_phase"
    topic = "moon_phases"

    def try_match(
        self,
        sentence: str,
        context: SegmentationContext,
        target_date: Optional[dt.date] = None,
    ) -> Optional[EventMatch]:
        window = context.settings.moon_sign_window
        phases = lexicon.moon_phases(sentence)
        signs = lexicon.signs(sentence)

        entry = self._exact(phases, signs, window, context)
        if entry is not None:
            return self._match(key_for(entry), entry)
        if not self._lunar_context(sentence):
            return None

        if phases:
            sign = sign_near(phases[0], signs, window)
            return self._match(
                moon_key(phases[0].value, sign.value if sign else None), exact=False
            )

        catalog = context.weekly_data.moon_phases
        if catalog:
            return self._match(key_for(catalog[0]), catalog[0], exact=False)
        return self._match(week_key(MOON_NO_MATCH, context.weekly_data.week_start), exact=False)

    def _exact(
        self,
        phases: Sequence[lexicon.Mention],
        signs: Sequence[lexicon.Mention],
        window: int,
        context: SegmentationContext,
    ) -> Optional[MoonPhaseEvent]:
        entries = context.weekly_data.moon_phases
        for phase in phases:
            sign = sign_near(phase, signs, window)
            if sign is not None:
                candidates = [e for e in entries if e.phase == phase.value and e.sign == sign.value]
            else:
                candidates = [e for e in entries if e.phase == phase.value]
            if candidates:
                return context.registry.first_unused(candidates)
        return None

    def _lunar_context(self, sentence: str) -> bool:
        if not lexicon.has_lunar_vocabulary(sentence):
            return False
        if _EXPLICIT_LUNAR_RE.search(sentence):
            return True
        return not (
            lexicon.non_lunar_planets(sentence)
            or lexicon.aspect_words(sentence)
            or lexicon.seasonal_keywords(sentence)
        )


__all__ = ["MoonPhaseMatcher", "sign_near"]
