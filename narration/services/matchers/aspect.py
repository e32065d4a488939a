from __future__ import annotations

import datetime as dt
from typing import NamedTuple, Optional

from ...schemas.cosmic import MajorAspect
from .. import lexicon
from ..context import SegmentationContext
from ..dedup import aspect_key, key_for
from .base import EventMatch, EventMatcher, on_date


class AspectClaim(NamedTuple):
    planet_a: str
    aspect: str
    planet_b: str


def ordered_claims(sentence: str, window: int) -> list[AspectClaim]:
    """``PlanetA <aspect> PlanetB`` claims, left to right, inside ``window`` chars."""

    planets = lexicon.planets(sentence)
    claims: list[AspectClaim] = []
    for verb in lexicon.aspect_words(sentence):
        first = lexicon.nearest_before(planets, verb.start)
        if first is None:
            continue
        second = next(
            (p for p in planets if p.start >= verb.end and p.value != first.value),
            None,
        )
        if second is None or second.end - first.start > window:
            continue
        claims.append(AspectClaim(first.value, verb.value, second.value))
    return claims


def formed_claims(sentence: str, pair_window: int, form_window: int) -> list[AspectClaim]:
    """``PlanetA and PlanetB form a/an <aspect>`` claims."""

    planets = lexicon.planets(sentence)
    aspects = lexicon.aspect_words(sentence)
    claims: list[AspectClaim] = []
    for join in lexicon.and_joins(sentence):
        first = lexicon.nearest_before(planets, join.start)
        if first is None or join.start - first.end > pair_window:
            continue
        second = lexicon.first_after(planets, join.end, pair_window)
        if second is None or second.value == first.value:
            continue
        verb = lexicon.first_after(aspects, second.end, form_window)
        if verb is None:
            continue
        claims.append(AspectClaim(first.value, verb.value, second.value))
    return claims


def lookup_aspects(
    entries: tuple[MajorAspect, ...],
    claim: AspectClaim,
    target_date: Optional[dt.date] = None,
) -> list[MajorAspect]:
    forward = []
    reverse = []
    for entry in entries:
        if entry.aspect != claim.aspect or not on_date(entry.date, target_date):
            continue
        if entry.planet_a == claim.planet_a and entry.planet_b == claim.planet_b:
            forward.append(entry)
        elif entry.planet_a == claim.planet_b and entry.planet_b == claim.planet_a:
            reverse.append(entry)
    return forward + reverse


class AspectMatcher(EventMatcher):
    name = "aspect"
    topic = "aspects"

    def try_match(
        self,
        sentence: str,
        context: SegmentationContext,
        target_date: Optional[dt.date] = None,
    ) -> Optional[EventMatch]:
        aspects = lexicon.aspect_words(sentence)
        planets = lexicon.planets(sentence)
        if not aspects or len({p.value for p in planets}) < 2:
            return None

        settings = context.settings
        claims = ordered_claims(sentence, settings.aspect_window)
        claims.extend(
            formed_claims(sentence, settings.aspect_pair_window, settings.aspect_form_window)
        )
        if not claims:
            # "the trine between Venus and Jupiter": loose wording, same lookup
            names = list(dict.fromkeys(p.value for p in planets))
            claims.append(AspectClaim(names[0], aspects[0].value, names[1]))

        for claim in claims:
            candidates = lookup_aspects(context.weekly_data.major_aspects, claim, target_date)
            if candidates:
                entry = context.registry.first_unused(candidates)
                return self._match(key_for(entry), entry)
        return self._match(aspect_key(*claims[0]), exact=False)


__all__ = ["AspectClaim", "AspectMatcher", "formed_claims", "lookup_aspects", "ordered_claims"]
