from __future__ import annotations

import datetime as dt
from typing import NamedTuple, Optional

from ...schemas.cosmic import PlanetaryHighlight
from ...schemas.script import Topic
from .. import lexicon
from ..context import SegmentationContext
from ..dedup import key_for, planet_key
from .base import EventMatch, EventMatcher, on_date

STATION_EVENTS = ("goes-retrograde", "goes-direct")


class MovementClaim(NamedTuple):
    planet: str
    event: str
    sign: Optional[str] = None


def movement_claims(sentence: str, sign_window: int, station_window: int) -> list[MovementClaim]:
    """Planet → verb → sign/keyword claims, strictly left to right.

    Each verb binds only to the closest planet before it, so "Venus glows while
    Mars enters Aries" never credits Venus with the ingress.
    """

    planets = lexicon.planets(sentence)
    if not planets:
        return []
    claims: list[MovementClaim] = []

    signs = lexicon.signs(sentence)
    for verb in lexicon.enter_verbs(sentence):
        planet = lexicon.nearest_before(planets, verb.start)
        sign = lexicon.first_after(signs, verb.end, sign_window)
        if planet is not None and sign is not None:
            claims.append(MovementClaim(planet.value, "enters-sign", sign.value))

    keywords = lexicon.station_keywords(sentence)
    for verb in lexicon.station_verbs(sentence):
        planet = lexicon.nearest_before(planets, verb.start)
        keyword = lexicon.first_after(keywords, verb.end, station_window)
        if planet is not None and keyword is not None:
            claims.append(MovementClaim(planet.value, keyword.value))

    return claims


def lookup_highlights(
    entries: tuple[PlanetaryHighlight, ...],
    claim: MovementClaim,
    target_date: Optional[dt.date] = None,
) -> list[PlanetaryHighlight]:
    return [
        entry
        for entry in entries
        if entry.planet == claim.planet
        and entry.event == claim.event
        and (claim.sign is None or entry.to_sign == claim.sign)
        and on_date(entry.date, target_date)
    ]


class PlanetaryMovementMatcher(EventMatcher):
    name = "planetary_movement"
    topic = "planetary_highlights"

    def try_match(
        self,
        sentence: str,
        context: SegmentationContext,
        target_date: Optional[dt.date] = None,
    ) -> Optional[EventMatch]:
        settings = context.settings
        claims = movement_claims(sentence, settings.movement_sign_window, settings.station_window)
        for claim in claims:
            candidates = lookup_highlights(context.weekly_data.planetary_highlights, claim, target_date)
            if candidates:
                entry = context.registry.first_unused(candidates)
                return self._match(key_for(entry), entry, topic=self._topic_for(entry.event))

        ingress = next((claim for claim in claims if claim.event == "enters-sign"), None)
        if ingress is None:
            return None
        return self._match(planet_key(ingress.planet, ingress.event, ingress.sign), exact=False)

    def _topic_for(self, event: str) -> Topic:
        return "retrogrades" if event in STATION_EVENTS else self.topic


__all__ = ["MovementClaim", "PlanetaryMovementMatcher", "lookup_highlights", "movement_claims"]
