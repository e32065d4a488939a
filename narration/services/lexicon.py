"""Vocabulary tables and offset-aware finders used by the event matchers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Pattern

from .constants import (
    MOON_PHASE_NAMES,
    PLANET_NAMES,
    SIGN_NAMES,
    canonical_aspect,
    canonical_phase,
    canonical_planet,
    canonical_sign,
)


@dataclass(frozen=True)
class Mention:
    """A vocabulary hit inside a sentence, with character offsets."""

    value: str
    start: int
    end: int


def _alternation(words: Iterable[str]) -> str:
    # longest first so "moves into" wins over "moves"
    ordered = sorted(words, key=len, reverse=True)
    return "|".join(re.escape(word).replace(r"\ ", r"\s+") for word in ordered)


def _word_pattern(words: Iterable[str]) -> Pattern[str]:
    return re.compile(rf"\b(?:{_alternation(words)})\b", re.I)


_PLANET_RE = _word_pattern(PLANET_NAMES)
_SIGN_RE = _word_pattern(SIGN_NAMES)
_PHASE_RE = _word_pattern([*MOON_PHASE_NAMES, "third quarter"])
_ASPECT_RE = re.compile(
    r"\b(?:conjunction|conjuncts?|conjoin(?:s|ing)?|trines?|trining|squares?|squaring"
    r"|opposition|opposite|oppos(?:es|ing)|sextiles?|sextiling)\b",
    re.I,
)
_ENTER_RE = _word_pattern(
    (
        "enters",
        "enter",
        "entering",
        "moves into",
        "moves to",
        "transits into",
        "glides into",
        "shifts into",
        "ingresses into",
        "slips into",
        "arrives in",
    )
)
_STATION_RE = _word_pattern(("stations", "station", "stationing", "goes", "turns", "turning"))
_RETROGRADE_RE = re.compile(r"\bretrograde\b", re.I)
_DIRECT_RE = re.compile(r"\bdirect\b", re.I)
_AND_RE = re.compile(r"\s+and\s+", re.I)
_LUNAR_RE = re.compile(r"\b(?:moon|moons|lunar|lunation)\b", re.I)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
_WEEKDAY_RE = re.compile(rf"\b({'|'.join(WEEKDAYS)})s?\b", re.I)

SEASONAL_KEYWORDS = {
    "solstice": "solstice",
    "midsummer": "solstice",
    "litha": "solstice",
    "yule": "solstice",
    "equinox": "equinox",
    "ostara": "equinox",
    "mabon": "equinox",
    "cross-quarter": "cross-quarter",
    "imbolc": "cross-quarter",
    "beltane": "cross-quarter",
    "lammas": "cross-quarter",
    "lughnasadh": "cross-quarter",
    "samhain": "cross-quarter",
}
_SEASONAL_RE = _word_pattern(SEASONAL_KEYWORDS)

CONCLUSION_PHRASES = (
    "conclusion",
    "wrap up",
    "wrapping up",
    "visit lunary",
    "lunary.app",
    "dive deeper",
    "birth chart",
    "until next week",
    "see you next week",
)
CTA_PHRASES = ("lunary", "visit", "dive deeper", "subscribe", "follow us", "next week")
SECTION_MARKERS = (
    "first up",
    "let's dive in",
    "let's dive into",
    "let's begin",
    "let's start",
    "starting with",
    "to start",
    "kicking off",
    "this week's highlights",
    "here's what's ahead",
    "here is what's ahead",
)
_BEST_DAYS_RE = re.compile(r"\b(?:best\s+days?|best\s+for|when\s+to|timing\s+for)\b", re.I)
_BEST_DAYS_STRICT_RE = re.compile(r"\b(?:best\s+days?|when\s+to|timing\s+for)\b", re.I)
_QUALITY_RE = re.compile(r"\b(?:optimal|favou?rable|ideal|auspicious)\b", re.I)
_TIMING_RE = re.compile(r"\b(?:days?|timing|dates?|times?)\b", re.I)


def _collect(pattern: Pattern[str], text: str, canonical) -> list[Mention]:
    mentions: list[Mention] = []
    for match in pattern.finditer(text):
        value = canonical(match.group(0))
        if value:
            mentions.append(Mention(value, match.start(), match.end()))
    return mentions


def _spaced(value: str) -> str:
    return " ".join(value.split())


def planets(text: str) -> list[Mention]:
    return _collect(_PLANET_RE, text, canonical_planet)


def signs(text: str) -> list[Mention]:
    return _collect(_SIGN_RE, text, canonical_sign)


def moon_phases(text: str) -> list[Mention]:
    return _collect(_PHASE_RE, text, lambda raw: canonical_phase(_spaced(raw)))


def aspect_words(text: str) -> list[Mention]:
    return _collect(_ASPECT_RE, text, canonical_aspect)


def enter_verbs(text: str) -> list[Mention]:
    return _collect(_ENTER_RE, text, lambda raw: _spaced(raw).lower())


def station_verbs(text: str) -> list[Mention]:
    return _collect(_STATION_RE, text, str.lower)


def station_keywords(text: str) -> list[Mention]:
    hits = _collect(_RETROGRADE_RE, text, lambda _: "goes-retrograde")
    hits.extend(_collect(_DIRECT_RE, text, lambda _: "goes-direct"))
    return sorted(hits, key=lambda mention: mention.start)


def and_joins(text: str) -> list[Mention]:
    return _collect(_AND_RE, text, lambda _: "and")


def seasonal_keywords(text: str) -> list[Mention]:
    return _collect(_SEASONAL_RE, text, lambda raw: SEASONAL_KEYWORDS.get(raw.lower()))


def weekday(text: str) -> int | None:
    """Index (Monday=0) of the first weekday named in ``text``."""

    match = _WEEKDAY_RE.search(text)
    if not match:
        return None
    return WEEKDAYS.index(match.group(1).lower())


def has_lunar_vocabulary(text: str) -> bool:
    return bool(_LUNAR_RE.search(text)) or bool(moon_phases(text))


def non_lunar_planets(text: str) -> list[Mention]:
    return [mention for mention in planets(text) if mention.value != "Moon"]


def has_movement_verb(text: str) -> bool:
    if enter_verbs(text):
        return True
    return bool(station_verbs(text)) and bool(station_keywords(text))


def has_event_vocabulary(text: str) -> bool:
    return bool(
        planets(text)
        or aspect_words(text)
        or moon_phases(text)
        or seasonal_keywords(text)
        or _LUNAR_RE.search(text)
    )


def _contains_any(text: str, phrases: Iterable[str]) -> bool:
    lowered = " ".join(text.lower().split())
    return any(phrase in lowered for phrase in phrases)


def is_conclusion(text: str) -> bool:
    return _contains_any(text, CONCLUSION_PHRASES)


def has_call_to_action(text: str) -> bool:
    return _contains_any(text, CTA_PHRASES)


def has_section_marker(text: str) -> bool:
    return _contains_any(text.replace("’", "'"), SECTION_MARKERS)


def best_days_phrasing(text: str) -> bool:
    if _BEST_DAYS_RE.search(text):
        return True
    return bool(_QUALITY_RE.search(text)) and bool(_TIMING_RE.search(text))


def strict_best_days_phrasing(text: str) -> bool:
    return bool(_BEST_DAYS_STRICT_RE.search(text))


def first_after(mentions: Iterable[Mention], position: int, window: int) -> Mention | None:
    """First mention starting at or after ``position`` and within ``window`` chars of it."""

    for mention in mentions:
        if position <= mention.start <= position + window:
            return mention
    return None


def nearest_before(mentions: Iterable[Mention], position: int) -> Mention | None:
    best: Mention | None = None
    for mention in mentions:
        if mention.end <= position and (best is None or mention.start > best.start):
            best = mention
    return best


__all__ = [
    "CONCLUSION_PHRASES",
    "CTA_PHRASES",
    "Mention",
    "SEASONAL_KEYWORDS",
    "SECTION_MARKERS",
    "WEEKDAYS",
    "and_joins",
    "aspect_words",
    "best_days_phrasing",
    "enter_verbs",
    "first_after",
    "has_call_to_action",
    "has_event_vocabulary",
    "has_lunar_vocabulary",
    "has_movement_verb",
    "has_section_marker",
    "is_conclusion",
    "moon_phases",
    "nearest_before",
    "non_lunar_planets",
    "planets",
    "seasonal_keywords",
    "signs",
    "station_keywords",
    "station_verbs",
    "strict_best_days_phrasing",
    "weekday",
]
