"""Intro/content phase flag layered over the segment builder."""

from __future__ import annotations

from . import lexicon

INTRO = "intro"
CONTENT = "content"


def has_concrete_signal(text: str) -> bool:
    """True when ``text`` names something that looks like a concrete event."""

    planets = lexicon.planets(text)
    aspects = lexicon.aspect_words(text)
    if planets and (aspects or lexicon.has_movement_verb(text)):
        return True
    if aspects and len({mention.value for mention in planets}) >= 2:
        return True
    if lexicon.moon_phases(text):
        return True
    return bool(lexicon.seasonal_keywords(text))


def has_day_event_pattern(text: str) -> bool:
    return lexicon.weekday(text) is not None and lexicon.has_event_vocabulary(text)


def has_section_marker_or_event(text: str) -> bool:
    return (
        lexicon.has_section_marker(text)
        or has_day_event_pattern(text)
        or has_concrete_signal(text)
    )


class PhaseTracker:
    """Keeps the scripted opening together until the narration reaches real events.

    ``phase`` only ever moves from ``intro`` to ``content``; ``event_detected``
    flips once any matcher has opened a segment.
    """

    def __init__(self) -> None:
        self.phase = INTRO
        self.event_detected = False

    def mark_event(self) -> None:
        self.event_detected = True
        self.phase = CONTENT

    def is_intro(self, text: str, index: int) -> bool:
        if self.phase == CONTENT:
            return False
        if index == 0:
            return True
        if self.event_detected or has_section_marker_or_event(text):
            self.phase = CONTENT
            return False
        return True


__all__ = ["CONTENT", "INTRO", "PhaseTracker", "has_concrete_signal", "has_day_event_pattern"]
