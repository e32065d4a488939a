"""Sentence-by-sentence state machine turning narration into script items.

The builder keeps exactly one open buffer. Each sentence either joins the open
buffer or closes it and opens a new one tagged with whatever the event
matchers recognised. Exact catalog matches from any matcher beat heuristic
matches, so a sentence naming a catalog aspect is never stolen by the lunar
fallback just because the moon matcher runs first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from ..schemas.script import CatalogReference, ScriptItem, Topic, reference_fields
from . import lexicon
from .context import SegmentationContext
from .matchers.aspect import AspectMatcher
from .matchers.base import EventMatch, EventMatcher
from .matchers.best_days import BestDaysMatcher
from .matchers.moon_phase import MoonPhaseMatcher
from .matchers.planetary import PlanetaryMovementMatcher
from .matchers.seasonal import SeasonalEventMatcher
from .tokenizer import Sentence

logger = logging.getLogger(__name__)

INTRO_KEY = "intro"
CONCLUSION_KEY = "conclusion"


def default_matchers() -> tuple[EventMatcher, ...]:
    """Matchers in the order their exact hits take precedence."""

    return (
        MoonPhaseMatcher(),
        SeasonalEventMatcher(),
        AspectMatcher(),
        PlanetaryMovementMatcher(),
        BestDaysMatcher(),
    )


@dataclass
class OpenSegment:
    topic: Topic
    key: str
    start_time: float
    reference: Optional[CatalogReference] = None
    sentences: List[str] = field(default_factory=list)

    def duration_at(self, clock: float) -> float:
        return clock - self.start_time

    def to_item(self, end_time: float) -> ScriptItem:
        return ScriptItem(
            topic=self.topic,
            text=" ".join(self.sentences),
            start_time=self.start_time,
            end_time=end_time,
            item=self.key,
            **reference_fields(self.reference),
        )


class SegmentBuilder:
    def __init__(
        self,
        context: SegmentationContext,
        matchers: Optional[Sequence[EventMatcher]] = None,
    ) -> None:
        self.context = context
        self.matchers = tuple(matchers) if matchers is not None else default_matchers()
        self.items: List[ScriptItem] = []
        self._open = OpenSegment(topic="intro", key=INTRO_KEY, start_time=0.0)
        self._clock = 0.0

    def build(self, sentences: Iterable[Sentence]) -> List[ScriptItem]:
        for sentence in sentences:
            self.feed(sentence)
        return self.finish()

    def feed(self, sentence: Sentence) -> None:
        text = sentence.text
        self._clock = sentence.start_time

        if sentence.index > 0 and lexicon.is_conclusion(text):
            if self._open.topic != "conclusion":
                self._transition(OpenSegment(topic="conclusion", key=CONCLUSION_KEY, start_time=self._clock))
            self._append(sentence)
            return

        if self.context.tracker.is_intro(text, sentence.index):
            self._append(sentence)
            return

        match = self.select(text)
        if match is None:
            self._append(sentence)
            return

        if not self._long_enough():
            logger.debug(
                "transition_suppressed",
                extra={"key": match.key, "sentence": sentence.index, "open": self._open.key},
            )
            self._append(sentence)
            return

        self.context.registry.claim(match.key)
        self.context.tracker.mark_event()
        self._transition(
            OpenSegment(
                topic=match.topic,
                key=match.key,
                start_time=self._clock,
                reference=match.reference,
            )
        )
        self._append(sentence)

    def select(self, text: str) -> Optional[EventMatch]:
        """Best new match for ``text``: first exact hit, else first heuristic hit."""

        registry = self.context.registry
        target_date = self.context.target_date(text)
        heuristic: Optional[EventMatch] = None
        for matcher in self.matchers:
            match = matcher.try_match(text, self.context, target_date)
            if match is None:
                continue
            if not registry.is_new(match.key):
                logger.debug("duplicate_event_skipped", extra={"key": match.key, "matcher": matcher.name})
                continue
            if match.exact:
                return match
            if heuristic is None:
                heuristic = match
        return heuristic

    def finish(self) -> List[ScriptItem]:
        self._close(self._clock)
        return list(self.items)

    def _append(self, sentence: Sentence) -> None:
        self._open.sentences.append(sentence.text)
        self._clock = sentence.end_time

    def _long_enough(self) -> bool:
        if not self.items:
            return True
        return self._open.duration_at(self._clock) >= self.context.settings.min_segment_seconds

    def _transition(self, segment: OpenSegment) -> None:
        self._close(self._clock)
        self._open = segment

    def _close(self, end_time: float) -> None:
        if not self._open.sentences:
            return
        self.items.append(self._open.to_item(end_time))
        self._open = OpenSegment(topic=self._open.topic, key=self._open.key, start_time=end_time)


__all__ = ["CONCLUSION_KEY", "INTRO_KEY", "OpenSegment", "SegmentBuilder", "default_matchers"]
