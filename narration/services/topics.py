"""Coarse keyword-only topic segmentation for short-form narration.

No catalog lookups happen here; a sentence's topic comes from plain keyword
hits, and a topic switch waits until the open topic has run for at least
``min_topic_seconds``. A conclusion keyword always switches immediately.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from ..schemas.script import ScriptItem, Topic
from . import lexicon
from .invariants import ensure_conclusion, fold_stray_conclusions
from .segment_builder import CONCLUSION_KEY, INTRO_KEY, OpenSegment
from .tokenizer import Sentence

logger = logging.getLogger(__name__)

TOPIC_KEYWORDS: Tuple[Tuple[Topic, Tuple[str, ...]], ...] = (
    ("planetary_highlights", ("planetary", "planet")),
    ("retrogrades", ("retrograde", "direct")),
    ("aspects", ("aspect", "trine", "square", "opposition", "conjunction", "sextile", "alignment")),
    ("moon_phases", ("moon", "lunar", "phase")),
    ("best_days", ("best", "ideal", "favorable", "favourable", "optimal")),
)


def topic_for(text: str) -> Optional[Topic]:
    lowered = text.lower()
    if lexicon.is_conclusion(text):
        return "conclusion"
    if "enters" in lowered and "sign" in lowered:
        return "planetary_highlights"
    for topic, keywords in TOPIC_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return topic
    return None


def _key(topic: Topic, start_time: float) -> str:
    if topic == "intro":
        return INTRO_KEY
    if topic == "conclusion":
        return CONCLUSION_KEY
    return f"topic-{topic}-{start_time:.2f}"


def segment_topics(sentences: Sequence[Sentence], min_topic_seconds: float, words_per_second: float) -> List[ScriptItem]:
    items: List[ScriptItem] = []
    current = OpenSegment(topic="intro", key=INTRO_KEY, start_time=0.0)
    clock = 0.0
    for sentence in sentences:
        topic = topic_for(sentence.text)
        if topic is not None and topic != current.topic and current.sentences:
            held = current.duration_at(clock)
            if held >= min_topic_seconds or topic == "conclusion":
                items.append(current.to_item(clock))
                current = OpenSegment(topic=topic, key=_key(topic, clock), start_time=clock)
            else:
                logger.debug("topic_switch_held", extra={"topic": topic, "held": held})
        current.sentences.append(sentence.text)
        clock = sentence.end_time

    if current.sentences:
        if items and current.duration_at(clock) < min_topic_seconds and current.topic != "conclusion":
            # too short to stand alone; fold into the previous topic
            previous = items.pop()
            current.sentences.insert(0, previous.text)
            current = OpenSegment(
                topic=previous.topic,
                key=previous.item,
                start_time=previous.start_time,
                sentences=current.sentences,
            )
        items.append(current.to_item(clock))
    return ensure_conclusion(fold_stray_conclusions(items), words_per_second)


__all__ = ["TOPIC_KEYWORDS", "segment_topics", "topic_for"]
