"""Public entry points for narration segmentation."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..schemas.cosmic import WeeklyCosmicData
from ..schemas.script import ScriptItem
from .context import SegmentationContext
from .invariants import enforce_invariants
from .segment_builder import INTRO_KEY, SegmentBuilder
from .settings import SegmenterSettings
from .tokenizer import count_words, estimate_duration, tokenize
from .topics import segment_topics

logger = logging.getLogger(__name__)


def _resolve_settings(
    words_per_second: Optional[float], settings: Optional[SegmenterSettings]
) -> SegmenterSettings:
    base = settings.validate() if settings is not None else SegmenterSettings.from_env()
    return base.with_words_per_second(words_per_second)


def _single_intro(script: str, words_per_second: float) -> List[ScriptItem]:
    text = (script or "").strip()
    logger.info("narration_unsegmentable", extra={"chars": len(text)})
    return [
        ScriptItem(
            topic="intro",
            text=text,
            start_time=0.0,
            end_time=estimate_duration(text, words_per_second),
            item=INTRO_KEY,
        )
    ]


def segment_script_into_items(
    script: str,
    weekly_data: WeeklyCosmicData,
    words_per_second: Optional[float] = None,
    settings: Optional[SegmenterSettings] = None,
) -> List[ScriptItem]:
    """Split narration into time-stamped items linked to the week's catalog events.

    Every sentence of ``script`` lands in exactly one item, items are
    contiguous from 0, at least one item covers the moon phases and the last
    item is the conclusion. Narration with no usable sentence comes back as a
    single intro item.

    Raises ``ValueError`` when ``words_per_second`` or ``settings`` hold
    non-positive values.
    """

    settings = _resolve_settings(words_per_second, settings)
    sentences = tokenize(script, settings.words_per_second)
    if not sentences:
        return _single_intro(script, settings.words_per_second)

    context = SegmentationContext(weekly_data=weekly_data, settings=settings)
    items = SegmentBuilder(context).build(sentences)
    items = enforce_invariants(items, context)
    logger.info(
        "narration_segmented",
        extra={
            "week_start": weekly_data.week_start.isoformat(),
            "sentences": len(sentences),
            "topics": [item.topic for item in items],
            "items": [item.item for item in items],
        },
    )
    return items


def segment_script_into_topics(
    script: str,
    words_per_second: Optional[float] = None,
    settings: Optional[SegmenterSettings] = None,
) -> List[ScriptItem]:
    """Keyword-only topic split for short-form videos; no catalog references."""

    settings = _resolve_settings(words_per_second, settings)
    sentences = tokenize(script, settings.words_per_second)
    if not sentences:
        return _single_intro(script, settings.words_per_second)
    items = segment_topics(sentences, settings.min_topic_seconds, settings.words_per_second)
    logger.info("narration_topics_segmented", extra={"topics": [item.topic for item in items]})
    return items


def words_per_second_from_audio(
    script: str,
    audio_duration: Optional[float],
    settings: Optional[SegmenterSettings] = None,
) -> float:
    """Measured speech rate of ``script`` spoken over ``audio_duration`` seconds."""

    default = (settings or SegmenterSettings.from_env()).words_per_second
    words = count_words(script or "")
    if not audio_duration or audio_duration <= 0 or words == 0:
        return default
    return words / audio_duration


__all__ = [
    "segment_script_into_items",
    "segment_script_into_topics",
    "words_per_second_from_audio",
]
