"""Post-pass guaranteeing a moon-phase segment and one trailing conclusion."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..schemas.cosmic import MoonPhaseEvent
from ..schemas.script import ScriptItem, reference_fields
from . import lexicon
from .context import SegmentationContext
from .dedup import MOON_NO_MATCH, key_for, week_key
from .segment_builder import CONCLUSION_KEY, INTRO_KEY
from .tokenizer import estimate_duration

logger = logging.getLogger(__name__)

MOON_PHASE_TEMPLATE = "The moon phases this week include the {phase} in {sign}."
NO_MOON_PHASE_TEXT = "No major moon phases this week, so the lunar energy stays steady."
CONCLUSION_TEXT = (
    "That's your cosmic forecast for the week. Visit Lunary to dive deeper into your own chart."
)
MOON_PLACEMENT_RATIO = 0.8


def _shift(item: ScriptItem, offset: float) -> ScriptItem:
    return item.model_copy(
        update={"start_time": item.start_time + offset, "end_time": item.end_time + offset}
    )


def _moon_insert_index(items: List[ScriptItem]) -> int:
    if items[-1].topic == "conclusion":
        return max(len(items) - 1, 1)
    threshold = items[-1].end_time * MOON_PLACEMENT_RATIO
    index = 1
    for position, item in enumerate(items):
        if item.end_time <= threshold:
            index = position + 1
    return max(index, 1)


def moon_phase_item(context: SegmentationContext, start_time: float) -> ScriptItem:
    """Canned moon segment for the first unclaimed catalog moon entry or the no-match sentinel."""

    phases = context.weekly_data.moon_phases
    entry: Optional[MoonPhaseEvent] = context.registry.first_unused(phases) if phases else None
    if entry is not None:
        text = MOON_PHASE_TEMPLATE.format(phase=entry.phase, sign=entry.sign)
        key = key_for(entry)
    else:
        text = NO_MOON_PHASE_TEXT
        key = week_key(MOON_NO_MATCH, context.weekly_data.week_start)
    duration = estimate_duration(text, context.settings.words_per_second)
    return ScriptItem(
        topic="moon_phases",
        text=text,
        start_time=start_time,
        end_time=start_time + duration,
        item=key,
        **reference_fields(entry),
    )


def _has_moon_coverage(items: List[ScriptItem], context: SegmentationContext) -> bool:
    moon = [item for item in items if item.topic == "moon_phases"]
    if not context.weekly_data.moon_phases:
        return bool(moon)
    # a catalog moon event has to be represented, not just an unresolved phase name
    return any(item.exact_moon_phase is not None for item in moon)


def ensure_moon_phase(items: List[ScriptItem], context: SegmentationContext) -> List[ScriptItem]:
    if not items or _has_moon_coverage(items, context):
        return items
    index = _moon_insert_index(items)
    synthetic = moon_phase_item(context, items[index - 1].end_time)
    context.registry.claim(synthetic.item)
    logger.warning(
        "moon_phase_segment_synthesized",
        extra={"key": synthetic.item, "position": index},
    )
    shifted = [_shift(item, synthetic.duration) for item in items[index:]]
    return items[:index] + [synthetic] + shifted


def fold_stray_conclusions(items: List[ScriptItem]) -> List[ScriptItem]:
    """Merge every conclusion that is not the final segment into its predecessor."""

    folded: List[ScriptItem] = []
    last = len(items) - 1
    for position, item in enumerate(items):
        if item.topic != "conclusion" or position == last:
            folded.append(item)
            continue
        if not folded:
            folded.append(item.model_copy(update={"topic": "intro", "item": INTRO_KEY}))
            continue
        previous = folded.pop()
        folded.append(
            previous.model_copy(
                update={"text": f"{previous.text} {item.text}", "end_time": item.end_time}
            )
        )
        logger.debug("stray_conclusion_folded", extra={"into": previous.item})
    return folded


def ensure_conclusion(items: List[ScriptItem], words_per_second: float) -> List[ScriptItem]:
    if not items:
        return items
    final = items[-1]
    if final.topic == "conclusion":
        return items

    moon_segments = sum(1 for item in items if item.topic == "moon_phases")
    keeps_moon = final.topic != "moon_phases" or moon_segments > 1
    if lexicon.has_call_to_action(final.text) and final.reference is None and keeps_moon:
        items = items[:-1] + [final.model_copy(update={"topic": "conclusion", "item": CONCLUSION_KEY})]
        logger.warning("conclusion_segment_relabelled", extra={"from_topic": final.topic})
        return items

    duration = estimate_duration(CONCLUSION_TEXT, words_per_second)
    synthetic = ScriptItem(
        topic="conclusion",
        text=CONCLUSION_TEXT,
        start_time=final.end_time,
        end_time=final.end_time + duration,
        item=CONCLUSION_KEY,
    )
    logger.warning("conclusion_segment_synthesized")
    return items + [synthetic]


def enforce_invariants(items: List[ScriptItem], context: SegmentationContext) -> List[ScriptItem]:
    items = ensure_moon_phase(items, context)
    items = fold_stray_conclusions(items)
    return ensure_conclusion(items, context.settings.words_per_second)


__all__ = [
    "CONCLUSION_TEXT",
    "MOON_PHASE_TEMPLATE",
    "NO_MOON_PHASE_TEXT",
    "enforce_invariants",
    "ensure_conclusion",
    "ensure_moon_phase",
    "fold_stray_conclusions",
    "moon_phase_item",
]
