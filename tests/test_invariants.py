import datetime as dt

import pytest

from narration.schemas import MajorAspect, MoonPhaseEvent, ScriptItem, WeeklyCosmicData
from narration.services.context import SegmentationContext
from narration.services.invariants import (
    CONCLUSION_TEXT,
    NO_MOON_PHASE_TEXT,
    enforce_invariants,
    ensure_conclusion,
    ensure_moon_phase,
    fold_stray_conclusions,
)
from narration.services.settings import SegmenterSettings

MONDAY = dt.date(2025, 1, 13)
FULL_MOON = MoonPhaseEvent(phase="Full Moon", sign="Cancer", date=MONDAY)


def _context(moon_phases=(FULL_MOON,)):
    catalog = WeeklyCosmicData(
        week_start=MONDAY, week_end=MONDAY + dt.timedelta(days=6), moon_phases=moon_phases
    )
    return SegmentationContext(weekly_data=catalog, settings=SegmenterSettings())


def _item(topic, start, end, text="Some narration here.", key=None, **refs):
    return ScriptItem(topic=topic, text=text, start_time=start, end_time=end, item=key or topic, **refs)


def _assert_contiguous(items):
    assert items[0].start_time == 0.0
    for previous, current in zip(items, items[1:]):
        assert current.start_time == pytest.approx(previous.end_time)


def test_moon_segment_is_spliced_before_conclusion():
    context = _context()
    items = [_item("intro", 0.0, 2.0), _item("aspects", 2.0, 4.0), _item("conclusion", 4.0, 6.0)]

    result = ensure_moon_phase(items, context)

    assert [item.topic for item in result] == ["intro", "aspects", "moon_phases", "conclusion"]
    moon = result[2]
    assert moon.text == "The moon phases this week include the Full Moon in Cancer."
    assert moon.exact_moon_phase == FULL_MOON
    assert moon.duration == pytest.approx(11 / 2.5)
    assert result[3].start_time == pytest.approx(4.0 + 11 / 2.5)
    assert moon.item in context.registry
    _assert_contiguous(result)


def test_moon_segment_follows_last_segment_inside_eighty_percent():
    items = [
        _item("intro", 0.0, 2.0),
        _item("aspects", 2.0, 4.0),
        _item("planetary_highlights", 4.0, 8.0),
        _item("best_days", 8.0, 10.0),
    ]

    result = ensure_moon_phase(items, _context())

    assert [item.topic for item in result][3] == "moon_phases"
    _assert_contiguous(result)


def test_moon_segment_never_precedes_first_segment():
    result = ensure_moon_phase([_item("intro", 0.0, 10.0)], _context())

    assert [item.topic for item in result] == ["intro", "moon_phases"]


def test_missing_moon_catalog_uses_sentinel():
    items = [_item("intro", 0.0, 2.0), _item("conclusion", 2.0, 4.0)]

    result = ensure_moon_phase(items, _context(moon_phases=()))

    assert result[1].text == NO_MOON_PHASE_TEXT
    assert result[1].item == "moon-phase-no-match-2025-01-13"
    assert result[1].reference is None


def test_existing_moon_segment_is_left_alone():
    items = [_item("intro", 0.0, 2.0), _item("moon_phases", 2.0, 4.0, exact_moon_phase=FULL_MOON)]

    assert ensure_moon_phase(items, _context()) == items


def test_unresolved_moon_segment_still_gets_catalog_entry():
    items = [
        _item("intro", 0.0, 2.0),
        _item("moon_phases", 2.0, 4.0, key="moon-New Moon-Aries-unknown"),
        _item("conclusion", 4.0, 6.0),
    ]

    result = ensure_moon_phase(items, _context())

    assert [item.topic for item in result] == ["intro", "moon_phases", "moon_phases", "conclusion"]
    assert result[2].exact_moon_phase == FULL_MOON
    _assert_contiguous(result)


def test_unresolved_moon_segment_is_enough_without_catalog():
    items = [_item("intro", 0.0, 2.0), _item("moon_phases", 2.0, 4.0, key="moon-New Moon-unknown")]

    assert ensure_moon_phase(items, _context(moon_phases=())) == items


def test_stray_conclusions_fold_into_predecessor():
    items = [
        _item("intro", 0.0, 2.0, text="Hello."),
        _item("conclusion", 2.0, 3.0, text="Visit Lunary."),
        _item("aspects", 3.0, 5.0, text="Mars squares Saturn."),
        _item("conclusion", 5.0, 6.0, text="Until next week."),
    ]

    result = fold_stray_conclusions(items)

    assert [item.topic for item in result] == ["intro", "aspects", "conclusion"]
    assert result[0].text == "Hello. Visit Lunary."
    assert result[0].end_time == 3.0
    _assert_contiguous(result)


def test_leading_stray_conclusion_becomes_intro():
    items = [_item("conclusion", 0.0, 2.0), _item("aspects", 2.0, 4.0)]

    result = fold_stray_conclusions(items)

    assert [item.topic for item in result] == ["intro", "aspects"]
    assert result[0].item == "intro"


def test_call_to_action_tail_is_relabelled():
    items = [_item("intro", 0.0, 2.0), _item("best_days", 2.0, 4.0, text="Follow us for more.")]

    result = ensure_conclusion(items, 2.5)

    assert [item.topic for item in result] == ["intro", "conclusion"]
    assert result[-1].text == "Follow us for more."


def test_referenced_tail_gets_a_synthetic_conclusion():
    aspect = MajorAspect(planet_a="Venus", planet_b="Jupiter", aspect="trine", date=MONDAY)
    items = [
        _item("intro", 0.0, 2.0),
        _item("aspects", 2.0, 4.0, text="Visit Venus trine Jupiter.", exact_aspect=aspect),
    ]

    result = ensure_conclusion(items, 2.5)

    assert [item.topic for item in result] == ["intro", "aspects", "conclusion"]
    assert result[-1].text == CONCLUSION_TEXT
    assert result[-1].start_time == 4.0


def test_only_moon_segment_is_not_relabelled():
    items = [
        _item("intro", 0.0, 2.0),
        _item("moon_phases", 2.0, 4.0, text="The moon rests until next week."),
    ]

    result = ensure_conclusion(items, 2.5)

    assert [item.topic for item in result] == ["intro", "moon_phases", "conclusion"]


def test_enforce_invariants_is_stable_on_compliant_output():
    items = [
        _item("intro", 0.0, 2.0),
        _item("moon_phases", 2.0, 4.0, exact_moon_phase=FULL_MOON),
        _item("conclusion", 4.0, 6.0),
    ]

    assert enforce_invariants(items, _context()) == items
