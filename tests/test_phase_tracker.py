import datetime as dt

import pytest

from narration.schemas import WeeklyCosmicData
from narration.services.context import resolve_weekday
from narration.services.phase_tracker import CONTENT, INTRO, PhaseTracker, has_concrete_signal


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Mercury enters Capricorn.", True),
        ("Venus trine Jupiter brings harmony.", True),
        ("Mars squares the week.", True),
        ("The Full Moon lights the sky.", True),
        ("The solstice marks a turning point.", True),
        ("Venus and Jupiter are both bright.", False),
        ("This week brings shifting energy.", False),
    ],
)
def test_concrete_signals(text, expected):
    assert has_concrete_signal(text) is expected


def test_first_sentence_is_always_intro():
    tracker = PhaseTracker()

    assert tracker.is_intro("Mercury enters Capricorn on Tuesday.", 0)
    assert tracker.phase == INTRO


def test_vague_opening_stays_intro_until_a_signal():
    tracker = PhaseTracker()

    assert tracker.is_intro("Welcome back, stargazers.", 0)
    assert tracker.is_intro("The sky has plenty to say.", 1)
    assert not tracker.is_intro("Venus trine Jupiter brings harmony.", 2)
    assert tracker.phase == CONTENT
    assert not tracker.is_intro("Take a breath.", 3)


@pytest.mark.parametrize(
    "text",
    ["First up, a look at the big picture.", "On Friday the moon is busy."],
)
def test_markers_force_content(text):
    tracker = PhaseTracker()
    tracker.is_intro("Hello there.", 0)

    assert not tracker.is_intro(text, 1)


def test_detected_event_leaves_intro_for_good():
    tracker = PhaseTracker()
    tracker.mark_event()

    assert tracker.event_detected
    assert not tracker.is_intro("Quiet words.", 1)


def test_resolve_weekday_within_week():
    week = WeeklyCosmicData(week_start=dt.date(2025, 1, 13), week_end=dt.date(2025, 1, 19))

    assert resolve_weekday(week, 1) == dt.date(2025, 1, 14)
    assert resolve_weekday(week, 6) == dt.date(2025, 1, 19)
    assert resolve_weekday(week, None) is None


def test_resolve_weekday_outside_short_week():
    week = WeeklyCosmicData(week_start=dt.date(2025, 1, 15), week_end=dt.date(2025, 1, 17))

    assert resolve_weekday(week, 0) is None
