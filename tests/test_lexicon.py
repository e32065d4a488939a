import pytest

from narration.services import lexicon


def test_planets_are_found_with_offsets():
    text = "Venus trine Jupiter brings harmony."
    found = lexicon.planets(text)

    assert [mention.value for mention in found] == ["Venus", "Jupiter"]
    assert text[found[1].start:found[1].end] == "Jupiter"


@pytest.mark.parametrize(
    "word,expected",
    [
        ("conjuncts", "conjunction"),
        ("conjoins", "conjunction"),
        ("trining", "trine"),
        ("squares", "square"),
        ("opposes", "opposition"),
        ("opposite", "opposition"),
        ("sextiles", "sextile"),
    ],
)
def test_aspect_synonyms_normalise(word, expected):
    found = lexicon.aspect_words(f"Mars {word} Saturn today.")

    assert [mention.value for mention in found] == [expected]


def test_moon_phases_accept_aliases_and_spacing():
    found = lexicon.moon_phases("The third  quarter moon follows the full moon.")

    assert [mention.value for mention in found] == ["Last Quarter", "Full Moon"]


def test_multiword_enter_verbs_win_over_prefixes():
    found = lexicon.enter_verbs("Venus moves into Pisces.")

    assert [mention.value for mention in found] == ["moves into"]


def test_station_keywords_are_ordered_by_position():
    found = lexicon.station_keywords("Mercury goes direct after its retrograde.")

    assert [mention.value for mention in found] == ["goes-direct", "goes-retrograde"]


def test_seasonal_keywords_map_to_types():
    found = lexicon.seasonal_keywords("Celebrate Imbolc and the coming equinox.")

    assert [mention.value for mention in found] == ["cross-quarter", "equinox"]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("On Tuesday, Mercury shifts.", 1),
        ("Sundays are for rest.", 6),
        ("No day here.", None),
    ],
)
def test_weekday_resolves_first_day_name(text, expected):
    assert lexicon.weekday(text) == expected


def test_conclusion_and_call_to_action_vocabulary():
    assert lexicon.is_conclusion("Visit Lunary for the full forecast.")
    assert lexicon.is_conclusion("Until next week, stay curious.")
    assert not lexicon.is_conclusion("Venus glows.")
    assert lexicon.has_call_to_action("Follow us for more.")


def test_section_markers_accept_curly_apostrophes():
    assert lexicon.has_section_marker("Let’s dive in with the big shifts.")


@pytest.mark.parametrize(
    "text,loose,strict",
    [
        ("The best days for rest are midweek.", True, True),
        ("Favorable timing arrives on Friday.", True, False),
        ("This is best for quiet planning.", True, False),
        ("Harmony grows.", False, False),
    ],
)
def test_best_days_phrasing(text, loose, strict):
    assert lexicon.best_days_phrasing(text) is loose
    assert lexicon.strict_best_days_phrasing(text) is strict


def test_position_helpers():
    mentions = lexicon.signs("Aries then later Leo and finally Pisces")

    assert lexicon.first_after(mentions, 5, 20).value == "Leo"
    assert lexicon.first_after(mentions, 5, 3) is None
    assert lexicon.nearest_before(mentions, 25).value == "Leo"
    assert lexicon.nearest_before(mentions, 0) is None
