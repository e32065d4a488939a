import pytest

from narration.services.settings import DEFAULT_WORDS_PER_SECOND, SegmenterSettings


def test_defaults_without_environment(monkeypatch):
    monkeypatch.delenv("NARRATION_WORDS_PER_SECOND", raising=False)
    monkeypatch.delenv("NARRATION_MIN_SEGMENT_SECONDS", raising=False)

    settings = SegmenterSettings.from_env()

    assert settings.words_per_second == DEFAULT_WORDS_PER_SECOND
    assert settings.min_segment_seconds == 2.0
    assert settings.moon_sign_window == 50


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("NARRATION_WORDS_PER_SECOND", "3.2")
    monkeypatch.setenv("NARRATION_ASPECT_WINDOW", "80")

    settings = SegmenterSettings.from_env()

    assert settings.words_per_second == 3.2
    assert settings.aspect_window == 80


@pytest.mark.parametrize("raw,expected", [("1", 2.0), ("3", 3.0), ("9", 4.0)])
def test_min_segment_is_clamped(monkeypatch, raw, expected):
    monkeypatch.setenv("NARRATION_MIN_SEGMENT_SECONDS", raw)

    assert SegmenterSettings.from_env().min_segment_seconds == expected


def test_non_numeric_environment_value_raises(monkeypatch):
    monkeypatch.setenv("NARRATION_STATION_WINDOW", "wide")

    with pytest.raises(ValueError):
        SegmenterSettings.from_env()


@pytest.mark.parametrize("rate", [0, -2.0])
def test_with_words_per_second_rejects_non_positive(rate):
    with pytest.raises(ValueError):
        SegmenterSettings().with_words_per_second(rate)


def test_with_words_per_second_keeps_other_fields():
    settings = SegmenterSettings(aspect_window=60).with_words_per_second(3.0)

    assert settings.words_per_second == 3.0
    assert settings.aspect_window == 60
    assert SegmenterSettings().with_words_per_second(None) == SegmenterSettings()
