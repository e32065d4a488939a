"""Tunable constants for narration segmentation, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace

DEFAULT_WORDS_PER_SECOND = 2.5
MIN_SEGMENT_FLOOR = 2.0
MIN_SEGMENT_CEILING = 4.0


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be numeric, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, float(default)))


@dataclass(frozen=True)
class SegmenterSettings:
    words_per_second: float = DEFAULT_WORDS_PER_SECOND
    min_segment_seconds: float = MIN_SEGMENT_FLOOR
    min_topic_seconds: float = 3.0
    movement_sign_window: int = 100
    station_window: int = 20
    aspect_window: int = 100
    aspect_pair_window: int = 20
    aspect_form_window: int = 30
    moon_sign_window: int = 50

    @classmethod
    def from_env(cls) -> "SegmenterSettings":
        settings = cls(
            words_per_second=_env_float("NARRATION_WORDS_PER_SECOND", DEFAULT_WORDS_PER_SECOND),
            min_segment_seconds=_env_float("NARRATION_MIN_SEGMENT_SECONDS", MIN_SEGMENT_FLOOR),
            min_topic_seconds=_env_float("NARRATION_MIN_TOPIC_SECONDS", 3.0),
            movement_sign_window=_env_int("NARRATION_MOVEMENT_SIGN_WINDOW", 100),
            station_window=_env_int("NARRATION_STATION_WINDOW", 20),
            aspect_window=_env_int("NARRATION_ASPECT_WINDOW", 100),
            aspect_pair_window=_env_int("NARRATION_ASPECT_PAIR_WINDOW", 20),
            aspect_form_window=_env_int("NARRATION_ASPECT_FORM_WINDOW", 30),
            moon_sign_window=_env_int("NARRATION_MOON_SIGN_WINDOW", 50),
        )
        return settings.validate()

    def with_words_per_second(self, words_per_second: float | None) -> "SegmenterSettings":
        if words_per_second is None:
            return self
        return replace(self, words_per_second=float(words_per_second)).validate()

    def validate(self) -> "SegmenterSettings":
        for field in fields(self):
            value = getattr(self, field.name)
            if value <= 0:
                raise ValueError(f"{field.name} must be positive, got {value!r}")
        clamped = min(max(self.min_segment_seconds, MIN_SEGMENT_FLOOR), MIN_SEGMENT_CEILING)
        if clamped != self.min_segment_seconds:
            return replace(self, min_segment_seconds=clamped)
        return self


__all__ = ["DEFAULT_WORDS_PER_SECOND", "SegmenterSettings"]
