from __future__ import annotations

import re
from dataclasses import dataclass

# A sentence ends at a run of terminal punctuation, plus any closing quotes or
# brackets, followed by whitespace or the end of the text, so "lunary.app" and
# "2.5" stay inside their sentence.
_SENTENCE_RE = re.compile(r".+?(?:[.!?]+[\"'”’)\]]*(?=\s|$)|$)", re.S)


@dataclass(frozen=True)
class Sentence:
    index: int
    text: str
    words: int
    duration: float
    start_time: float

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


def count_words(text: str) -> int:
    return len(text.split())


def estimate_duration(text: str, words_per_second: float) -> float:
    if words_per_second <= 0:
        raise ValueError(f"words_per_second must be positive, got {words_per_second!r}")
    return count_words(text) / words_per_second


def split_sentences(script: str) -> list[str]:
    sentences: list[str] = []
    for match in _SENTENCE_RE.finditer(script or ""):
        fragment = match.group(0).strip()
        # punctuation-only fragments carry no words
        if fragment and re.search(r"\w", fragment):
            sentences.append(fragment)
    return sentences


def tokenize(script: str, words_per_second: float) -> list[Sentence]:
    """Split ``script`` into sentences stamped on a running clock."""

    clock = 0.0
    tokens: list[Sentence] = []
    for index, text in enumerate(split_sentences(script)):
        duration = estimate_duration(text, words_per_second)
        tokens.append(
            Sentence(
                index=index,
                text=text,
                words=count_words(text),
                duration=duration,
                start_time=clock,
            )
        )
        clock += duration
    return tokens


__all__ = ["Sentence", "count_words", "estimate_duration", "split_sentences", "tokenize"]
