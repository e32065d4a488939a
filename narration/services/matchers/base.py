from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...schemas.script import CatalogReference, Topic
from ..context import SegmentationContext


@dataclass(frozen=True)
class EventMatch:
    """Result of one matcher against one sentence.

    ``exact`` is False for heuristic matches; those may still carry a
    best-effort ``reference`` (the moon fallback does).
    """

    topic: Topic
    key: str
    reference: Optional[CatalogReference] = None
    exact: bool = True
    matcher: str = ""


class EventMatcher(ABC):
    """Uniform contract for the rule-based event matchers."""

    name: str = ""
    topic: Topic = "intro"

    @abstractmethod
    def try_match(
        self,
        sentence: str,
        context: SegmentationContext,
        target_date: Optional[dt.date] = None,
    ) -> Optional[EventMatch]:
        """Return an exact match, a heuristic match, or None."""

    def _match(
        self,
        key: str,
        reference: Optional[CatalogReference] = None,
        exact: bool = True,
        topic: Optional[Topic] = None,
    ) -> EventMatch:
        return EventMatch(
            topic=topic or self.topic,
            key=key,
            reference=reference,
            exact=exact,
            matcher=self.name,
        )


def on_date(entry_date: dt.date, target_date: Optional[dt.date]) -> bool:
    return target_date is None or entry_date == target_date


__all__ = ["EventMatch", "EventMatcher", "on_date"]
