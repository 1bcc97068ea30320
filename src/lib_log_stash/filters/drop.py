"""Filters dropping events."""

from __future__ import annotations

import random
from typing import Any, Callable

from .base import Event, Filter


class Drop(Filter):
    """Drop ``percent`` percent of the events, chosen at random.

    Combine with ``only_if`` / ``not_if`` to sample a subset of events.

    Examples
    --------
    >>> Drop()({'message': []})
    False
    >>> Drop(percent=0)({'message': []})
    {'message': []}
    """

    def __init__(self, percent: int = 100, *, rng: random.Random | None = None, **conditions: Any) -> None:
        super().__init__(**conditions)
        self.percent = int(percent)
        if not 0 <= self.percent <= 100:
            raise ValueError("percent must be an integer between 0 and 100")
        self._rng = rng or random.Random()

    def apply(self, event: Event) -> Event | bool:
        if self.percent == 100 or self._rng.randrange(100) < self.percent:
            return False
        return event


class DropIf(Filter):
    """Drop events for which ``condition(event)`` is truthy."""

    def __init__(self, condition: Callable[[Event], Any], **conditions: Any) -> None:
        if not callable(condition):
            raise TypeError("must provide a condition when to drop the event")
        super().__init__(**conditions)
        self.condition = condition

    def apply(self, event: Event) -> Event | bool:
        if self.condition(event):
            return False
        return event


__all__ = ["Drop", "DropIf"]
