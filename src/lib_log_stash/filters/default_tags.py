"""Add tags to every event."""

from __future__ import annotations

from typing import Any

from ..domain.constants import FIELD_TAGS
from ..domain.fields import Tags
from .base import Event, Filter


class DefaultTags(Filter):
    """Merge ``tags`` (flattened, deferred values resolved per event) into the event's tags.

    Examples
    --------
    >>> DefaultTags('web', ['api'])({'tags': ['app']})['tags']
    ['app', 'web', 'api']
    """

    def __init__(self, *tags: Any, **conditions: Any) -> None:
        super().__init__(**conditions)
        self.tags = tags

    def apply(self, event: Event) -> Event:
        tags = Tags(event.get(FIELD_TAGS))
        tags.update(*self.tags, scope=event)
        event[FIELD_TAGS] = tags.to_list()
        return event


__all__ = ["DefaultTags"]
