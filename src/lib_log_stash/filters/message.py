"""Filters operating on the event's message list."""

from __future__ import annotations

from typing import Any, Callable, Iterable

from ..domain.constants import FIELD_MESSAGE
from ..domain.message import ANSI_COLOR, Message
from ..domain.utf8 import utf8
from .base import Event, Filter

CUTS = ("top", "middle", "bottom")


class ClearColor(Filter):
    """Strip ANSI colour codes from the message, list or string.

    Examples
    --------
    >>> ClearColor()({'message': ['\\x1b[1mbold\\x1b[0m']})
    {'message': ['bold']}
    """

    def apply(self, event: Event) -> Event:
        message = event.get(FIELD_MESSAGE)
        if isinstance(message, list):
            event[FIELD_MESSAGE] = [ANSI_COLOR.sub("", utf8(item)) for item in message]
        elif isinstance(message, (str, Message)):
            event[FIELD_MESSAGE] = ANSI_COLOR.sub("", utf8(message))
        return event


class TruncateMessage(Filter):
    """Shorten the message list to at most ``max_size`` characters overall.

    Each of ``selectors`` (predicates on a message) is applied in turn, keeping
    only the messages it accepts, until the list is short enough. If it is
    still too long, whole messages are removed from the ``top``, ``middle`` or
    ``bottom`` (``cut``) and a single ``ellipsis`` message is put in their
    place. At least one message is always kept.

    Examples
    --------
    >>> event = {'message': ['one\\n', 'two\\n', 'three\\n']}
    >>> [str(m) for m in TruncateMessage(9, ellipsis='...\\n')(event)['message']]
    ['one\\n', '...\\n']
    """

    ELLIPSIS = "[...]\n"

    def __init__(
        self,
        max_size: int,
        *,
        selectors: Iterable[Callable[[Any], Any]] = (),
        cut: str = "bottom",
        ellipsis: str | None = ELLIPSIS,
        **conditions: Any,
    ) -> None:
        super().__init__(**conditions)
        self.max_size = int(max_size)
        self.selectors = list(selectors)
        if cut not in CUTS:
            raise ValueError("cut must be one of 'top', 'middle', 'bottom'")
        self.cut = cut
        self.ellipsis = ellipsis

    @staticmethod
    def _size(messages: list[Any]) -> int:
        return sum(len(utf8(message)) for message in messages)

    def apply(self, event: Event) -> Event:
        messages = event.get(FIELD_MESSAGE)
        if not isinstance(messages, list):
            return event
        for selector in self.selectors:
            if self._size(messages) <= self.max_size or len(messages) <= 1:
                return event
            messages[:] = [message for message in messages if selector(message)]
        if len(messages) > 1:
            self._truncate(messages)
        return event

    def _truncate(self, messages: list[Any]) -> None:
        size = self._size(messages)
        ellipsis: Message | None = None
        while size > self.max_size and len(messages) > 1:
            if self.cut == "top":
                removed = messages.pop(0)
            elif self.cut == "middle":
                removed = messages.pop(len(messages) // 2)
            else:
                removed = messages.pop()
            size -= len(utf8(removed))
            if ellipsis is None and self.ellipsis is not None:
                ellipsis = Message(self.ellipsis)
                size += len(ellipsis)
        if ellipsis is None:
            return
        if self.cut == "top":
            messages.insert(0, ellipsis)
        elif self.cut == "middle":
            messages.insert((len(messages) + 1) // 2, ellipsis)
        else:
            messages.append(ellipsis)


__all__ = ["ClearColor", "TruncateMessage"]
