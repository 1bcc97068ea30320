"""Fan-out of flushed buffers to flows.

Purpose
-------
Turn a flushed buffer into an event, add the logger-wide default fields and
tags, and write an independent copy of the event to every flow.

Contents
--------
* :class:`Sink` – the buffer receiver used by every buffer of a logger.

System Role
-----------
Implements :class:`~lib_log_stash.domain.buffer.BufferSink`; created by the
runtime composition root and shared by all buffer stacks of one logger.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from typing import Any, Callable

from ..domain.buffer import Buffer
from ..domain.normalize import is_deferred
from .flow import Flow
from .flows import Flows


def _deep_copy_event(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _deep_copy_event(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_deep_copy_event(item) for item in value]
    return value


class Sink:
    """Receive flushed buffers and write their events to all flows.

    Parameters
    ----------
    flows:
        Flow objects or devices (wrapped in flows).
    default_fields:
        Mapping, or deferred callable returning one, merged underneath every
        event's fields. Buffer fields win on conflicts.
    default_tags:
        Tags, or a deferred callable returning them, added to every event.

    Examples
    --------
    >>> from lib_log_stash.domain import Buffer, Message
    >>> lines = []
    >>> sink = Sink(lines.append, default_fields={'app': 'shop'})
    >>> buffer = Buffer(sink, buffering=False)
    >>> _ = buffer.add_message(Message('hello'))
    >>> lines[0]['message'], lines[0]['app']
    ('hello', 'shop')
    """

    def __init__(self, *flows: Any, default_fields: Any = None, default_tags: Any = None, flow_factory: Callable[[Any], Flow] | None = None) -> None:
        self._flows = Flows(*flows, flow_factory=flow_factory or Flow)
        self._default_fields: Any = {}
        self._default_tags: Any = []
        if default_fields is not None:
            self.default_fields = default_fields
        if default_tags is not None:
            self.default_tags = default_tags

    @property
    def flows(self) -> Flows:
        return self._flows

    @property
    def default_fields(self) -> Any:
        return self._default_fields

    @default_fields.setter
    def default_fields(self, fields: Any) -> None:
        if not (isinstance(fields, Mapping) or is_deferred(fields)):
            raise TypeError("default_fields must be a mapping or a deferred callable")
        self._default_fields = fields

    @property
    def default_tags(self) -> Any:
        return self._default_tags

    @default_tags.setter
    def default_tags(self, tags: Any) -> None:
        if isinstance(tags, str) or not (isinstance(tags, (Sequence, Set)) or is_deferred(tags)):
            raise TypeError("default_tags must be a sequence, a set or a deferred callable")
        self._default_tags = tags

    def write(self, buffer: Buffer) -> Buffer:
        """Write ``buffer``'s event to every flow; the last flow gets the original."""

        event = buffer.to_event(self._default_fields, self._default_tags)
        flows = self._flows.to_list()
        for position, flow in enumerate(flows):
            current = event if position == len(flows) - 1 else _deep_copy_event(event)
            flow.write(current)
        return buffer

    def close(self) -> None:
        for flow in self._flows:
            flow.close()

    def reopen(self) -> None:
        for flow in self._flows:
            flow.reopen()


__all__ = ["Sink"]
