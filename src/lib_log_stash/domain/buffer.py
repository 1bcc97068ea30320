"""Per-scope accumulator of messages, fields and tags.

Purpose
-------
Collect everything logged during one logical unit of work (a request, a job,
a single log call) and turn it into one event when the unit ends.

Contents
--------
* :class:`Buffer` – the accumulator and its ``empty → pending → flushed →
  empty`` lifecycle.
* :class:`BufferSink` – protocol for the object receiving flushed buffers.

System Role
-----------
Buffers live on a :class:`~lib_log_stash.domain.buffer_stack.BufferStack`
owned by the logger. :meth:`Buffer.flush` hands the buffer to a
:class:`~lib_log_stash.application.sink.Sink`, which calls
:meth:`Buffer.to_event` and fans the event out to its flows.
"""

from __future__ import annotations

import threading
import traceback
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from .constants import (
    EVENT_VERSION,
    FIELD_ERROR,
    FIELD_ERROR_MESSAGE,
    FIELD_ERROR_TRACE,
    FIELD_MESSAGE,
    FIELD_TAGS,
    FIELD_TIMESTAMP,
    FIELD_VERSION,
    FORBIDDEN_FIELDS,
)
from .fields import FieldsHash, Tags
from .message import Message
from .normalize import format_time
from .utf8 import utf8


@runtime_checkable
class BufferSink(Protocol):
    """Receiver of flushed buffers."""

    def write(self, buffer: "Buffer") -> Any: ...


class Buffer:
    """Accumulates messages, fields and tags until flushed.

    Parameters
    ----------
    sink:
        Receives the buffer on :meth:`flush`.
    buffering:
        When ``False`` every :meth:`add_message` flushes and clears the buffer
        immediately, so each message becomes its own event.
    allow_empty:
        When ``True`` a buffer holding only fields or tags still counts as
        pending and produces an event.

    Examples
    --------
    >>> class Collect:
    ...     def __init__(self):
    ...         self.events = []
    ...     def write(self, buffer):
    ...         self.events.append(buffer.to_event())
    >>> sink = Collect()
    >>> buffer = Buffer(sink)
    >>> buffer.fields['server'] = 'h1'
    >>> buffer.pending
    False
    >>> _ = buffer.add_message(Message('starting'))
    >>> buffer.pending
    True
    >>> buffer.flush() is buffer
    True
    >>> [str(m) for m in sink.events[0]['message']], sink.events[0]['server']
    (['starting'], 'h1')
    """

    def __init__(self, sink: BufferSink, *, buffering: bool = True, allow_empty: bool = False) -> None:
        self._sink = sink
        self._buffering = bool(buffering)
        self._allow_empty = bool(allow_empty)
        self._lock = threading.RLock()
        self._messages: list[Message] = []
        self._fields = FieldsHash(forbidden_keys=FORBIDDEN_FIELDS)
        self._tags = Tags()
        self._timestamp: str | None = None

    @property
    def sink(self) -> BufferSink:
        return self._sink

    @property
    def buffering(self) -> bool:
        return self._buffering

    @property
    def allow_empty(self) -> bool:
        return self._allow_empty

    @property
    def fields(self) -> FieldsHash:
        """Live field container; reserved event fields are forbidden keys."""

        return self._fields

    @property
    def tags(self) -> Tags:
        return self._tags

    @property
    def messages(self) -> list[Message]:
        """Return a copy of the messages added so far."""

        with self._lock:
            return list(self._messages)

    def add_message(self, message: Message) -> Message:
        """Append ``message`` and latch the timestamp to its time.

        Non-buffering buffers flush and clear right away, under the buffer
        lock, so concurrent calls each write their own message.
        """

        with self._lock:
            self._messages.append(message)
            self.timestamp(message.time)
            if not self._buffering:
                try:
                    self.flush()
                finally:
                    self.clear()
        return message

    def add_fields(self, fields: Any) -> FieldsHash:
        """Deep-merge ``fields`` into the buffer's fields, overwriting conflicts."""

        return self._fields.deep_update(fields, force=True, scope=self)

    def add_exception(self, exc: BaseException, *, force: bool = True) -> BaseException:
        """Record ``exc`` in the ``error``, ``error_message`` and ``error_trace`` fields.

        With ``force=False`` nothing happens when an error is already recorded.
        """

        if not force and self._fields.get(FIELD_ERROR) is not None:
            return exc
        trace = ""
        if exc.__traceback__ is not None:
            trace = "\n".join(line.rstrip("\n") for line in traceback.format_tb(exc.__traceback__))
        self._fields.update(
            {
                FIELD_ERROR: type(exc).__name__,
                FIELD_ERROR_MESSAGE: utf8(exc),
                FIELD_ERROR_TRACE: trace,
            }
        )
        return exc

    def tag(self, *tags: Any, scope: Any = None) -> Tags:
        """Add ``tags``; deferred tags are evaluated against ``scope``."""

        return self._tags.update(*tags, scope=scope)

    @property
    def pending(self) -> bool:
        """``True`` when flushing would produce an event."""

        with self._lock:
            if self._messages:
                return True
        if not self._allow_empty:
            return False
        return not self._fields.empty or not self._tags.empty

    def timestamp(self, time: datetime | None = None) -> str:
        """Return the event timestamp, setting it from ``time`` (or now) when unset.

        The first call wins; later calls return the stored value unchanged.
        """

        with self._lock:
            if self._timestamp is None:
                self._timestamp = format_time(time or datetime.now(timezone.utc))
            return self._timestamp

    def to_event(self, fields: Any = None, tags: Any = None) -> dict[str, Any]:
        """Compose the event for this buffer without mutating it.

        ``fields`` are deep-merged underneath the buffer's own fields (buffer
        values win, reserved names are skipped) and ``tags`` are added to the
        buffer's tags. Deferred values in either are evaluated with this
        buffer as their scope. The ``message`` entry is the list of
        :class:`~lib_log_stash.domain.message.Message` records.
        """

        event_fields = self._fields.deep_merge(fields, force=False, scope=self) if fields else self._fields.copy()
        event_tags = self._tags.merge(tags, scope=self) if tags else self._tags.copy()
        with self._lock:
            messages = list(self._messages)
            timestamp = self._timestamp or format_time(datetime.now(timezone.utc))
        event = event_fields.as_json()
        event[FIELD_MESSAGE] = messages
        event[FIELD_TAGS] = event_tags.to_list()
        event[FIELD_TIMESTAMP] = timestamp
        event[FIELD_VERSION] = EVENT_VERSION
        return event

    def flush(self) -> "Buffer | None":
        """Hand the buffer to the sink when pending.

        Returns the buffer when it was written, ``None`` otherwise. The buffer
        is not cleared; exceptions raised while writing propagate.
        """

        if not self.pending:
            return None
        self._sink.write(self)
        return self

    def clear(self) -> "Buffer":
        """Drop all messages, fields, tags and the latched timestamp."""

        with self._lock:
            self._messages.clear()
            self._fields.clear()
            self._tags.clear()
            self._timestamp = None
        return self


__all__ = ["Buffer", "BufferSink"]
