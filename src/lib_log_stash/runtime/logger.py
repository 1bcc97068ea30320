"""Logger front end collecting messages, fields and tags into buffers.

Purpose
-------
Offer the familiar ``debug``/``info``/``warn``/``error`` API while routing
everything into the innermost buffer of the caller's execution context, so a
unit of work (a request, a job) can be written as one structured event.

Contents
--------
* :class:`Logger` – the public front end.

System Role
-----------
Outermost layer used by applications; composed by :func:`lib_log_stash.init`
or built directly around a :class:`~lib_log_stash.application.sink.Sink`.
Buffer stacks live in a :class:`contextvars.ContextVar` so every thread and
every asyncio task started from a fresh context gets its own stack.
"""

from __future__ import annotations

import contextvars
import itertools
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Mapping

from ..application.sink import Sink
from ..domain.buffer import Buffer
from ..domain.buffer_stack import BufferStack
from ..domain.fields import FieldsHash, Tags
from ..domain.levels import Severity
from ..domain.message import Formatter, Message, format_message
from ..domain.normalize import is_deferred

PROGNAME = "lib_log_stash"

_LOGGER_IDS = itertools.count()


class Logger:
    """Structured logger writing buffered events to a sink.

    Parameters
    ----------
    targets:
        Flows or devices for a new :class:`Sink`; ignored when ``sink`` is
        given.
    sink:
        Existing sink to write to.
    level:
        Minimum severity of messages that are kept.
    progname:
        Program name handed to the formatter.
    formatter:
        ``formatter(severity, time, progname, msg) -> str``.
    buffering, allow_empty:
        Defaults for buffers started with :meth:`push_buffer` and
        :meth:`with_buffer`.

    Examples
    --------
    >>> events = []
    >>> logger = Logger(events.append)
    >>> _ = logger.info('hello')
    >>> events[0]['message']
    'hello'
    >>> with logger.with_buffer() as buffer:
    ...     _ = logger.warn('first\\n')
    ...     _ = logger.error('second')
    ...     _ = logger.fields.update({'user': 'ada'})
    >>> events[1]['message'], events[1]['user']
    ('first\\nsecond', 'ada')
    """

    def __init__(
        self,
        *targets: Any,
        sink: Sink | None = None,
        level: Severity | int | str = Severity.DEBUG,
        progname: str = PROGNAME,
        formatter: Formatter | None = None,
        buffering: bool = True,
        allow_empty: bool = False,
    ) -> None:
        self._sink = sink if sink is not None else Sink(*targets)
        self.level = level
        self.progname = progname
        self.formatter = formatter or format_message
        self.buffering = bool(buffering)
        self.allow_empty = bool(allow_empty)
        self._stacks: contextvars.ContextVar[BufferStack | None] = contextvars.ContextVar(
            f"lib_log_stash_buffer_stack_{next(_LOGGER_IDS)}", default=None
        )

    @property
    def sink(self) -> Sink:
        return self._sink

    @property
    def level(self) -> Severity:
        return self._level

    @level.setter
    def level(self, level: Severity | int | str) -> None:
        self._level = Severity.coerce(level)

    @property
    def formatter(self) -> Formatter:
        return self._formatter

    @formatter.setter
    def formatter(self, formatter: Formatter) -> None:
        if not callable(formatter):
            raise TypeError("formatter must be callable")
        self._formatter = formatter

    @property
    def buffer_stack(self) -> BufferStack:
        """Buffer stack of the current execution context."""

        stack = self._stacks.get()
        if stack is None:
            stack = BufferStack(self._sink)
            self._stacks.set(stack)
        return stack

    @property
    def buffer(self) -> Buffer:
        """Innermost buffer of the current execution context."""

        return self.buffer_stack.current

    @property
    def fields(self) -> FieldsHash:
        return self.buffer.fields

    @property
    def tags(self) -> Tags:
        return self.buffer.tags

    def tag(self, *tags: Any, scope: Any = None) -> Tags:
        return self.buffer.tag(*tags, scope=scope)

    def timestamp(self, time: datetime | None = None) -> str:
        return self.buffer.timestamp(time)

    def add_exception(self, exc: BaseException, *, force: bool = True) -> BaseException:
        return self.buffer.add_exception(exc, force=force)

    def is_enabled_for(self, severity: Severity | int | str) -> bool:
        return Severity.coerce(severity) >= self._level

    def add(self, severity: Severity | int | str | None, msg: Any = None, progname: str | None = None) -> Message | None:
        """Log ``msg`` with ``severity`` into the current buffer.

        A mapping is merged into the buffer's fields instead of becoming a
        message. A deferred ``msg`` is only evaluated when the severity passes
        the level. Returns the message, or ``None`` when nothing was logged.
        """

        severity = Severity.UNKNOWN if severity is None else Severity.coerce(severity)
        if severity < self._level:
            return None
        if msg is None:
            msg, progname = progname, self.progname
        elif progname is None:
            progname = self.progname
        if is_deferred(msg):
            msg = msg()

        buffer = self.buffer
        if isinstance(msg, Mapping):
            buffer.add_fields(msg)
            return None
        message = Message.build(msg, severity=severity, progname=progname, formatter=self._formatter)
        return buffer.add_message(message)

    log = add

    def debug(self, msg: Any = None, progname: str | None = None) -> Message | None:
        return self.add(Severity.DEBUG, msg, progname)

    def info(self, msg: Any = None, progname: str | None = None) -> Message | None:
        return self.add(Severity.INFO, msg, progname)

    def warn(self, msg: Any = None, progname: str | None = None) -> Message | None:
        return self.add(Severity.WARN, msg, progname)

    warning = warn

    def error(self, msg: Any = None, progname: str | None = None) -> Message | None:
        return self.add(Severity.ERROR, msg, progname)

    def fatal(self, msg: Any = None, progname: str | None = None) -> Message | None:
        return self.add(Severity.FATAL, msg, progname)

    critical = fatal

    def unknown(self, msg: Any = None, progname: str | None = None) -> Message | None:
        return self.add(Severity.UNKNOWN, msg, progname)

    def raw(self, msg: Any) -> Message | None:
        """Add ``msg`` with severity ``UNKNOWN`` regardless of the level."""

        message = Message.build(msg, severity=Severity.UNKNOWN, progname=self.progname, formatter=self._formatter)
        return self.buffer.add_message(message)

    def __lshift__(self, msg: Any) -> "Logger":
        self.raw(msg)
        return self

    def push_buffer(self, **buffer_args: Any) -> Buffer:
        """Start a new innermost buffer; ``buffer_args`` go to :class:`Buffer`."""

        options = {"buffering": self.buffering, "allow_empty": self.allow_empty}
        options.update(buffer_args)
        return self.buffer_stack.push(**options)

    def pop_buffer(self) -> Buffer | None:
        """Flush and remove the innermost pushed buffer."""

        return self.buffer_stack.pop()

    @contextmanager
    def with_buffer(self, **buffer_args: Any) -> Iterator[Buffer]:
        """Collect everything logged inside the block into one event."""

        buffer = self.push_buffer(**buffer_args)
        try:
            yield buffer
        finally:
            self.pop_buffer()

    def close(self) -> None:
        self._sink.close()

    def reopen(self) -> None:
        self._sink.reopen()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(level={self._level.label}, progname={self.progname!r})"


__all__ = ["Logger", "PROGNAME"]
