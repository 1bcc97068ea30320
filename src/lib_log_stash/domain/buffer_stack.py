"""Stack of buffers belonging to one logger and execution context."""

from __future__ import annotations

import threading
from typing import Any

from .buffer import Buffer, BufferSink


class BufferStack:
    """Nested buffers; log calls always go to the innermost one.

    When nothing was pushed, :attr:`current` lazily creates a non-buffering
    buffer so every message is written as its own event.

    Examples
    --------
    >>> class Discard:
    ...     def write(self, buffer):
    ...         pass
    >>> stack = BufferStack(Discard())
    >>> stack.current.buffering
    False
    >>> outer = stack.push(allow_empty=True)
    >>> stack.current is outer, len(stack)
    (True, 2)
    >>> stack.pop() is outer
    True
    """

    def __init__(self, sink: BufferSink) -> None:
        self._sink = sink
        self._stack: list[Buffer] = []
        self._lock = threading.Lock()

    @property
    def sink(self) -> BufferSink:
        return self._sink

    @property
    def current(self) -> Buffer:
        with self._lock:
            if not self._stack:
                self._stack.append(Buffer(self._sink, buffering=False))
            return self._stack[-1]

    def push(self, **buffer_args: Any) -> Buffer:
        """Create a new buffer on top of the stack and return it."""

        buffer = Buffer(self._sink, **buffer_args)
        with self._lock:
            self._stack.append(buffer)
        return buffer

    def pop(self) -> Buffer | None:
        """Remove the innermost buffer, flush it, and return it."""

        with self._lock:
            buffer = self._stack.pop() if self._stack else None
        if buffer is not None:
            buffer.flush()
        return buffer

    def __len__(self) -> int:
        with self._lock:
            return len(self._stack)


__all__ = ["BufferStack"]
