"""Adapter writing lines to an already open text or binary stream."""

from __future__ import annotations

import io
import sys
import threading
import weakref
from typing import IO, Any

from .base import BaseAdapter

_STREAM_LOCKS: "weakref.WeakKeyDictionary[Any, threading.Lock]" = weakref.WeakKeyDictionary()
_STREAM_LOCKS_GUARD = threading.Lock()


def stream_lock(stream: Any) -> threading.Lock:
    """Return the lock shared by all adapters writing to ``stream``."""

    with _STREAM_LOCKS_GUARD:
        try:
            lock = _STREAM_LOCKS.get(stream)
            if lock is None:
                lock = _STREAM_LOCKS[stream] = threading.Lock()
        except TypeError:
            # Streams without weak reference support get a lock of their own.
            lock = threading.Lock()
        return lock


def _is_standard_stream(stream: Any) -> bool:
    return any(stream is candidate for candidate in (sys.stdout, sys.stderr, sys.__stdout__, sys.__stderr__))


class IOAdapter(BaseAdapter):
    """Write each event as one line to ``stream``.

    Writes to the same stream are serialised across adapters. The process's
    standard streams are never closed by :meth:`close`.

    Examples
    --------
    >>> from io import StringIO
    >>> buffer = StringIO()
    >>> IOAdapter(buffer).write('{"message":"hi"}')
    >>> buffer.getvalue()
    '{"message":"hi"}\\n'
    """

    def __init__(self, stream: IO[Any], *, flush_immediately: bool = False) -> None:
        if not (callable(getattr(stream, "write", None)) and callable(getattr(stream, "close", None))):
            raise TypeError(f"{stream!r} does not look like a stream")
        self.stream = stream
        self.flush_immediately = bool(flush_immediately)
        self._lock = stream_lock(stream)
        self._binary = isinstance(stream, (io.RawIOBase, io.BufferedIOBase)) or "b" in str(getattr(stream, "mode", ""))

    def write_single(self, encoded: Any) -> None:
        line = self.normalize_line(encoded)
        if not line:
            return
        payload: Any = line.encode("utf-8") if self._binary else line
        with self._lock:
            self.stream.write(payload)
            if self.flush_immediately:
                self.stream.flush()

    def close(self) -> None:
        if _is_standard_stream(self.stream):
            with self._lock:
                self.stream.flush()
            return
        with self._lock:
            self.stream.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.stream!r})"


__all__ = ["IOAdapter", "stream_lock"]
