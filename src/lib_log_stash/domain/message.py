"""Immutable log message records.

Purpose
-------
Capture one log call (text, severity, time, program name) at the moment it
happens so later buffer composition never observes later mutations of the
logged object.

Contents
--------
* :class:`Message` – frozen record appended to a buffer.
* :func:`format_message` – default conversion of a logged object to text.
* :func:`clean_text` – UTF-8 cleanup that strips ANSI colour codes and
  normalises line endings.

System Role
-----------
Created by :class:`~lib_log_stash.runtime.logger.Logger`, stored by
:class:`~lib_log_stash.domain.buffer.Buffer`, rendered by the encoders.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from .levels import Severity
from .normalize import format_exception
from .utf8 import utf8

ANSI_COLOR = re.compile(r"\x1b\[[0-9;]*m")

Formatter = Callable[[Severity, datetime, "str | None", Any], Any]


def clean_text(value: Any) -> str:
    """Return UTF-8 text without colour codes and with ``\\n`` line endings.

    Examples
    --------
    >>> clean_text('\\x1b[31mred\\x1b[0m\\r\\nnext')
    'red\\nnext'
    """

    text = utf8(value).replace("\r\n", "\n").replace("\r", "\n")
    return ANSI_COLOR.sub("", text)


def format_message(severity: Severity, time: datetime, progname: str | None, msg: Any) -> str:
    """Render ``msg`` as text: strings as-is, exceptions with their traceback,
    anything else through ``repr()``."""

    if isinstance(msg, str):
        return utf8(msg)
    if isinstance(msg, BaseException):
        return format_exception(msg)
    return utf8(repr(msg))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """One logged line.

    Attributes
    ----------
    text:
        Cleaned message text; see :func:`clean_text`.
    severity:
        Clamped into the :class:`Severity` range.
    time:
        Creation time, timezone-aware.
    progname:
        Optional program name supplied by the logger.

    Examples
    --------
    >>> msg = Message('hello', severity=Severity.WARN)
    >>> str(msg), msg.severity_label, len(msg)
    ('hello', 'WARN', 5)
    >>> Message('x', severity=-3).severity
    <Severity.DEBUG: 0>
    """

    text: str
    severity: Severity = Severity.UNKNOWN
    time: datetime = field(default_factory=_utcnow)
    progname: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", clean_text(self.text))
        object.__setattr__(self, "severity", Severity.coerce(self.severity))
        if self.time.tzinfo is None:
            object.__setattr__(self, "time", self.time.replace(tzinfo=timezone.utc))

    @classmethod
    def build(
        cls,
        msg: Any,
        *,
        severity: Severity | int = Severity.UNKNOWN,
        time: datetime | None = None,
        progname: str | None = None,
        formatter: Formatter = format_message,
    ) -> "Message":
        """Create a message by running ``msg`` through ``formatter`` first."""

        severity = Severity.coerce(severity)
        time = time or _utcnow()
        return cls(utf8(formatter(severity, time, progname, msg)), severity=severity, time=time, progname=progname)

    @property
    def severity_label(self) -> str:
        return self.severity.label

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return len(self.text)

    def as_json(self) -> str:
        return self.text


__all__ = ["ANSI_COLOR", "Formatter", "Message", "clean_text", "format_message"]
