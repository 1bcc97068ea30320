"""Message severities.

Purpose
-------
Name the six severities a message can carry, render their labels for text
encoders, and translate to and from the stdlib :mod:`logging` levels.

Contents
--------
* :class:`Severity` – ordered integer enum with conversion helpers.
* ``_LABELS`` – labels rendered by text encoders.

System Role
-----------
Used by :class:`~lib_log_stash.domain.message.Message`, the logger front end
for level filtering, and the stdlib logger adapter.
"""

from __future__ import annotations

import logging
from enum import IntEnum


class Severity(IntEnum):
    """Ordered severities; higher values are more severe."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4
    UNKNOWN = 5

    @property
    def label(self) -> str:
        """Return the upper-case label used in text output.

        Examples
        --------
        >>> Severity.WARN.label, Severity.UNKNOWN.label
        ('WARN', 'ANY')
        """

        return _LABELS[self]

    def to_python_level(self) -> int:
        """Return the :mod:`logging` constant matching this severity."""

        return _PYTHON_LEVELS[self]

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        """Parse ``name`` case-insensitively, accepting stdlib aliases.

        Examples
        --------
        >>> Severity.from_name(' warning ')
        <Severity.WARN: 2>
        """

        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown severity: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "Severity":
        """Return the severity closest to a stdlib ``logging`` level integer."""

        for severity in sorted(cls, reverse=True):
            if severity is not cls.UNKNOWN and level >= _PYTHON_LEVELS[severity]:
                return severity
        return cls.DEBUG

    @classmethod
    def coerce(cls, value: "Severity | int | str") -> "Severity":
        """Return ``value`` as a severity; integers are clamped into range."""

        if isinstance(value, Severity):
            return value
        if isinstance(value, str):
            return cls.from_name(value)
        return cls(min(max(int(value), cls.DEBUG), cls.UNKNOWN))


_LABELS = {
    Severity.DEBUG: "DEBUG",
    Severity.INFO: "INFO",
    Severity.WARN: "WARN",
    Severity.ERROR: "ERROR",
    Severity.FATAL: "FATAL",
    Severity.UNKNOWN: "ANY",
}

_PYTHON_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
    Severity.UNKNOWN: logging.CRITICAL,
}

_ALIASES = {"WARNING": "WARN", "CRITICAL": "FATAL", "ANY": "UNKNOWN"}


__all__ = ["Severity"]
