"""Exception types raised by the logging domain."""

from __future__ import annotations


class LogStashError(Exception):
    """Base class for errors raised by :mod:`lib_log_stash` itself."""


class ForbiddenFieldError(LogStashError, ValueError):
    """Raised when application code writes a field reserved for the buffer.

    Attributes
    ----------
    keys:
        The reserved field names the caller attempted to write.

    Examples
    --------
    >>> err = ForbiddenFieldError(["message"])
    >>> str(err)
    'Forbidden field message'
    >>> isinstance(err, ValueError)
    True
    """

    def __init__(self, keys: list[str] | tuple[str, ...]) -> None:
        self.keys = tuple(keys)
        label = "field" if len(self.keys) == 1 else "fields"
        super().__init__(f"Forbidden {label} {', '.join(self.keys)}")


__all__ = ["ForbiddenFieldError", "LogStashError"]
