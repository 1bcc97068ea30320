"""Adapter forwarding encoded events to a stdlib :class:`logging.Logger`."""

from __future__ import annotations

import logging
from typing import Any

from ...domain.levels import Severity
from .base import BaseAdapter


class LoggerAdapter(BaseAdapter):
    """Log every encoded event on ``logger`` at ``severity``.

    A trailing newline is removed from string events since the stdlib handlers
    add their own.
    """

    def __init__(self, logger: logging.Logger, *, severity: Severity | int | str = Severity.INFO) -> None:
        if not callable(getattr(logger, "log", None)):
            raise TypeError(f"{logger!r} does not look like a logger")
        self.logger = logger
        self.severity = Severity.coerce(severity)

    def write_single(self, encoded: Any) -> None:
        if isinstance(encoded, str) and encoded.endswith("\n"):
            encoded = encoded[:-1]
        self.logger.log(self.severity.to_python_level(), encoded)

    def close(self) -> None:
        for handler in list(getattr(self.logger, "handlers", [])):
            handler.flush()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.logger!r})"


__all__ = ["LoggerAdapter"]
