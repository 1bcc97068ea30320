"""Encoder port turning events into their wire representation."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EncoderPort(Protocol):
    """Convert an event into a string or structured value."""

    def encode(self, event: dict[str, Any]) -> Any:
        """Return the representation of ``event`` without keeping a reference to it."""


__all__ = ["EncoderPort"]
