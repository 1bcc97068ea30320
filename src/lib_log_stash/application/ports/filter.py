"""Filter port for steps of a filter chain."""

from __future__ import annotations

from typing import Any, Literal, Protocol, runtime_checkable


@runtime_checkable
class FilterPort(Protocol):
    """Transform an event in place, or return ``False`` to drop it."""

    def __call__(self, event: dict[str, Any]) -> dict[str, Any] | Literal[False]:
        """Return the (possibly mutated) event or ``False``."""


__all__ = ["FilterPort"]
