"""Adapter handing encoded events to a Python callable."""

from __future__ import annotations

from typing import Any, Callable

from ...application.ports import EncoderPort
from ..encoders import HashEncoder
from .base import BaseAdapter


class CallableAdapter(BaseAdapter):
    """Call ``fn(encoded)`` for every event; events default to plain ``dict`` form.

    Examples
    --------
    >>> seen = []
    >>> adapter = CallableAdapter(seen.append)
    >>> adapter.write(adapter.default_encoder().encode({'message': ['hi']}))
    >>> seen
    [{'message': 'hi'}]
    """

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        if not callable(fn):
            raise TypeError(f"{fn!r} is not callable")
        self.fn = fn

    def default_encoder(self) -> EncoderPort:
        return HashEncoder()

    def write_single(self, encoded: Any) -> None:
        self.fn(encoded)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.fn!r})"


__all__ = ["CallableAdapter"]
