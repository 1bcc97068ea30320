"""Encoders producing structured output: JSON, Logstash JSON, dicts.

Contents
--------
* :class:`JSONEncoder` – one compact JSON document per event.
* :class:`LogstashEncoder` – JSON with the ``@version`` field guaranteed.
* :class:`HashEncoder` – plain ``dict`` for in-process consumers.
* :class:`RawEncoder` – the event object unchanged.
"""

from __future__ import annotations

import json
from typing import Any

from ...domain.constants import EVENT_VERSION, FIELD_VERSION
from ._helpers import normalize_message, normalize_timestamp, plain


class JSONEncoder:
    """Serialise events as single-line JSON.

    Examples
    --------
    >>> JSONEncoder().encode({'message': ['a', 'b'], 'n': 1})
    '{"message":"ab","n":1}'
    """

    def encode(self, event: dict[str, Any]) -> str:
        normalize_message(event)
        normalize_timestamp(event)
        return json.dumps(plain(event), ensure_ascii=False, separators=(",", ":"), allow_nan=False)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LogstashEncoder(JSONEncoder):
    """JSON in the Logstash event schema (``@version`` defaults to ``"1"``)."""

    def encode(self, event: dict[str, Any]) -> str:
        if event.get(FIELD_VERSION) is None:
            event[FIELD_VERSION] = EVENT_VERSION
        return super().encode(event)


class HashEncoder:
    """Return the event as a plain, JSON-compatible ``dict``."""

    def encode(self, event: dict[str, Any]) -> dict[str, Any]:
        normalize_message(event)
        normalize_timestamp(event)
        return plain(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RawEncoder:
    """Pass the event through untouched."""

    def encode(self, event: Any) -> Any:
        return event

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["HashEncoder", "JSONEncoder", "LogstashEncoder", "RawEncoder"]
