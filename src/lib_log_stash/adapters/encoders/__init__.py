"""Encoders turning events into their written representation."""

from __future__ import annotations

from ...application.registry import ClassRegistry
from .lograge import LogrageEncoder
from .message import MessageEncoder
from .structured import HashEncoder, JSONEncoder, LogstashEncoder, RawEncoder


def encoder_registry() -> ClassRegistry[object]:
    """Return a new registry holding the built-in encoders under their short names."""

    registry: ClassRegistry[object] = ClassRegistry("encoder")
    registry.register(JSONEncoder, "json")
    registry.register(LogstashEncoder, "logstash")
    registry.register(LogrageEncoder, "lograge")
    registry.register(MessageEncoder, "message")
    registry.register(HashEncoder, "hash")
    registry.register(RawEncoder, "raw")
    return registry


__all__ = [
    "HashEncoder",
    "JSONEncoder",
    "LogrageEncoder",
    "LogstashEncoder",
    "MessageEncoder",
    "RawEncoder",
    "encoder_registry",
]
