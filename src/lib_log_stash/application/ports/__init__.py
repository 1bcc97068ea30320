"""Protocols the application layer depends on."""

from __future__ import annotations

from .adapter import AdapterPort
from .encoder import EncoderPort
from .filter import FilterPort

__all__ = ["AdapterPort", "EncoderPort", "FilterPort"]
