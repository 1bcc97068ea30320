"""Adapter discarding every event."""

from __future__ import annotations

from typing import Any

from ...application.ports import EncoderPort
from ..encoders import RawEncoder
from .base import BaseAdapter


class NullAdapter(BaseAdapter):
    """Accept events and drop them; used for ``None`` devices."""

    def __init__(self, *_: Any) -> None:
        pass

    def default_encoder(self) -> EncoderPort:
        return RawEncoder()

    def write_single(self, encoded: Any) -> None:
        return None


__all__ = ["NullAdapter"]
