"""Device adapters writing encoded events to their destination."""

from __future__ import annotations

from .base import BaseAdapter
from .callable import CallableAdapter
from .file import ROTATIONS, FileAdapter, rotated_name
from .logger import LoggerAdapter
from .null import NullAdapter
from .registry import AdapterRegistry, adapter_registry
from .rich_console import RichConsoleAdapter
from .stream import IOAdapter, stream_lock

__all__ = [
    "AdapterRegistry",
    "BaseAdapter",
    "CallableAdapter",
    "FileAdapter",
    "IOAdapter",
    "LoggerAdapter",
    "NullAdapter",
    "ROTATIONS",
    "RichConsoleAdapter",
    "adapter_registry",
    "rotated_name",
    "stream_lock",
]
