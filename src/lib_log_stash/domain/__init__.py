"""Domain model of the logging core: values, containers, messages and buffers."""

from __future__ import annotations

from .buffer import Buffer, BufferSink
from .buffer_stack import BufferStack
from .errors import ForbiddenFieldError, LogStashError
from .fields import FieldsArray, FieldsHash, Tags
from .levels import Severity
from .message import Message
from .normalize import Deferred

__all__ = [
    "Buffer",
    "BufferSink",
    "BufferStack",
    "Deferred",
    "FieldsArray",
    "FieldsHash",
    "ForbiddenFieldError",
    "LogStashError",
    "Message",
    "Severity",
    "Tags",
]
