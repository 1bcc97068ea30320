"""Structured, buffered logging: collect messages, fields and tags per unit of
work and write them as one event through filters, encoders and adapters.

Hosts either call :func:`init` once and fetch the shared logger with
:func:`get`, or build :class:`Logger` / :class:`Sink` / :class:`Flow` objects
directly.
"""

from __future__ import annotations

from .application import ClassRegistry, FilterChain, Flow, Flows, Sink, build_filter
from .domain import (
    Buffer,
    BufferStack,
    Deferred,
    FieldsArray,
    FieldsHash,
    ForbiddenFieldError,
    LogStashError,
    Message,
    Severity,
    Tags,
)
from .runtime import Logger, RuntimeSnapshot, get, init, inspect_runtime, is_initialised, shutdown, summary_info

__all__ = [
    "Buffer",
    "BufferStack",
    "ClassRegistry",
    "Deferred",
    "FieldsArray",
    "FieldsHash",
    "FilterChain",
    "Flow",
    "Flows",
    "ForbiddenFieldError",
    "LogStashError",
    "Logger",
    "Message",
    "RuntimeSnapshot",
    "Severity",
    "Sink",
    "Tags",
    "build_filter",
    "get",
    "init",
    "inspect_runtime",
    "is_initialised",
    "shutdown",
    "summary_info",
]
