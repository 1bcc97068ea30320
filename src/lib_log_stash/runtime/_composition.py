"""Runtime composition helpers wiring domain, application, and adapters.

Purpose
-------
Translate :class:`~lib_log_stash.runtime._settings.RuntimeSettings` into a
live :class:`~lib_log_stash.runtime._state.LoggingRuntime`: resolve the
target device, pick the encoder, and put a logger in front of the sink.

System Role
-----------
The only place that knows about every layer at once; the runtime façade in
:mod:`lib_log_stash.runtime` calls :func:`build_runtime` and nothing else.
"""

from __future__ import annotations

from typing import Any

from lib_log_stash.adapters.sinks import AdapterRegistry, RichConsoleAdapter, adapter_registry
from lib_log_stash.application import Flow, Sink
from lib_log_stash.application.ports import AdapterPort

from ._settings import RuntimeSettings
from ._state import LoggingRuntime
from .logger import Logger

CONSOLE_TARGET = "console"


def create_adapter(settings: RuntimeSettings, registry: AdapterRegistry | None = None) -> AdapterPort:
    """Return the adapter for ``settings.target``.

    The console target honours the colour switches; everything else goes
    through the adapter registry.

    Examples
    --------
    >>> create_adapter(RuntimeSettings(target=None))
    NullAdapter()
    """

    target: Any = settings.target
    if target == CONSOLE_TARGET:
        return RichConsoleAdapter(force_color=settings.force_color, no_color=settings.no_color)
    return (registry or adapter_registry()).resolve(target)


def build_runtime(settings: RuntimeSettings, *, registry: AdapterRegistry | None = None) -> LoggingRuntime:
    """Assemble the logging runtime from resolved settings."""

    flow = Flow(create_adapter(settings, registry), encoder=settings.encoder)
    sink = Sink(flow, default_fields=dict(settings.default_fields), default_tags=list(settings.default_tags))
    logger = Logger(
        sink=sink,
        level=settings.level,
        progname=settings.progname,
        buffering=settings.buffering,
        allow_empty=settings.allow_empty,
    )
    return LoggingRuntime(logger=logger, settings=settings)


__all__ = ["CONSOLE_TARGET", "build_runtime", "create_adapter"]
