"""Runtime façade that wires the structured logging pipeline.

Purpose
-------
Expose a stable entry point (`init`, `get`, `shutdown`) that host
applications use instead of assembling loggers, sinks, flows and adapters
themselves.

Contents
--------
* ``init`` – composition root building the process-wide logger.
* ``get`` – accessor for that logger.
* ``shutdown`` – flush the calling context's buffers and close the adapters.
* ``inspect_runtime`` – read-only snapshot of the active settings.
* ``summary_info`` – metadata banner shared with the CLI.
* :class:`Logger` – for hosts that prefer building loggers directly.

System Role
-----------
Outer shell of the package: the domain and application layers stay free of
global state, and only this module keeps a singleton.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from lib_log_stash.domain.levels import Severity

from ._composition import build_runtime
from ._settings import RuntimeSettings, build_runtime_settings
from ._state import clear_runtime, current_runtime, is_initialised, set_runtime
from .logger import Logger


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Immutable view over the active logging runtime."""

    target: str
    encoder: str
    level: Severity
    progname: str
    buffering: bool
    allow_empty: bool


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the current runtime state."""

    runtime = current_runtime()
    flow = runtime.logger.sink.flows.first()
    return RuntimeSnapshot(
        target=repr(flow.adapter) if flow is not None else "",
        encoder=type(flow.encoder).__name__ if flow is not None else "",
        level=runtime.logger.level,
        progname=runtime.logger.progname,
        buffering=runtime.settings.buffering,
        allow_empty=runtime.settings.allow_empty,
    )


def init(
    *,
    target: Any = "console",
    encoder: Any = None,
    level: str | int | Severity = Severity.DEBUG,
    buffering: bool = True,
    allow_empty: bool = False,
    progname: str = "lib_log_stash",
    default_fields: Mapping[str, Any] | None = None,
    default_tags: Sequence[str] | None = None,
    force_color: bool = False,
    no_color: bool = False,
) -> Logger:
    """Compose the process-wide logger and return it.

    Inputs
    ------
    target:
        ``"console"`` (Rich), a path, a ``file://`` URI, a stream, a stdlib
        logger, a callable or ``None``.
    encoder:
        Encoder name (``json``, ``logstash``, ``lograge``, ``message``,
        ``hash``, ``raw``), class or object.
    level, progname:
        Logger threshold and program name.
    buffering, allow_empty:
        Defaults for buffers started with ``with_buffer``/``push_buffer``.
    default_fields, default_tags:
        Added to every event written by the logger.
    force_color, no_color:
        Colour switches of the console target.

    ``LOG_STASH_*`` environment variables override the matching arguments.

    Side Effects
    ------------
    Raises :class:`RuntimeError` if called while a runtime is already active.
    """

    if is_initialised():
        raise RuntimeError(
            "lib_log_stash.init() cannot be called twice without shutdown(); call lib_log_stash.shutdown() first",
        )

    settings = build_runtime_settings(
        target=target,
        encoder=encoder,
        level=level,
        buffering=buffering,
        allow_empty=allow_empty,
        progname=progname,
        default_fields=default_fields,
        default_tags=default_tags,
        force_color=force_color,
        no_color=no_color,
    )
    runtime = build_runtime(settings)
    set_runtime(runtime)
    return runtime.logger


def get() -> Logger:
    """Return the logger composed by :func:`init`.

    Raises :class:`RuntimeError` when ``init`` has not been called.
    """

    return current_runtime().logger


def shutdown() -> None:
    """Flush pending buffers of the calling context, close adapters, clear state.

    Side Effects
    ------------
    Raises :class:`RuntimeError` when no runtime is active. Adapter errors
    propagate after the runtime has been cleared; adapters are closed even
    when flushing a buffer fails.
    """

    runtime = current_runtime()
    clear_runtime()
    logger = runtime.logger
    try:
        while logger.pop_buffer() is not None:
            pass
    finally:
        logger.close()


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point and docs."""

    from .. import __init__conf__

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


__all__ = [
    "Logger",
    "RuntimeSettings",
    "RuntimeSnapshot",
    "get",
    "init",
    "inspect_runtime",
    "is_initialised",
    "shutdown",
    "summary_info",
]
