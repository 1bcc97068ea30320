"""Resolve :func:`lib_log_stash.init` arguments and environment overrides.

Purpose
-------
Collapse keyword arguments plus ``LOG_STASH_*`` environment variables into
one immutable :class:`RuntimeSettings` value the composition root can trust.

Contents
--------
* :data:`ENV_PREFIX` and the ``ENV_*`` names of the recognised variables.
* :class:`RuntimeSettings` – frozen, validated settings.
* :func:`build_runtime_settings` – merge arguments with the environment.

System Role
-----------
Configuration boundary of the runtime package. Environment values win over
arguments so operators can retune logging without code changes; invalid
values raise :class:`ValueError` naming the offending variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..domain.levels import Severity

ENV_PREFIX = "LOG_STASH_"
ENV_LEVEL = f"{ENV_PREFIX}LEVEL"
ENV_ENCODER = f"{ENV_PREFIX}ENCODER"
ENV_TARGET = f"{ENV_PREFIX}TARGET"
ENV_BUFFERING = f"{ENV_PREFIX}BUFFERING"
ENV_ALLOW_EMPTY = f"{ENV_PREFIX}ALLOW_EMPTY"
ENV_PROGNAME = f"{ENV_PREFIX}PROGNAME"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class RuntimeSettings:
    """Validated settings for one logging runtime.

    ``target`` is any device the adapter registry resolves (``"console"``, a
    path, a ``file://`` URI, a stream, ...). ``encoder`` is an encoder name,
    class or object; ``None`` keeps the adapter's default.
    """

    target: Any = "console"
    encoder: Any = None
    level: Severity = Severity.DEBUG
    buffering: bool = True
    allow_empty: bool = False
    progname: str = "lib_log_stash"
    default_fields: Mapping[str, Any] = field(default_factory=dict)
    default_tags: Sequence[str] = ()
    force_color: bool = False
    no_color: bool = False


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag (1/0, true/false, yes/no, on/off), got {raw!r}")


def _env_text(name: str, default: Any) -> Any:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _resolve_level(level: Severity | int | str) -> Severity:
    raw = os.getenv(ENV_LEVEL)
    if raw is not None and raw.strip():
        try:
            return Severity.from_name(raw.strip())
        except ValueError as exc:
            raise ValueError(f"{ENV_LEVEL} must name a severity, got {raw!r}") from exc
    return Severity.coerce(level)


def build_runtime_settings(
    *,
    target: Any = "console",
    encoder: Any = None,
    level: Severity | int | str = Severity.DEBUG,
    buffering: bool = True,
    allow_empty: bool = False,
    progname: str = "lib_log_stash",
    default_fields: Mapping[str, Any] | None = None,
    default_tags: Sequence[str] | None = None,
    force_color: bool = False,
    no_color: bool = False,
) -> RuntimeSettings:
    """Return :class:`RuntimeSettings` with environment overrides applied.

    Examples
    --------
    >>> build_runtime_settings(level='warn').level
    <Severity.WARN: 2>
    """

    if default_fields is not None and not isinstance(default_fields, Mapping):
        raise TypeError("default_fields must be a mapping")
    if isinstance(default_tags, str):
        raise TypeError("default_tags must be a sequence of tags, not a string")
    return RuntimeSettings(
        target=_env_text(ENV_TARGET, target),
        encoder=_env_text(ENV_ENCODER, encoder),
        level=_resolve_level(level),
        buffering=_env_bool(ENV_BUFFERING, buffering),
        allow_empty=_env_bool(ENV_ALLOW_EMPTY, allow_empty),
        progname=_env_text(ENV_PROGNAME, progname),
        default_fields=dict(default_fields or {}),
        default_tags=tuple(default_tags or ()),
        force_color=force_color,
        no_color=no_color,
    )


__all__ = [
    "ENV_ALLOW_EMPTY",
    "ENV_BUFFERING",
    "ENV_ENCODER",
    "ENV_LEVEL",
    "ENV_PREFIX",
    "ENV_PROGNAME",
    "ENV_TARGET",
    "RuntimeSettings",
    "build_runtime_settings",
]
