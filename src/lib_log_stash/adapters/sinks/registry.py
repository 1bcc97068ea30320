"""Resolve log devices to adapter instances.

Purpose
-------
Turn whatever a caller passes as a log target (``None``, a path, a
``file://`` URI, an open stream, a stdlib :class:`logging.Logger`, a plain
callable, or a short adapter name such as ``"console"``) into an adapter.

Contents
--------
* :class:`AdapterRegistry` – ordered scheme, name and type lookups.
* :func:`adapter_registry` – registry pre-populated with the built-in adapters.

System Role
-----------
:class:`~lib_log_stash.application.flow.Flow` consults a registry when it is
given something other than an adapter object.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, Callable
from urllib.parse import urlparse

from ...application.ports import AdapterPort
from ...application.registry import ClassRegistry
from .base import BaseAdapter
from .callable import CallableAdapter
from .file import FileAdapter
from .logger import LoggerAdapter
from .null import NullAdapter
from .rich_console import RichConsoleAdapter
from .stream import IOAdapter

LOGGER = logging.getLogger(__name__)

Matcher = Callable[[Any], bool]

_URI_SCHEME = re.compile(r"\A[A-Za-z][A-Za-z0-9+.\-]*:")
_WINDOWS_DRIVE = re.compile(r"\A[A-Za-z]:[\\/]")


def _is_stream(device: Any) -> bool:
    return callable(getattr(device, "write", None)) and callable(getattr(device, "close", None))


class AdapterRegistry:
    """Ordered lookups mapping devices to adapter factories.

    Strings are first matched against registered adapter names, then against
    URI schemes; everything else is tried against the type matchers in
    registration order.

    Examples
    --------
    >>> registry = adapter_registry()
    >>> registry.resolve(None)
    NullAdapter()
    >>> type(registry.resolve(print)).__name__
    'CallableAdapter'
    >>> registry.resolve(42)
    Traceback (most recent call last):
    ...
    ValueError: No log adapter found for 42
    """

    def __init__(self) -> None:
        self._names: ClassRegistry[BaseAdapter] = ClassRegistry("adapter")
        self._schemes: dict[str, Callable[[str], AdapterPort]] = {}
        self._types: list[tuple[Matcher, Callable[[Any], AdapterPort]]] = []

    def register(self, adapter_class: type[BaseAdapter], *names: str) -> type[BaseAdapter]:
        """Make ``adapter_class`` available under ``names`` (built without arguments)."""

        return self._names.register(adapter_class, *names)

    def register_scheme(self, scheme: str, factory: Callable[[str], AdapterPort]) -> None:
        """Build adapters for ``scheme://...`` strings with ``factory(uri)``."""

        self._schemes[scheme.lower()] = factory

    def register_type(self, matcher: type | tuple[type, ...] | Matcher, factory: Callable[[Any], AdapterPort]) -> None:
        """Build adapters for devices matching ``matcher`` with ``factory(device)``.

        ``matcher`` is a class (or tuple of classes) checked with
        :func:`isinstance`, or a predicate.
        """

        if isinstance(matcher, (type, tuple)):
            classes = matcher
            self._types.append((lambda device: isinstance(device, classes), factory))
        elif callable(matcher):
            self._types.append((matcher, factory))
        else:
            raise TypeError(f"Invalid adapter matcher: {matcher!r}")

    @property
    def names(self) -> list[str]:
        return self._names.names()

    @property
    def schemes(self) -> list[str]:
        return list(self._schemes)

    def resolve(self, device: Any) -> AdapterPort:
        """Return an adapter writing to ``device``.

        Raises
        ------
        ValueError
            When ``device`` is a URI with an unknown scheme, or nothing
            registered matches it.
        """

        if isinstance(device, AdapterPort):
            return device
        if isinstance(device, str):
            adapter_class = self._names.get(device)
            if adapter_class is not None:
                return adapter_class()
            if _URI_SCHEME.match(device) and not _WINDOWS_DRIVE.match(device):
                scheme = urlparse(device).scheme.lower()
                factory = self._schemes.get(scheme)
                if factory is None:
                    raise ValueError(f"No log adapter found for URI scheme {scheme!r}")
                return factory(device)
        for matcher, factory in self._types:
            if matcher(device):
                adapter = factory(device)
                LOGGER.debug("resolved log device %r to %r", device, adapter)
                return adapter
        raise ValueError(f"No log adapter found for {device!r}")


def adapter_registry() -> AdapterRegistry:
    """Return a new registry resolving devices to the built-in adapters."""

    registry = AdapterRegistry()
    registry.register(RichConsoleAdapter, "console")
    registry.register(NullAdapter, "null")
    registry.register_scheme("file", FileAdapter.from_uri)
    registry.register_type(lambda device: device is None, NullAdapter)
    registry.register_type(logging.Logger, LoggerAdapter)
    registry.register_type((str, os.PathLike), FileAdapter)
    registry.register_type(_is_stream, IOAdapter)
    registry.register_type(callable, CallableAdapter)
    return registry


__all__ = ["AdapterRegistry", "Matcher", "adapter_registry"]
