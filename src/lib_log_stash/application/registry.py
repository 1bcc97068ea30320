"""Name → class registries for filters, encoders and adapters.

Purpose
-------
Let configuration refer to pipeline components by short names
(``"truncate_message"``, ``"json"``) without any process-wide mutable state.

Contents
--------
* :class:`ClassRegistry` – explicit registry object.

System Role
-----------
Populated registries are returned by :func:`lib_log_stash.filters.filter_registry`,
:func:`lib_log_stash.adapters.encoders.encoder_registry` and
:func:`lib_log_stash.adapters.sinks.adapter_registry`; each call hands out a
fresh object that the composition root passes to whatever needs it.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, TypeVar

T = TypeVar("T")

_UNDEFINED: Any = object()


class ClassRegistry(Generic[T]):
    """Map names to classes.

    Examples
    --------
    >>> registry = ClassRegistry('encoder')
    >>> registry.register(dict, 'hash', 'mapping')
    <class 'dict'>
    >>> registry['mapping']
    <class 'dict'>
    >>> registry.get('missing') is None
    True
    >>> registry['missing']
    Traceback (most recent call last):
    ...
    KeyError: "No encoder was registered for 'missing'"
    """

    def __init__(self, object_type: str = "class") -> None:
        self.object_type = object_type
        self._registry: dict[str, type[T]] = {}

    def register(self, registered_class: type[T], *names: str) -> type[T]:
        """Register ``registered_class`` under every name in ``names``."""

        for name in names:
            self[name] = registered_class
        return registered_class

    def __setitem__(self, name: str, registered_class: type[T]) -> None:
        if not isinstance(registered_class, type):
            raise TypeError("Can only register class objects")
        if not isinstance(name, str):
            raise TypeError(f"Can not use {name!r} to register {self.object_type} classes")
        self._registry[name] = registered_class

    def fetch(self, spec: str | type[T], default: Any = _UNDEFINED) -> type[T]:
        """Resolve ``spec`` to a class.

        Classes are returned unchanged; names are looked up and raise
        ``KeyError`` (or return ``default``) when unknown. Anything else raises
        ``TypeError``.
        """

        if isinstance(spec, type):
            return spec
        if not isinstance(spec, str):
            raise TypeError(f"{spec!r} can not be used to describe {self.object_type} classes")
        try:
            return self._registry[spec]
        except KeyError:
            if default is not _UNDEFINED:
                return default
            raise KeyError(f"No {self.object_type} was registered for {spec!r}") from None

    def build(self, spec: str | type[T], *args: Any, **kwargs: Any) -> T:
        """Instantiate the class ``spec`` resolves to with ``args`` and ``kwargs``."""

        return self.fetch(spec)(*args, **kwargs)

    def __getitem__(self, spec: str | type[T]) -> type[T]:
        return self.fetch(spec)

    def get(self, spec: str | type[T], default: Any = None) -> type[T] | Any:
        return self.fetch(spec, default)

    def __contains__(self, name: object) -> bool:
        return name in self._registry

    def __iter__(self) -> Iterator[tuple[str, type[T]]]:
        return iter(list(self._registry.items()))

    def __len__(self) -> int:
        return len(self._registry)

    def names(self) -> list[str]:
        return list(self._registry)

    def to_dict(self) -> dict[str, type[T]]:
        return dict(self._registry)

    def clear(self) -> "ClassRegistry[T]":
        self._registry.clear()
        return self


__all__ = ["ClassRegistry"]
