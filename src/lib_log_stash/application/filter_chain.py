"""Ordered, thread-safe chain of event filters.

Purpose
-------
Run each event through a list of filters, stopping as soon as one of them
returns ``False``, while allowing the list to be edited from other threads.

Contents
--------
* :func:`build_filter` – turn a filter spec (callable, class or registered
  name plus arguments) into a filter.
* :class:`FilterChain` – the chain itself.

System Role
-----------
Every :class:`~lib_log_stash.application.flow.Flow` owns one chain and calls
it before encoding.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, Iterator, Literal

from ..filters.base import ConditionalFilter, Event, Filter, Predicate
from .ports.filter import FilterPort
from .registry import ClassRegistry

FilterCallable = Callable[[Event], Any]


def build_filter(
    spec: Any,
    *args: Any,
    registry: ClassRegistry[Any] | None = None,
    only_if: Predicate | None = None,
    not_if: Predicate | None = None,
    **kwargs: Any,
) -> FilterCallable:
    """Return a filter for ``spec``.

    ``spec`` is a class or a name looked up in ``registry`` (instantiated with
    ``args`` / ``kwargs``), or any callable used as-is. ``only_if`` and
    ``not_if`` restrict when the filter runs.

    Examples
    --------
    >>> from lib_log_stash.filters import filter_registry
    >>> build_filter('drop_if', lambda event: True, registry=filter_registry())({'message': []})
    False
    """

    if isinstance(spec, type) or isinstance(spec, str):
        if registry is None:
            from ..filters import filter_registry

            registry = filter_registry()
        filter_class = registry.fetch(spec)
        if issubclass(filter_class, Filter):
            return filter_class(*args, only_if=only_if, not_if=not_if, **kwargs)
        built = filter_class(*args, **kwargs)
    elif isinstance(spec, FilterPort):
        if args or kwargs:
            raise TypeError(f"can not pass arguments to the ready-made filter {spec!r}")
        built = spec
    else:
        raise TypeError(f"Can not build filter for {spec!r}")
    if not isinstance(built, FilterPort):
        raise TypeError(f"{built!r} is not a callable filter")
    if only_if is None and not_if is None:
        return built
    return ConditionalFilter(built, only_if=only_if, not_if=not_if)


class FilterChain:
    """Ordered list of filters applied to each event.

    Filters can be located by position, by class (first instance of it), by
    class name (matching any class in the filter's MRO), or by equality with
    a filter object. The first match wins.

    Examples
    --------
    >>> calls = []
    >>> def first(event):
    ...     calls.append('first')
    ...     return event
    >>> chain = FilterChain([first, lambda event: False, lambda event: calls.append('never')])
    >>> chain({'message': []})
    False
    >>> calls, len(chain)
    (['first'], 3)
    >>> chain.index(first), chain.index('function')
    (0, 0)
    """

    def __init__(self, filters: Iterable[Any] = (), *, registry: ClassRegistry[Any] | None = None) -> None:
        self._lock = threading.RLock()
        self._registry = registry
        self._filters: list[FilterCallable] = []
        for spec in filters:
            self.append(spec)

    def _build(self, spec: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> FilterCallable:
        return build_filter(spec, *args, registry=self._registry, **kwargs)

    def _index_at(self, locator: Any) -> int | None:
        if isinstance(locator, bool):
            return self._find(lambda candidate: candidate == locator)
        if isinstance(locator, int):
            return locator
        if isinstance(locator, type):
            return self._find(lambda candidate: isinstance(candidate, locator))
        if isinstance(locator, str):
            return self._find(lambda candidate: any(cls.__name__ == locator for cls in type(candidate).__mro__))
        return self._find(lambda candidate: candidate is locator or candidate == locator)

    def _find(self, match: Callable[[FilterCallable], bool]) -> int | None:
        for position, candidate in enumerate(self._filters):
            if match(candidate):
                return position
        return None

    def _resolve(self, locator: Any, *, allow_end: bool, action: str) -> int:
        position = self._index_at(locator)
        limit = len(self._filters) + (1 if allow_end else 0)
        if position is None or not 0 <= position < limit:
            raise ValueError(f"No such filter to {action}: {locator!r}")
        return position

    def __getitem__(self, locator: Any) -> FilterCallable | None:
        """Return the located filter, or ``None`` when nothing matches."""

        with self._lock:
            position = self._index_at(locator)
            if position is None or not -len(self._filters) <= position < len(self._filters):
                return None
            return self._filters[position]

    def __setitem__(self, locator: Any, filter_: FilterCallable) -> None:
        """Replace the located filter; an index equal to the length appends."""

        if not isinstance(filter_, FilterPort):
            raise TypeError("must provide a filter")
        with self._lock:
            position = self._resolve(locator, allow_end=True, action="replace")
            if position == len(self._filters):
                self._filters.append(filter_)
            else:
                self._filters[position] = filter_

    def append(self, spec: Any, *args: Any, **kwargs: Any) -> "FilterChain":
        filter_ = self._build(spec, args, kwargs)
        with self._lock:
            self._filters.append(filter_)
        return self

    def unshift(self, spec: Any, *args: Any, **kwargs: Any) -> "FilterChain":
        filter_ = self._build(spec, args, kwargs)
        with self._lock:
            self._filters.insert(0, filter_)
        return self

    def insert_before(self, locator: Any, spec: Any, *args: Any, **kwargs: Any) -> "FilterChain":
        filter_ = self._build(spec, args, kwargs)
        with self._lock:
            position = self._resolve(locator, allow_end=False, action="insert before")
            self._filters.insert(position, filter_)
        return self

    def insert_after(self, locator: Any, spec: Any, *args: Any, **kwargs: Any) -> "FilterChain":
        filter_ = self._build(spec, args, kwargs)
        with self._lock:
            position = self._resolve(locator, allow_end=False, action="insert after")
            self._filters.insert(position + 1, filter_)
        return self

    def delete(self, locator: Any) -> FilterCallable | None:
        """Remove and return the located filter, or ``None`` when nothing matches."""

        with self._lock:
            position = self._index_at(locator)
            if position is None or not -len(self._filters) <= position < len(self._filters):
                return None
            return self._filters.pop(position)

    def index(self, locator: Any) -> int | None:
        """Return the position of the located filter, or ``None`` when nothing matches.

        Integer locators are returned as given, even past the end of the
        chain; ``chain[position]`` returns ``None`` for such positions.
        """

        with self._lock:
            return self._index_at(locator)

    def __len__(self) -> int:
        with self._lock:
            return len(self._filters)

    def to_list(self) -> list[FilterCallable]:
        with self._lock:
            return list(self._filters)

    def __iter__(self) -> Iterator[FilterCallable]:
        return iter(self.to_list())

    def copy(self) -> "FilterChain":
        """Return a chain with its own list holding the same filter objects."""

        duplicate = type(self)(registry=self._registry)
        duplicate._filters = self.to_list()
        return duplicate

    def __call__(self, event: Event) -> "Event | Literal[False]":
        """Run ``event`` through a snapshot of the filters.

        Returns ``False`` as soon as a filter does; the event otherwise.
        Exceptions raised by filters propagate.
        """

        for filter_ in self.to_list():
            if filter_(event) is False:
                return False
        return event

    call = __call__

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_list()!r})"


__all__ = ["FilterCallable", "FilterChain", "build_filter"]
