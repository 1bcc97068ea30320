"""Base class and conditional wrapper shared by all filters.

Purpose
-------
Give every filter the same calling convention: ``filter(event)`` returns the
(possibly mutated) event or ``False`` to drop it, and optional ``only_if`` /
``not_if`` predicates decide whether the filter runs at all.

Contents
--------
* :class:`Filter` – subclass and implement :meth:`Filter.apply`.
* :class:`ConditionalFilter` – applies the predicates to a plain callable.

System Role
-----------
Concrete filters in :mod:`lib_log_stash.filters` derive from :class:`Filter`;
:func:`lib_log_stash.application.filter_chain.build_filter` wraps bare
callables in :class:`ConditionalFilter` when predicates are given.
"""

from __future__ import annotations

from typing import Any, Callable, Literal

Event = dict[str, Any]
Predicate = Callable[[Event], Any]


class Filter:
    """Event filter with optional run conditions.

    Parameters
    ----------
    only_if:
        When given, the filter only runs for events the predicate accepts.
    not_if:
        When given, the filter is skipped for events the predicate accepts.

    Examples
    --------
    >>> class Shout(Filter):
    ...     def apply(self, event):
    ...         event['message'] = [str(m).upper() for m in event['message']]
    ...         return event
    >>> Shout(only_if=lambda e: e.get('loud'))({'message': ['hi'], 'loud': True})['message']
    ['HI']
    >>> Shout(not_if=lambda e: True)({'message': ['hi']})['message']
    ['hi']
    """

    def __init__(self, *, only_if: Predicate | None = None, not_if: Predicate | None = None) -> None:
        self.only_if = only_if
        self.not_if = not_if

    def applies_to(self, event: Event) -> bool:
        if self.only_if is not None and not self.only_if(event):
            return False
        if self.not_if is not None and self.not_if(event):
            return False
        return True

    def __call__(self, event: Event) -> "Event | Literal[False]":
        if not self.applies_to(event):
            return event
        return self.apply(event)

    def apply(self, event: Event) -> "Event | Literal[False]":
        raise NotImplementedError


class ConditionalFilter(Filter):
    """Run an arbitrary callable under ``only_if`` / ``not_if`` conditions."""

    def __init__(self, fn: Callable[[Event], Any], *, only_if: Predicate | None = None, not_if: Predicate | None = None) -> None:
        super().__init__(only_if=only_if, not_if=not_if)
        self.fn = fn

    def apply(self, event: Event) -> "Event | Literal[False]":
        return self.fn(event)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConditionalFilter):
            return self.fn == other.fn and self.only_if == other.only_if and self.not_if == other.not_if
        return self.fn == other

    __hash__ = None  # type: ignore[assignment]


__all__ = ["ConditionalFilter", "Event", "Filter", "Predicate"]
