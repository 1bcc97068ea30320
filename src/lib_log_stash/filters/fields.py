"""Filters adding, renaming, replacing and removing event fields.

Contents
--------
* :class:`DefaultFields` – fill in missing fields, deep-merging nested data.
* :class:`Rename` – move values to new keys.
* :class:`Replace` – set fields unconditionally.
* :class:`Update` – change fields that already exist.
* :class:`Remove` / :class:`Select` – drop or keep fields by name or matcher.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Mapping

from ..domain.fields import FieldsHash
from ..domain.fields.abstract import strict_contains
from ..domain.normalize import normalize
from ..domain.utf8 import utf8
from .base import Event, Filter

Matcher = Any


def _merge_missing(target: dict[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    for key, new in defaults.items():
        old = target.get(key)
        if old is None:
            target[key] = new
        elif isinstance(old, dict) and isinstance(new, dict):
            _merge_missing(old, new)
        elif isinstance(old, list) and isinstance(new, list):
            old.extend(item for item in new if not strict_contains(old, item))
    return target


class DefaultFields(Filter):
    """Add ``default_fields`` to the event without overwriting existing values.

    Nested mappings merge recursively and nested lists merge into their union.
    ``default_fields`` may be a deferred callable; it is evaluated with the
    event as its scope.

    Examples
    --------
    >>> DefaultFields({'app': 'shop', 'env': {'region': 'eu'}})({'app': 'api', 'env': {'zone': 'b'}})
    {'app': 'api', 'env': {'zone': 'b', 'region': 'eu'}}
    """

    def __init__(self, default_fields: Any, **conditions: Any) -> None:
        super().__init__(**conditions)
        self.default_fields = default_fields

    def apply(self, event: Event) -> Event:
        defaults = normalize(self.default_fields, scope=event)
        if not isinstance(defaults, FieldsHash):
            raise TypeError("default_fields must be a mapping")
        return _merge_missing(event, defaults.as_json())


class Rename(Filter):
    """Move the value of each existing ``old`` key to ``new``.

    Examples
    --------
    >>> Rename({'host': 'hostname'})({'host': 'web-1', 'pid': 1})
    {'pid': 1, 'hostname': 'web-1'}
    """

    def __init__(self, spec: Mapping[Any, Any], **conditions: Any) -> None:
        super().__init__(**conditions)
        self.rename = {utf8(old): utf8(new) for old, new in dict(spec).items()}

    def apply(self, event: Event) -> Event:
        for old, new in self.rename.items():
            if old in event:
                event[new] = event.pop(old)
        return event


class Replace(Filter):
    """Set each field of ``spec``; callables are called with the event for the value."""

    def __init__(self, spec: Mapping[Any, Any], **conditions: Any) -> None:
        super().__init__(**conditions)
        self.replace = {utf8(key): value for key, value in dict(spec).items()}

    def apply(self, event: Event) -> Event:
        for key, value in self.replace.items():
            event[key] = value(event) if callable(value) else value
        return event


class Update(Filter):
    """Like :class:`Replace`, but only for fields the event already has.

    Examples
    --------
    >>> Update({'user': lambda event: event['user'].lower(), 'absent': 1})({'user': 'ADA'})
    {'user': 'ada'}
    """

    def __init__(self, spec: Mapping[Any, Any], **conditions: Any) -> None:
        super().__init__(**conditions)
        self.update = {utf8(key): value for key, value in dict(spec).items()}

    def apply(self, event: Event) -> Event:
        for key, value in self.update.items():
            if key in event:
                event[key] = value(event) if callable(value) else value
        return event


def _flatten(matchers: Iterable[Any]) -> Iterable[Any]:
    for matcher in matchers:
        if isinstance(matcher, (list, tuple, set, frozenset)):
            yield from _flatten(matcher)
        else:
            yield matcher


class _KeyMatcher:
    def __init__(self, field_matchers: Iterable[Matcher]) -> None:
        self.keys: set[str] = set()
        self.matchers: list[Matcher] = []
        for matcher in _flatten(field_matchers):
            if isinstance(matcher, (str, bytes)):
                self.keys.add(utf8(matcher))
            elif isinstance(matcher, re.Pattern) or callable(matcher):
                self.matchers.append(matcher)
            else:
                raise TypeError(f"{matcher!r} can not be used to match field names")

    def __call__(self, key: str) -> bool:
        if key in self.keys:
            return True
        for matcher in self.matchers:
            if isinstance(matcher, re.Pattern):
                if matcher.search(key):
                    return True
            elif matcher(key):
                return True
        return False


class Remove(Filter):
    """Delete fields named in ``field_matchers`` or matching a regex / predicate.

    Examples
    --------
    >>> import re
    >>> Remove('password', re.compile('^tmp_'))({'password': 'x', 'tmp_a': 1, 'user': 'ada'})
    {'user': 'ada'}
    """

    def __init__(self, *field_matchers: Matcher, **conditions: Any) -> None:
        super().__init__(**conditions)
        self.match = _KeyMatcher(field_matchers)

    def apply(self, event: Event) -> Event:
        for key in [key for key in event if self.match(key)]:
            del event[key]
        return event


class Select(Filter):
    """Keep only the fields named in ``field_matchers`` or matching a regex / predicate."""

    def __init__(self, *field_matchers: Matcher, **conditions: Any) -> None:
        super().__init__(**conditions)
        self.match = _KeyMatcher(field_matchers)

    def apply(self, event: Event) -> Event:
        for key in [key for key in event if not self.match(key)]:
            del event[key]
        return event


__all__ = ["DefaultFields", "Remove", "Rename", "Replace", "Select", "Update"]
