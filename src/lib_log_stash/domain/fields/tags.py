"""Deduplicated tag container.

Tags are stripped UTF-8 strings. Nested sequences, sets, other tag containers
and deferred values are flattened before insertion; ``None``, mappings and
blank strings are dropped. Adding a single tag goes through the same path as a
bulk update, so ``tags.add(x)`` and ``tags.update(x)`` always agree.
"""

from __future__ import annotations

from typing import Any, Iterator

from ..normalize import normalize
from ..utf8 import utf8
from .abstract import AbstractCollection
from .array import FieldsArray
from .hash import FieldsHash


def _flatten(value: Any, out: list[str]) -> None:
    if value is None or isinstance(value, FieldsHash):
        return
    if isinstance(value, FieldsArray):
        for item in value:
            _flatten(item, out)
        return
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = utf8(value).strip()
    if text:
        out.append(text)


class Tags(AbstractCollection):
    """Thread-safe set of tag strings.

    Examples
    --------
    >>> tags = Tags()
    >>> tags.update('web', ['api', ('v2', None)], ' web ', '', {'ignored': 1})
    Tags(['web', 'api', 'v2'])
    >>> tags.contains(b'api')
    True
    >>> Tags([123, lambda: 'proc']).to_list()
    ['123', 'proc']
    """

    def __init__(self, tags: Any = None) -> None:
        super().__init__()
        self._raw: dict[str, bool] = {}
        if tags is not None:
            self.update(tags)

    @staticmethod
    def normalize_tags(tags: Any, *, scope: Any = None) -> list[str]:
        """Return the flat list of tag strings ``tags`` stands for."""

        out: list[str] = []
        _flatten(normalize(tags, scope=scope), out)
        return out

    def add(self, tag: Any, *, scope: Any = None) -> "Tags":
        return self.update(tag, scope=scope)

    def update(self, *tags: Any, scope: Any = None) -> "Tags":
        new = self.normalize_tags(list(tags), scope=scope)
        with self._lock:
            for tag in new:
                self._raw[tag] = True
        return self

    def merge(self, *tags: Any, scope: Any = None) -> "Tags":
        return self.copy().update(*tags, scope=scope)

    def contains(self, tag: Any, *, scope: Any = None) -> bool:
        """Return ``True`` when every tag ``tag`` normalises to is present."""

        probe = self.normalize_tags(tag, scope=scope)
        with self._lock:
            return bool(probe) and all(item in self._raw for item in probe)

    def __contains__(self, tag: object) -> bool:
        return self.contains(tag)

    def to_list(self) -> list[str]:
        with self._lock:
            return list(self._raw)

    as_json = to_list

    def to_set(self) -> set[str]:
        return set(self.to_list())

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_list())

    def copy(self) -> "Tags":
        duplicate = type(self)()
        duplicate._raw = dict.fromkeys(self.to_list(), True)
        return duplicate


__all__ = ["Tags"]
