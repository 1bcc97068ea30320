"""Sequence container for event field values."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from ..normalize import normalize
from .abstract import AbstractCollection, as_json, strict_contains, unique


class FieldsArray(AbstractCollection):
    """Thread-safe list of normalised values.

    Set-style operators compare elements by type and value, so ``1``, ``1.0``
    and ``True`` are distinct members.

    Examples
    --------
    >>> values = FieldsArray([1, 'a', (2, 3)])
    >>> values.as_json()
    [1, 'a', [2, 3]]
    >>> (FieldsArray([1, 2, 2, 3]) | [3, 1.0]).as_json()
    [1, 2, 3, 1.0]
    >>> (FieldsArray([3, 2, 1]) & [1, 3]).as_json()
    [3, 1]
    """

    def __init__(self, values: Any = None) -> None:
        super().__init__()
        self._raw: list[Any] = []
        if values is not None:
            self.extend(values)

    @classmethod
    def _from_raw(cls, raw: list[Any]) -> "FieldsArray":
        instance = cls()
        instance._raw = raw
        return instance

    def _coerce(self, values: Any, scope: Any = None) -> list[Any]:
        normalized = normalize(values, scope=scope, wrap=False)
        if not isinstance(normalized, list):
            raise TypeError(f"can not convert {type(values).__name__} into {type(self).__name__}")
        return normalized

    def snapshot(self) -> list[Any]:
        with self._lock:
            return list(self._raw)

    def as_json(self) -> list[Any]:
        return [as_json(value) for value in self.snapshot()]

    to_list = as_json

    def copy(self) -> "FieldsArray":
        return type(self)._from_raw([value.copy() if isinstance(value, AbstractCollection) else value for value in self.snapshot()])

    def __iter__(self) -> Iterator[Any]:
        return iter(self.snapshot())

    def __contains__(self, value: object) -> bool:
        return strict_contains(self.snapshot(), normalize(value))

    def __getitem__(self, index: int | slice) -> Any:
        with self._lock:
            if isinstance(index, slice):
                return type(self)._from_raw(self._raw[index])
            return self._raw[index]

    def __setitem__(self, index: int | slice, value: Any) -> None:
        if isinstance(index, slice):
            normalized: Any = self._coerce(value)
        else:
            normalized = normalize(value)
        with self._lock:
            self._raw[index] = normalized

    def __delitem__(self, index: int | slice) -> None:
        with self._lock:
            del self._raw[index]

    def append(self, value: Any, *, scope: Any = None) -> "FieldsArray":
        normalized = normalize(value, scope=scope)
        with self._lock:
            self._raw.append(normalized)
        return self

    def push(self, *values: Any, scope: Any = None) -> "FieldsArray":
        """Append each of ``values``; unlike :meth:`extend` nested sequences stay nested."""

        normalized = [normalize(value, scope=scope) for value in values]
        with self._lock:
            self._raw.extend(normalized)
        return self

    def extend(self, values: Iterable[Any], *, scope: Any = None) -> "FieldsArray":
        normalized = self._coerce(values, scope)
        with self._lock:
            self._raw.extend(normalized)
        return self

    concat = extend

    def insert(self, index: int, value: Any, *, scope: Any = None) -> "FieldsArray":
        normalized = normalize(value, scope=scope)
        with self._lock:
            self._raw.insert(index, normalized)
        return self

    def pop(self, index: int = -1) -> Any:
        with self._lock:
            return self._raw.pop(index)

    def __add__(self, other: Any) -> "FieldsArray":
        return type(self)._from_raw(self.copy()._raw + self._coerce(other))

    def __sub__(self, other: Any) -> "FieldsArray":
        removed = self._coerce(other)
        return type(self)._from_raw([value for value in self.copy()._raw if not strict_contains(removed, value)])

    def __or__(self, other: Any) -> "FieldsArray":
        return type(self)._from_raw(unique(self.copy()._raw + self._coerce(other)))

    def __and__(self, other: Any) -> "FieldsArray":
        kept = self._coerce(other)
        return type(self)._from_raw(unique(value for value in self.copy()._raw if strict_contains(kept, value)))

    def merge(self, other: Any, *, scope: Any = None) -> "FieldsArray":
        """Return the union of this array and ``other`` as a new array."""

        return type(self)._from_raw(unique(self.copy()._raw + self._coerce(other, scope)))

    def update(self, other: Any, *, scope: Any = None) -> "FieldsArray":
        """Add the members of ``other`` missing from this array, in place."""

        incoming = self._coerce(other, scope)
        with self._lock:
            self._raw[:] = unique(self._raw + incoming)
        return self


__all__ = ["FieldsArray"]
