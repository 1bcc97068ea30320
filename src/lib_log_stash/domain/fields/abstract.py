"""Shared behaviour of the field containers.

Every container owns a ``_raw`` Python structure holding normalised values and
a re-entrant lock guarding structural mutation of that structure.
"""

from __future__ import annotations

import threading
from typing import Any, Iterable


def strict_equal(left: Any, right: Any) -> bool:
    """Return ``True`` when both values share a type and compare equal.

    Examples
    --------
    >>> strict_equal(1, 1), strict_equal(1, 1.0), strict_equal(1, True)
    (True, False, False)
    """

    return type(left) is type(right) and left == right


def strict_contains(items: Iterable[Any], value: Any) -> bool:
    return any(strict_equal(item, value) for item in items)


def unique(items: Iterable[Any]) -> list[Any]:
    """Drop repeated values keeping the first occurrence of each."""

    result: list[Any] = []
    for item in items:
        if not strict_contains(result, item):
            result.append(item)
    return result


def as_json(value: Any) -> Any:
    """Unwrap containers nested anywhere inside ``value``."""

    if isinstance(value, AbstractCollection):
        return value.as_json()
    return value


class AbstractCollection:
    """Base class for :class:`FieldsHash`, :class:`FieldsArray` and :class:`Tags`."""

    _raw: Any

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._raw)

    @property
    def empty(self) -> bool:
        """Return ``True`` when the container holds nothing."""

        return len(self) == 0

    def clear(self) -> "AbstractCollection":
        with self._lock:
            self._raw.clear()
        return self

    def as_json(self) -> Any:  # pragma: no cover - implemented by subclasses
        raise NotImplementedError

    def copy(self) -> Any:  # pragma: no cover - implemented by subclasses
        raise NotImplementedError

    def __copy__(self) -> Any:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Any:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AbstractCollection):
            return type(self) is type(other) and self.as_json() == other.as_json()
        return self.as_json() == other

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.as_json()!r})"


__all__ = ["AbstractCollection", "as_json", "strict_contains", "strict_equal", "unique"]
