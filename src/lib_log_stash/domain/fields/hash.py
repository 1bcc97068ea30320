"""Mapping container for event fields.

Purpose
-------
Hold the key/value fields of a buffer (and any nested mapping inside them)
with UTF-8 keys, normalised values, and an immutable set of reserved keys.

Contents
--------
* :class:`FieldsHash` – merge, deep-merge, reverse-merge and guarded writes.

System Role
-----------
``Buffer.fields`` is a :class:`FieldsHash` whose forbidden keys are the
reserved event fields; nested mappings produced by
:func:`~lib_log_stash.domain.normalize.normalize` are plain ``FieldsHash``
instances without forbidden keys.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator

from ..errors import ForbiddenFieldError
from ..normalize import call_with_scope, normalize
from ..utf8 import utf8
from .abstract import AbstractCollection, as_json
from .array import FieldsArray

Resolver = Callable[[str, Any, Any], Any]


class FieldsHash(AbstractCollection):
    """Thread-safe mapping of UTF-8 keys to normalised values.

    Parameters
    ----------
    forbidden_keys:
        Keys that can never be written. Forcing writes of such a key raise
        :class:`~lib_log_stash.domain.errors.ForbiddenFieldError`; non-forcing
        writes skip it silently. Only applies to this mapping's own keys, not
        to mappings nested inside it.

    Examples
    --------
    >>> fields = FieldsHash(forbidden_keys={'message'})
    >>> fields['user'] = {'id': 42, 'roles': ('admin',)}
    >>> fields.as_json()
    {'user': {'id': 42, 'roles': ['admin']}}
    >>> fields.deep_update({'user': {'roles': ['ops']}})['user']['roles'].as_json()
    ['admin', 'ops']
    >>> fields.update({'message': 'x'}, force=False).keys()
    ['user']
    """

    def __init__(self, data: Any = None, *, forbidden_keys: Iterable[Any] = ()) -> None:
        super().__init__()
        self._raw: dict[str, Any] = {}
        self._forbidden_keys = frozenset(utf8(key) for key in forbidden_keys)
        if data is not None:
            self.update(data)

    @classmethod
    def _from_raw(cls, raw: dict[str, Any], forbidden_keys: frozenset[str] = frozenset()) -> "FieldsHash":
        instance = cls()
        instance._raw = raw
        instance._forbidden_keys = forbidden_keys
        return instance

    @property
    def forbidden_keys(self) -> frozenset[str]:
        """Return the keys this mapping refuses to store."""

        return self._forbidden_keys

    def is_forbidden(self, key: Any) -> bool:
        return utf8(key) in self._forbidden_keys

    # ------------------------------------------------------------------
    # Reading

    def __getitem__(self, key: Any) -> Any:
        return self._raw[utf8(key)]

    def get(self, key: Any, default: Any = None) -> Any:
        return self._raw.get(utf8(key), default)

    def __contains__(self, key: object) -> bool:
        return utf8(key) in self._raw

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def keys(self) -> list[str]:
        """Return a snapshot of the keys."""

        with self._lock:
            return list(self._raw.keys())

    def values(self) -> list[Any]:
        with self._lock:
            return list(self._raw.values())

    def items(self) -> list[tuple[str, Any]]:
        with self._lock:
            return list(self._raw.items())

    def as_json(self) -> dict[str, Any]:
        """Return a plain ``dict`` with nested containers unwrapped."""

        return {key: as_json(value) for key, value in self.items()}

    to_dict = as_json

    def copy(self) -> "FieldsHash":
        """Return an independent copy, nested containers included."""

        raw = {key: value.copy() if isinstance(value, AbstractCollection) else value for key, value in self.items()}
        return type(self)._from_raw(raw, self._forbidden_keys)

    # ------------------------------------------------------------------
    # Writing

    def __setitem__(self, key: Any, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: Any) -> None:
        with self._lock:
            del self._raw[utf8(key)]

    def set(self, key: Any, value: Any, *, force: bool = True, scope: Any = None) -> "FieldsHash":
        """Store ``normalize(value)`` under ``key``.

        With ``force=False`` an existing non-``None`` value is kept and a
        forbidden key is skipped instead of raising.
        """

        key = utf8(key)
        if key in self._forbidden_keys:
            if force:
                raise ForbiddenFieldError([key])
            return self
        normalized = normalize(value, scope=scope)
        with self._lock:
            if force or self._raw.get(key) is None:
                self._raw[key] = normalized
        return self

    def set_with_default(self, key: Any, factory: Callable[..., Any], *, force: bool = False, scope: Any = None) -> Any:
        """Compute and store a value only when ``key`` is unset or ``force`` is set.

        ``factory`` is called with the current value when it accepts an
        argument and a current value exists. It is never called for forbidden
        keys or for keys already holding a non-``None`` value (without
        ``force``). Returns the value stored under ``key`` afterwards.

        Examples
        --------
        >>> fields = FieldsHash({'host': 'web-1'})
        >>> fields.set_with_default('host', lambda: 'ignored')
        'web-1'
        >>> fields.set_with_default('pid', lambda: 4711)
        4711
        """

        key = utf8(key)
        if key in self._forbidden_keys:
            if force:
                raise ForbiddenFieldError([key])
            return None
        with self._lock:
            current = self._raw.get(key)
            if not force and current is not None:
                return current
            self._raw[key] = normalize(call_with_scope(factory, current), scope=scope)
            return self._raw[key]

    def delete(self, key: Any, default: Any = None) -> Any:
        """Remove ``key`` and return its value, or ``default`` when absent."""

        with self._lock:
            return self._raw.pop(utf8(key), default)

    # ------------------------------------------------------------------
    # Merging

    def _coerce(self, other: Any, scope: Any) -> dict[str, Any]:
        normalized = normalize(other, scope=scope, wrap=False)
        if not isinstance(normalized, dict):
            raise TypeError(f"can not merge {type(other).__name__} into {type(self).__name__}")
        return normalized

    def _merge_raw(
        self,
        incoming: dict[str, Any],
        *,
        force: bool,
        deep: bool,
        resolver: Resolver | None,
        scope: Any,
    ) -> None:
        forbidden = [key for key in incoming if key in self._forbidden_keys]
        if forbidden and force:
            raise ForbiddenFieldError(forbidden)
        with self._lock:
            for key, new in incoming.items():
                if key in self._forbidden_keys:
                    continue
                if key not in self._raw:
                    self._raw[key] = new
                    continue
                old = self._raw[key]
                if deep and isinstance(old, FieldsHash) and isinstance(new, FieldsHash):
                    merged = old.copy()
                    merged._merge_raw(new._raw, force=force, deep=True, resolver=resolver, scope=scope)
                    self._raw[key] = merged
                elif deep and isinstance(old, FieldsArray) and isinstance(new, FieldsArray):
                    self._raw[key] = old | new
                elif resolver is not None:
                    self._raw[key] = normalize(resolver(key, old, new), scope=scope)
                elif force or old is None:
                    self._raw[key] = new

    def update(
        self,
        other: Any,
        *,
        force: bool = True,
        scope: Any = None,
        resolver: Resolver | None = None,
    ) -> "FieldsHash":
        """Merge ``other`` into this mapping in place.

        ``other`` may be any value normalising to a mapping (including a
        deferred callable returning one); anything else raises ``TypeError``.
        Conflicting keys take the incoming value with ``force=True`` and keep
        an existing non-``None`` value otherwise, unless ``resolver(key, old,
        new)`` decides.
        """

        self._merge_raw(self._coerce(other, scope), force=force, deep=False, resolver=resolver, scope=scope)
        return self

    def merge(self, other: Any, *, force: bool = True, scope: Any = None, resolver: Resolver | None = None) -> "FieldsHash":
        """Return a new mapping with ``other`` merged in; see :meth:`update`."""

        return self.copy().update(other, force=force, scope=scope, resolver=resolver)

    def deep_update(
        self,
        other: Any,
        *,
        force: bool = True,
        scope: Any = None,
        resolver: Resolver | None = None,
    ) -> "FieldsHash":
        """Like :meth:`update`, but nested mappings merge recursively and
        nested arrays merge into their union."""

        self._merge_raw(self._coerce(other, scope), force=force, deep=True, resolver=resolver, scope=scope)
        return self

    def deep_merge(self, other: Any, *, force: bool = True, scope: Any = None, resolver: Resolver | None = None) -> "FieldsHash":
        return self.copy().deep_update(other, force=force, scope=scope, resolver=resolver)

    def reverse_update(self, other: Any, *, scope: Any = None) -> "FieldsHash":
        """Fill keys that are missing or ``None`` from ``other``; never overwrite."""

        return self.update(other, force=False, scope=scope)

    def reverse_merge(self, other: Any, *, scope: Any = None) -> "FieldsHash":
        return self.copy().reverse_update(other, scope=scope)


__all__ = ["FieldsHash", "Resolver"]
