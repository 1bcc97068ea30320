"""Conversion of arbitrary application values into JSON-safe trees.

Purpose
-------
Turn whatever application code hands to a buffer (numbers, timestamps,
collections, exceptions, domain objects, deferred callables) into a value tree
built only from ``str``, ``int``, ``float``, ``bool``, ``None``, field hashes,
and field arrays.

Contents
--------
* :class:`Deferred` – explicit wrapper for values computed on demand.
* :func:`is_deferred` / :func:`resolve_value` – deferred-value handling.
* :func:`normalize` – total conversion driven by an ordered dispatch table.
* :func:`format_time` – fixed-precision ISO-8601 rendering in UTC.

System Role
-----------
Every mutation of :class:`~lib_log_stash.domain.fields.FieldsHash`,
:class:`~lib_log_stash.domain.fields.FieldsArray`, and
:class:`~lib_log_stash.domain.fields.Tags` runs its input through this module,
which is what keeps events encodable no matter what was logged.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import ipaddress
import logging
import math
import re
import traceback
import types
import uuid
from collections.abc import Callable, Iterator, Mapping, Sequence, Set as AbstractSet
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from fractions import Fraction
from pathlib import PurePath
from typing import Any
from urllib.parse import DefragResult, ParseResult, SplitResult

from .constants import ISO8601_PRECISION
from .utf8 import force_inspect, utf8

LOGGER = logging.getLogger(__name__)


class Deferred:
    """Value computed only when it is normalised.

    The wrapped callable takes either no arguments or a single ``scope``
    argument supplied by the caller of :func:`normalize`.

    Examples
    --------
    >>> Deferred(lambda: 21 * 2)()
    42
    >>> Deferred(lambda scope: scope.upper())('abc')
    'ABC'
    """

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[..., Any]) -> None:
        if not callable(fn):
            raise TypeError(f"{fn!r} is not callable")
        self.fn = fn

    def __call__(self, scope: Any = None) -> Any:
        return call_with_scope(self.fn, scope)

    def __repr__(self) -> str:
        return f"Deferred({self.fn!r})"


_DEFERRED_TYPES = (Deferred, types.FunctionType, types.MethodType, functools.partial)


def is_deferred(value: Any) -> bool:
    """Return ``True`` when ``value`` is evaluated lazily by :func:`normalize`.

    Plain functions, lambdas, bound methods, :func:`functools.partial`
    objects, and :class:`Deferred` wrappers count as deferred. Classes and
    other callable objects do not.
    """

    return isinstance(value, _DEFERRED_TYPES)


def _accepts_argument(fn: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return False
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD, parameter.VAR_POSITIONAL):
            return True
    return False


def call_with_scope(fn: Callable[..., Any], scope: Any) -> Any:
    """Call ``fn`` with ``scope`` when it takes an argument, otherwise without."""

    if scope is not None and _accepts_argument(fn):
        return fn(scope)
    return fn()


def resolve_value(value: Any, *, scope: Any = None) -> Any:
    """Evaluate ``value`` once when it is deferred, otherwise return it as-is."""

    if isinstance(value, Deferred):
        return value(scope)
    if is_deferred(value):
        return call_with_scope(value, scope)
    return value


def format_time(value: datetime) -> str:
    """Render ``value`` in UTC with microsecond precision.

    Naive datetimes are interpreted as UTC.

    Examples
    --------
    >>> from datetime import datetime, timedelta, timezone
    >>> format_time(datetime(2016, 10, 17, 13, 37, tzinfo=timezone(timedelta(hours=3))))
    '2016-10-17T10:37:00.000000Z'
    """

    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    fraction = f"{value.microsecond:06d}"[:ISO8601_PRECISION]
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{fraction}Z"


def _inspect(value: Any) -> str:
    try:
        return utf8(repr(value))
    except Exception:
        return force_inspect(value)


@dataclasses.dataclass(frozen=True)
class _Context:
    scope: Any
    path: tuple[int, ...] = ()

    def enter(self, value: Any) -> "_Context":
        return _Context(self.scope, self.path + (id(value),))


def _wrap_hash(raw: dict[str, Any], wrap: bool) -> Any:
    if not wrap:
        return raw
    from .fields.hash import FieldsHash

    return FieldsHash._from_raw(raw)


def _wrap_array(raw: list[Any], wrap: bool) -> Any:
    if not wrap:
        return raw
    from .fields.array import FieldsArray

    return FieldsArray._from_raw(raw)


def _is_collection(value: Any) -> bool:
    from .fields.abstract import AbstractCollection

    return isinstance(value, AbstractCollection)


def _convert_collection(value: Any, ctx: _Context, wrap: bool) -> Any:
    from .fields.tags import Tags

    if isinstance(value, Tags):
        return _wrap_array(value.to_list(), wrap)
    copied = value.copy()
    return copied if wrap else copied._raw


def _convert_mapping(value: Mapping[Any, Any], ctx: _Context, wrap: bool) -> Any:
    inner = ctx.enter(value)
    raw = {utf8(key): _normalize(item, inner, True) for key, item in list(value.items())}
    return _wrap_hash(raw, wrap)


def _convert_named_tuple(value: Any, ctx: _Context, wrap: bool) -> Any:
    return _convert_mapping(value._asdict(), ctx, wrap)


def _convert_iterable(value: Any, ctx: _Context, wrap: bool) -> Any:
    inner = ctx.enter(value)
    raw = [_normalize(item, inner, True) for item in list(value)]
    return _wrap_array(raw, wrap)


def _convert_decimal(value: Decimal, ctx: _Context, wrap: bool) -> str:
    if value.is_finite():
        return format(value, "f")
    return str(value)


def _convert_float(value: float, ctx: _Context, wrap: bool) -> float | str:
    value = float(value)
    if math.isfinite(value):
        return value
    # JSON has no literal for these; use the Decimal spelling.
    return str(Decimal(value))


def format_exception(value: BaseException) -> str:
    """Render an exception as ``"<message> (<TypeName>)"`` plus its traceback lines."""

    lines = [f"{utf8(value)} ({type(value).__name__})"]
    if value.__traceback__ is not None:
        lines.extend(line.rstrip("\n") for line in traceback.format_tb(value.__traceback__))
    return utf8("\n".join(lines))


def _convert_exception(value: BaseException, ctx: _Context, wrap: bool) -> str:
    return format_exception(value)


def _convert_pattern(value: re.Pattern[Any], ctx: _Context, wrap: bool) -> str:
    return utf8(value.pattern)


def _convert_text(value: Any, ctx: _Context, wrap: bool) -> str:
    return utf8(value)


def _convert_url(value: Any, ctx: _Context, wrap: bool) -> str:
    return utf8(value.geturl())


def _convert_deferred(value: Any, ctx: _Context, wrap: bool) -> Any:
    return _normalize(resolve_value(value, scope=ctx.scope), ctx.enter(value), wrap)


def _convert_enum(value: enum.Enum, ctx: _Context, wrap: bool) -> Any:
    return _normalize(value.value, ctx.enter(value), wrap)


def _is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and callable(getattr(value, "_asdict", None))


_URL_TYPES = (ParseResult, SplitResult, DefragResult)
_IP_TYPES = (
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Network,
    ipaddress.IPv6Network,
    ipaddress.IPv4Interface,
    ipaddress.IPv6Interface,
)

Converter = Callable[[Any, _Context, bool], Any]

# Order matters: subclasses before their bases (bool before int, datetime
# before date, URL tuples and named tuples before generic sequences).
_DISPATCH: tuple[tuple[Callable[[Any], bool], Converter], ...] = (
    (lambda v: isinstance(v, str), _convert_text),
    (lambda v: v is None or isinstance(v, bool), lambda v, ctx, wrap: v),
    (lambda v: type(v) is int, lambda v, ctx, wrap: v),
    (lambda v: isinstance(v, enum.Enum), _convert_enum),
    (lambda v: isinstance(v, int), lambda v, ctx, wrap: int(v)),
    (lambda v: isinstance(v, float), _convert_float),
    (is_deferred, _convert_deferred),
    (_is_collection, _convert_collection),
    (lambda v: isinstance(v, Mapping), _convert_mapping),
    (lambda v: isinstance(v, (bytes, bytearray, memoryview)), _convert_text),
    (lambda v: isinstance(v, _URL_TYPES), _convert_url),
    (lambda v: isinstance(v, range), _convert_text),
    (_is_named_tuple, _convert_named_tuple),
    (lambda v: isinstance(v, (Sequence, AbstractSet, Iterator)), _convert_iterable),
    (lambda v: isinstance(v, datetime), lambda v, ctx, wrap: format_time(v)),
    (lambda v: isinstance(v, (date, time)), lambda v, ctx, wrap: v.isoformat()),
    (lambda v: isinstance(v, timedelta), lambda v, ctx, wrap: v.total_seconds()),
    (lambda v: isinstance(v, Decimal), _convert_decimal),
    (lambda v: isinstance(v, (complex, Fraction)), _convert_text),
    (lambda v: isinstance(v, BaseException), _convert_exception),
    (lambda v: isinstance(v, re.Pattern), _convert_pattern),
    (lambda v: isinstance(v, (PurePath, uuid.UUID) + _IP_TYPES), _convert_text),
)


def _has_method(name: str) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return callable(getattr(value, name, None))

    return predicate


def _mapping_protocol(value: Any) -> bool:
    return callable(getattr(value, "keys", None)) and callable(getattr(value, "__getitem__", None))


# Attempted in order for values none of the dispatch entries recognise.
_FALLBACKS: tuple[tuple[Callable[[Any], bool], Callable[[Any], Any]], ...] = (
    (_has_method("as_json"), lambda v: v.as_json()),
    (_has_method("to_dict"), lambda v: v.to_dict()),
    (lambda v: dataclasses.is_dataclass(v) and not isinstance(v, type), dataclasses.asdict),
    (_mapping_protocol, lambda v: {key: v[key] for key in v.keys()}),
    (_has_method("__iter__"), list),
    (_has_method("isoformat"), lambda v: v.isoformat()),
    (_has_method("__float__"), float),
    (_has_method("__int__"), int),
)


def _fallback(value: Any, ctx: _Context, wrap: bool) -> Any:
    for predicate, convert in _FALLBACKS:
        try:
            if not predicate(value):
                continue
            converted = convert(value)
        except Exception:
            continue
        if type(converted) is type(value):
            continue
        return _normalize(converted, ctx.enter(value), wrap)
    return _inspect(value)


def _normalize(value: Any, ctx: _Context, wrap: bool) -> Any:
    if id(value) in ctx.path and not isinstance(value, (str, int, float, bool)) and value is not None:
        return _inspect(value)
    for predicate, convert in _DISPATCH:
        if not predicate(value):
            continue
        try:
            return convert(value, ctx, wrap)
        except Exception:
            LOGGER.warning("Could not normalize value of type %s", type(value).__name__, exc_info=True)
            return _inspect(value)
    return _fallback(value, ctx, wrap)


def normalize(value: Any, *, scope: Any = None, wrap: bool = True, resolve: bool = True) -> Any:
    """Return a JSON-safe representation of ``value``.

    Parameters
    ----------
    value:
        Anything. Deferred values are evaluated first (see :func:`is_deferred`).
    scope:
        Argument handed to deferred callables that accept one parameter.
    wrap:
        When ``True`` mappings and sequences become
        :class:`~lib_log_stash.domain.fields.FieldsHash` and
        :class:`~lib_log_stash.domain.fields.FieldsArray` containers; when
        ``False`` the top level is returned as a plain ``dict`` or ``list``
        (nested values stay wrapped).
    resolve:
        When ``False`` a deferred ``value`` is returned unevaluated.

    Returns
    -------
    Any
        A string, number, boolean, ``None``, or a field container. The call
        never raises: values that cannot be converted degrade to their
        ``repr()``.

    Examples
    --------
    >>> from decimal import Decimal
    >>> normalize(Decimal('1.10'))
    '1.10'
    >>> normalize({'a': [1, (2, 3)]}, wrap=False)['a'].as_json()
    [1, [2, 3]]
    >>> normalize(ValueError('boom'))
    'boom (ValueError)'
    >>> normalize(lambda: 'later')
    'later'
    """

    if not resolve and is_deferred(value):
        return value
    try:
        return _normalize(value, _Context(scope), wrap)
    except RecursionError:
        return _inspect(value)


__all__ = ["Deferred", "call_with_scope", "format_exception", "format_time", "is_deferred", "normalize", "resolve_value"]
