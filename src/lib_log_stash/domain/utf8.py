"""UTF-8 text normalisation.

Purpose
-------
Coerce arbitrary input into text that is guaranteed to encode as valid UTF-8,
so every key, tag, and string value reaching an encoder can be written without
further checks.

Contents
--------
* :func:`utf8` – total conversion of any object to clean UTF-8 text.
* :func:`force_inspect` – last-resort representation for objects whose
  ``__str__`` and ``__repr__`` both fail.

System Role
-----------
Leaf of the domain layer; used by the value normaliser, the field containers,
messages, and the filters that build field names from user input.
"""

from __future__ import annotations

import re
from typing import Any

REPLACEMENT_CHARACTER = "�"

_SURROGATES = re.compile("[\ud800-\udfff]")


def force_inspect(value: Any) -> str:
    """Return ``<TypeName object at 0x…>`` without calling into ``value``.

    Examples
    --------
    >>> force_inspect(object()).startswith('<object object at 0x')
    True
    """

    try:
        name = type(value).__qualname__
    except Exception:  # pragma: no cover - metaclass without a name
        name = "object"
    return f"<{name} object at 0x{id(value):x}>"


def _clean(text: str) -> str:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        text = _SURROGATES.sub(REPLACEMENT_CHARACTER, text)
    return text


def utf8(value: Any) -> str:
    """Return ``value`` as a plain ``str`` that encodes as valid UTF-8.

    Bytes-like input is decoded as UTF-8 with invalid sequences replaced by
    U+FFFD. Lone surrogates in text are replaced the same way. Any other object
    is converted with ``str()``; when that fails the object's ``repr()`` is
    used, and when even that fails a forced representation.

    Examples
    --------
    >>> utf8('hello')
    'hello'
    >>> utf8(b'caf\\xc3\\xa9')
    'café'
    >>> utf8(b'\\xff')
    '�'
    >>> utf8(42)
    '42'
    >>> utf8(utf8('\\udc80')) == utf8('\\udc80') == '�'
    True
    """

    if type(value) is str:
        return _clean(value)
    if isinstance(value, str):
        return _clean(str.__str__(value))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    try:
        text = str(value)
    except Exception:
        try:
            text = repr(value)
        except Exception:
            text = force_inspect(value)
    if type(text) is not str:
        text = str.__str__(text) if isinstance(text, str) else force_inspect(value)
    return _clean(text)


__all__ = ["REPLACEMENT_CHARACTER", "force_inspect", "utf8"]
