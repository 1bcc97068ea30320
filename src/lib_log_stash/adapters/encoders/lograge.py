"""``key=value`` encoder in the style of the lograge Rails gem."""

from __future__ import annotations

from typing import Any

from ...domain.constants import FIELD_ERROR, FIELD_ERROR_MESSAGE, FIELD_ERROR_TRACE, FIELD_MESSAGE, FIELD_TIMESTAMP
from ...domain.utf8 import utf8
from ._helpers import normalize_timestamp, plain

SKIPPED_FIELDS = (FIELD_MESSAGE, FIELD_ERROR_TRACE)


class LogrageEncoder:
    """Render an event as space separated ``key=value`` pairs.

    Nested mappings and lists become dotted keys, floats keep two decimals,
    ``None`` values are left out, and the error class and message are combined
    into one quoted ``error`` value. The message and the error trace are not
    part of the output.

    Examples
    --------
    >>> LogrageEncoder().encode({
    ...     'message': ['ignored'], 'method': 'GET', 'duration': 12.3456,
    ...     'params': {'id': 7, 'tags': ['a']}, 'error': 'KeyError', 'error_message': 'id',
    ... })
    "method=GET duration=12.35 params.id=7 params.tags.0=a error='KeyError: id'"
    """

    def encode(self, event: dict[str, Any]) -> str:
        normalize_timestamp(event)
        self._format_error(event)
        for field in SKIPPED_FIELDS:
            event.pop(field, None)
        pairs: dict[str, str] = {}
        for key, value in plain(event).items():
            self._add(pairs, "timestamp" if key == FIELD_TIMESTAMP else key, value)
        return " ".join(f"{key}={value}" for key, value in pairs.items())

    @staticmethod
    def _format_error(event: dict[str, Any]) -> None:
        error = event.get(FIELD_ERROR)
        error_message = event.pop(FIELD_ERROR_MESSAGE, None)
        if error is not None and error_message is not None:
            event[FIELD_ERROR] = f"'{utf8(error)}: {utf8(error_message)}'"
        elif error is not None or error_message is not None:
            event[FIELD_ERROR] = f"'{utf8(error if error is not None else error_message)}'"
        else:
            event[FIELD_ERROR] = None

    def _add(self, pairs: dict[str, str], key: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                self._add(pairs, f"{key}.{sub_key}", sub_value)
        elif isinstance(value, list):
            for index, item in enumerate(value):
                self._add(pairs, f"{key}.{index}", item)
        elif isinstance(value, bool):
            pairs[key] = "true" if value else "false"
        elif isinstance(value, float):
            pairs[key] = f"{value:.2f}"
        else:
            pairs[key] = utf8(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["LogrageEncoder"]
