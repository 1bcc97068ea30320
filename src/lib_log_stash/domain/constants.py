"""Reserved event field names and formatting constants.

Purpose
-------
Keep the names of the fields a :class:`~lib_log_stash.domain.buffer.Buffer`
writes on its own in one place so the buffer, encoders, and filters agree on
them.

System Role
-----------
Imported throughout the domain and adapter layers; the reserved names double
as the forbidden-key set of every buffer's field container.
"""

from __future__ import annotations

FIELD_MESSAGE = "message"
FIELD_TAGS = "tags"
FIELD_TIMESTAMP = "@timestamp"
FIELD_VERSION = "@version"

FIELD_ERROR = "error"
FIELD_ERROR_MESSAGE = "error_message"
FIELD_ERROR_TRACE = "error_trace"

EVENT_VERSION = "1"

FORBIDDEN_FIELDS: frozenset[str] = frozenset({FIELD_MESSAGE, FIELD_TAGS, FIELD_TIMESTAMP, FIELD_VERSION})

ISO8601_PRECISION = 6


__all__ = [
    "EVENT_VERSION",
    "FIELD_ERROR",
    "FIELD_ERROR_MESSAGE",
    "FIELD_ERROR_TRACE",
    "FIELD_MESSAGE",
    "FIELD_TAGS",
    "FIELD_TIMESTAMP",
    "FIELD_VERSION",
    "FORBIDDEN_FIELDS",
    "ISO8601_PRECISION",
]
