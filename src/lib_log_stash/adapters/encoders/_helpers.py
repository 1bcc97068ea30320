"""Helpers shared by the encoders."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from ...application.flow import join_message
from ...domain.constants import FIELD_MESSAGE, FIELD_TIMESTAMP
from ...domain.normalize import format_time, normalize


def normalize_message(event: dict[str, Any], field: str = FIELD_MESSAGE, *, force: bool = False) -> dict[str, Any]:
    """Join the message list stored under ``field`` into one string."""

    if field in event or force:
        event[field] = join_message(event.get(field))
    return event


def normalize_timestamp(event: dict[str, Any], field: str = FIELD_TIMESTAMP, *, force: bool = False) -> dict[str, Any]:
    """Render a ``datetime`` or ``date`` under ``field`` as an ISO-8601 UTC string.

    Strings are left alone; with ``force`` a missing value becomes the current time.
    """

    value = event.get(field)
    if isinstance(value, datetime):
        event[field] = format_time(value)
    elif isinstance(value, date):
        event[field] = format_time(datetime(value.year, value.month, value.day, tzinfo=timezone.utc))
    elif value is None and force:
        event[field] = format_time(datetime.now(timezone.utc))
    return event


def plain(event: dict[str, Any]) -> dict[str, Any]:
    """Return ``event`` normalised into plain ``dict`` / ``list`` / scalar values."""

    return normalize(event).as_json()


__all__ = ["normalize_message", "normalize_timestamp", "plain"]
