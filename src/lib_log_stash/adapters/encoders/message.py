"""Plain-text encoder writing just the message lines."""

from __future__ import annotations

from typing import Any, Iterable

from ...domain.utf8 import utf8
from ._helpers import normalize_message, normalize_timestamp


class MessageEncoder:
    """Return the event's message text.

    Each line is prefixed by ``[value] `` for every field named in ``tagged``
    that the event carries; list values render as ``[a,b] ``. Timestamps in
    tagged fields are rendered as ISO-8601.

    Examples
    --------
    >>> MessageEncoder(tagged=['tags', 'pid']).encode({'message': ['a\\n', 'b\\n'], 'tags': ['web', 'api'], 'pid': 7})
    '[web,api] [7] a\\n[web,api] [7] b\\n'
    """

    def __init__(self, tagged: Iterable[Any] = ()) -> None:
        if isinstance(tagged, str):
            tagged = [tagged]
        self.tagged = [utf8(field) for field in tagged]

    def encode(self, event: dict[str, Any]) -> str:
        normalize_message(event, force=True)
        message: str = event["message"]
        if not message:
            return message
        prefix = "".join(self._format_tag(event, field) for field in self.tagged)
        if not prefix:
            return message
        return "".join(prefix + line for line in message.splitlines(keepends=True))

    @staticmethod
    def _format_tag(event: dict[str, Any], field: str) -> str:
        normalize_timestamp(event, field)
        value = event.get(field)
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return f"[{','.join(utf8(item) for item in value)}] "
        return f"[{utf8(value)}] "

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tagged={self.tagged!r})"


__all__ = ["MessageEncoder"]
