"""Rich-powered console adapter.

Purpose
-------
Render events for humans watching a terminal: timestamp, message, tags and
the remaining fields on one styled line, or the encoded text as-is when the
flow uses a text encoder.

Contents
--------
* :data:`_STYLE_MAP` - default part-to-style mapping.
* :class:`RichConsoleAdapter` - adapter used for the ``console`` target.

System Role
-----------
Human-facing adapter chosen by :func:`lib_log_stash.init` when the target is
the console; honours colour overrides like ``force_color`` and ``no_color``.
"""

from __future__ import annotations

from typing import Any, Mapping

from rich.console import Console
from rich.text import Text

from ...application.ports import EncoderPort
from ...domain.constants import FIELD_ERROR, FIELD_MESSAGE, FIELD_TAGS, FIELD_TIMESTAMP, FIELD_VERSION
from ...domain.utf8 import utf8
from ..encoders import HashEncoder
from .base import BaseAdapter

#: Default Rich styles keyed by the part of the line they apply to.
_STYLE_MAP: Mapping[str, str] = {
    "timestamp": "dim",
    "message": "",
    "error": "bold red",
    "tags": "magenta",
    "fields": "cyan",
}

_SKIPPED = {FIELD_MESSAGE, FIELD_TAGS, FIELD_TIMESTAMP, FIELD_VERSION}


class RichConsoleAdapter(BaseAdapter):
    """Print events through a Rich :class:`~rich.console.Console`.

    Examples
    --------
    >>> from io import StringIO
    >>> console = Console(file=StringIO(), record=True, width=120)
    >>> adapter = RichConsoleAdapter(console=console)
    >>> adapter.write({'@timestamp': '2016-10-17T10:37:00.000000Z', 'message': 'hello', 'tags': ['web'], 'pid': 7})
    >>> console.export_text().strip()
    '2016-10-17T10:37:00.000000Z hello [web] pid=7'
    """

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
        styles: Mapping[str, str] | None = None,
        stderr: bool = False,
    ) -> None:
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=force_color or None, no_color=no_color, stderr=stderr)
        self._no_color = no_color
        merged = dict(_STYLE_MAP)
        if styles:
            merged.update({key: value for key, value in styles.items() if key in _STYLE_MAP})
        self._style_map = merged

    @property
    def console(self) -> Console:
        return self._console

    def default_encoder(self) -> EncoderPort:
        return HashEncoder()

    def write_single(self, encoded: Any) -> None:
        if isinstance(encoded, Mapping):
            self._console.print(self._format_line(encoded), highlight=False, soft_wrap=True)
            return
        line = utf8(encoded).rstrip("\n")
        if line:
            self._console.print(Text(line, style=self._style("message")), highlight=False, soft_wrap=True)

    def close(self) -> None:
        self._console.file.flush()

    def _style(self, part: str) -> str:
        return "" if self._no_color else self._style_map.get(part, "")

    def _format_line(self, event: Mapping[str, Any]) -> Text:
        """Return the styled console line for a plain event mapping."""

        text = Text()
        timestamp = event.get(FIELD_TIMESTAMP)
        if timestamp:
            text.append(f"{utf8(timestamp)} ", style=self._style("timestamp"))
        part = "error" if event.get(FIELD_ERROR) is not None else "message"
        text.append(utf8(event.get(FIELD_MESSAGE) or "").rstrip("\n"), style=self._style(part))
        tags = event.get(FIELD_TAGS) or []
        if tags:
            text.append(f" [{', '.join(utf8(tag) for tag in tags)}]", style=self._style("tags"))
        fields = {key: value for key, value in event.items() if key not in _SKIPPED and value is not None and value != {}}
        if fields:
            text.append(" " + " ".join(f"{key}={value}" for key, value in sorted(fields.items())), style=self._style("fields"))
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["RichConsoleAdapter"]
