"""Base class of the device adapters.

Purpose
-------
Implement the :class:`~lib_log_stash.application.ports.AdapterPort` contract
once so concrete adapters only provide :meth:`BaseAdapter.write_single`.

System Role
-----------
Every adapter in :mod:`lib_log_stash.adapters.sinks` derives from
:class:`BaseAdapter`; flows use :meth:`BaseAdapter.default_encoder` when they
are not given an encoder.
"""

from __future__ import annotations

from typing import Any

from ...application.ports import EncoderPort
from ...domain.utf8 import utf8
from ..encoders import JSONEncoder


class BaseAdapter:
    """Adapter writing each encoded event with :meth:`write_single`."""

    def default_encoder(self) -> EncoderPort:
        return JSONEncoder()

    def write(self, encoded: Any) -> None:
        self.write_single(encoded)

    def write_single(self, encoded: Any) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement write_single")

    def close(self) -> None:
        """Release the device; a no-op unless overridden."""

    def reopen(self) -> None:
        """Re-acquire the device; a no-op unless overridden."""

    @staticmethod
    def normalize_line(line: Any) -> str:
        """Return ``line`` as text ending in a newline, or ``""`` when empty.

        Examples
        --------
        >>> BaseAdapter.normalize_line('a'), BaseAdapter.normalize_line('b\\n'), BaseAdapter.normalize_line('')
        ('a\\n', 'b\\n', '')
        """

        text = utf8(line)
        if not text or text.endswith("\n"):
            return text
        return text + "\n"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["BaseAdapter"]
