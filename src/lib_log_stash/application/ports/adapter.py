"""Adapter port describing where encoded events are written.

Purpose
-------
Define the narrow write/close/reopen contract the flows rely on so concrete
devices (streams, files, stdlib loggers, Rich consoles) plug in without the
application layer knowing about them.

Contents
--------
* :class:`AdapterPort` – runtime-checkable protocol.

System Role
-----------
Implemented by every class in :mod:`lib_log_stash.adapters.sinks`; consumed by
:class:`~lib_log_stash.application.flow.Flow`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .encoder import EncoderPort


@runtime_checkable
class AdapterPort(Protocol):
    """Write encoded events to an external device."""

    def write(self, encoded: Any) -> None:
        """Persist one encoded event. May block and may raise."""

    def close(self) -> None:
        """Release the device. Calling it twice must be harmless."""

    def reopen(self) -> None:
        """Re-acquire the device, e.g. after log rotation."""

    def default_encoder(self) -> "EncoderPort":
        """Return the encoder used when a flow does not name one."""


__all__ = ["AdapterPort"]
