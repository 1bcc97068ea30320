"""Thread-safe list of flows."""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterator

from .flow import Flow


class Flows:
    """Ordered flows of a sink; anything that is not a :class:`Flow` is wrapped in one."""

    def __init__(self, *flows: Any, flow_factory: Callable[[Any], Flow] = Flow) -> None:
        self._lock = threading.Lock()
        self._flow_factory = flow_factory
        self._flows: list[Flow] = []
        for flow in flows:
            self.add(flow)

    def _coerce(self, flow: Any) -> Flow:
        return flow if isinstance(flow, Flow) else self._flow_factory(flow)

    def add(self, flow: Any) -> "Flows":
        flow = self._coerce(flow)
        with self._lock:
            self._flows.append(flow)
        return self

    def __getitem__(self, index: int) -> Flow:
        with self._lock:
            return self._flows[index]

    def __setitem__(self, index: int, flow: Any) -> None:
        flow = self._coerce(flow)
        with self._lock:
            self._flows[index] = flow

    def __len__(self) -> int:
        with self._lock:
            return len(self._flows)

    @property
    def empty(self) -> bool:
        return len(self) == 0

    def first(self) -> Flow | None:
        flows = self.to_list()
        return flows[0] if flows else None

    def last(self) -> Flow | None:
        flows = self.to_list()
        return flows[-1] if flows else None

    def to_list(self) -> list[Flow]:
        with self._lock:
            return list(self._flows)

    def __iter__(self) -> Iterator[Flow]:
        return iter(self.to_list())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_list()!r})"


__all__ = ["Flows"]
