"""One output path: filter chain → encoder → adapter.

Purpose
-------
Bind a device adapter to the encoder producing its representation and the
filters deciding what reaches it.

Contents
--------
* :func:`join_message` – collapse the message list into one string.
* :class:`Flow` – the output path.

System Role
-----------
A :class:`~lib_log_stash.application.sink.Sink` writes every event to each of
its flows.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..domain.constants import FIELD_MESSAGE
from ..domain.utf8 import utf8
from .filter_chain import FilterCallable, FilterChain
from .ports import AdapterPort, EncoderPort
from .registry import ClassRegistry

LOGGER = logging.getLogger(__name__)


def join_message(value: Any) -> str:
    """Return the event's message list as a single string.

    Examples
    --------
    >>> join_message(['a\\n', 'b\\n']), join_message(None), join_message('x')
    ('a\\nb\\n', '', 'x')
    """

    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return "".join(utf8(item) for item in value)
    return utf8(value)


class Flow:
    """Filter, encode and write events to one adapter.

    Parameters
    ----------
    adapter:
        An adapter object, or any device the adapter registry can resolve (a
        path, ``file://`` URI, stream, stdlib logger, callable or ``None``).
    encoder:
        Encoder object, registered encoder name or encoder class. Defaults to
        the adapter's default encoder.
    filters:
        Filter specs appended to the flow's :class:`FilterChain`.
    """

    def __init__(
        self,
        adapter: Any,
        *,
        encoder: Any = None,
        filters: Iterable[Any] = (),
        adapter_registry: Any = None,
        encoder_registry: ClassRegistry[Any] | None = None,
        filter_registry: ClassRegistry[Any] | None = None,
    ) -> None:
        self._adapter = self._resolve_adapter(adapter, adapter_registry)
        self._encoder_registry = encoder_registry
        self._encoder = self._resolve_encoder(self._adapter.default_encoder() if encoder is None else encoder)
        self._filter_chain = FilterChain(filters, registry=filter_registry)

    @staticmethod
    def _resolve_adapter(adapter: Any, registry: Any) -> AdapterPort:
        if isinstance(adapter, AdapterPort):
            return adapter
        if registry is None:
            from ..adapters.sinks import adapter_registry

            registry = adapter_registry()
        return registry.resolve(adapter)

    def _resolve_encoder(self, encoder: Any) -> EncoderPort:
        if isinstance(encoder, (str, type)):
            registry = self._encoder_registry
            if registry is None:
                from ..adapters.encoders import encoder_registry

                registry = self._encoder_registry = encoder_registry()
            encoder = registry.build(encoder)
        if not isinstance(encoder, EncoderPort):
            raise TypeError("must provide an encoder")
        return encoder

    @property
    def adapter(self) -> AdapterPort:
        return self._adapter

    @property
    def encoder(self) -> EncoderPort:
        return self._encoder

    @encoder.setter
    def encoder(self, encoder: Any) -> None:
        self._encoder = self._resolve_encoder(encoder)

    @property
    def filter_chain(self) -> FilterChain:
        return self._filter_chain

    def filter(self, spec: Any, *args: Any, **kwargs: Any) -> "Flow":
        """Append a filter to the chain."""

        self._filter_chain.append(spec, *args, **kwargs)
        return self

    def filter_prepend(self, spec: Any, *args: Any, **kwargs: Any) -> "Flow":
        self._filter_chain.unshift(spec, *args, **kwargs)
        return self

    def filter_before(self, locator: Any, spec: Any, *args: Any, **kwargs: Any) -> "Flow":
        self._filter_chain.insert_before(locator, spec, *args, **kwargs)
        return self

    def filter_after(self, locator: Any, spec: Any, *args: Any, **kwargs: Any) -> "Flow":
        self._filter_chain.insert_after(locator, spec, *args, **kwargs)
        return self

    def filter_delete(self, locator: Any) -> FilterCallable | None:
        return self._filter_chain.delete(locator)

    def write(self, event: dict[str, Any]) -> bool:
        """Run ``event`` through the pipeline.

        Returns ``False`` when a filter dropped the event and ``True`` once the
        adapter accepted it. Filter, encoder and adapter errors propagate.
        """

        if self._filter_chain(event) is False:
            return False
        event[FIELD_MESSAGE] = join_message(event.get(FIELD_MESSAGE))
        self._adapter.write(self._encoder.encode(event))
        return True

    def close(self) -> None:
        try:
            self._adapter.close()
        except Exception:
            LOGGER.exception("close failed for adapter %r", self._adapter)
            raise

    def reopen(self) -> None:
        try:
            self._adapter.reopen()
        except Exception:
            LOGGER.exception("reopen failed for adapter %r", self._adapter)
            raise

    def __repr__(self) -> str:
        return f"{type(self).__name__}(adapter={self._adapter!r}, encoder={self._encoder!r})"


__all__ = ["Flow", "join_message"]
