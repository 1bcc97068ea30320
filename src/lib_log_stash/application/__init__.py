"""Application layer: ports plus the pipeline connecting buffers to adapters."""

from __future__ import annotations

from .filter_chain import FilterChain, build_filter
from .flow import Flow
from .flows import Flows
from .registry import ClassRegistry
from .sink import Sink

__all__ = ["ClassRegistry", "FilterChain", "Flow", "Flows", "Sink", "build_filter"]
