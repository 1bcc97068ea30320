from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import pytest

from lib_log_stash.adapters.sinks import (
    AdapterRegistry,
    BaseAdapter,
    CallableAdapter,
    FileAdapter,
    IOAdapter,
    LoggerAdapter,
    NullAdapter,
    RichConsoleAdapter,
    adapter_registry,
)


class MemoryAdapter(BaseAdapter):
    def __init__(self, device: Any = None) -> None:
        self.device = device
        self.lines: list[Any] = []

    def write_single(self, encoded: Any) -> None:
        self.lines.append(encoded)


def test_adapters_are_returned_unchanged() -> None:
    adapter = MemoryAdapter()

    assert adapter_registry().resolve(adapter) is adapter


@pytest.mark.parametrize(
    "device, adapter_type",
    [
        (None, NullAdapter),
        ("null", NullAdapter),
        ("console", RichConsoleAdapter),
        (logging.getLogger("tests.registry"), LoggerAdapter),
        (io.StringIO(), IOAdapter),
        (print, CallableAdapter),
    ],
    ids=["none", "null-name", "console-name", "logger", "stream", "callable"],
)
def test_builtin_resolution(device: Any, adapter_type: type) -> None:
    assert isinstance(adapter_registry().resolve(device), adapter_type)


def test_paths_and_file_uris_resolve_to_file_adapters(tmp_path: Path) -> None:
    registry = adapter_registry()

    by_str = registry.resolve(str(tmp_path / "a.log"))
    by_path = registry.resolve(tmp_path / "b.log")
    by_uri = registry.resolve(f"file://{tmp_path.as_posix()}/c.log")

    for adapter in (by_str, by_path, by_uri):
        assert isinstance(adapter, FileAdapter)
        adapter.close()
    assert (tmp_path / "c.log").exists()


def test_unknown_uri_scheme_is_an_error() -> None:
    with pytest.raises(ValueError, match="No log adapter found for URI scheme 'gelf'"):
        adapter_registry().resolve("gelf://logs.example.invalid:12201")


def test_unmatched_devices_are_an_error() -> None:
    with pytest.raises(ValueError, match="No log adapter found for 42"):
        adapter_registry().resolve(42)


def test_custom_names_schemes_and_types() -> None:
    registry = AdapterRegistry()
    registry.register(MemoryAdapter, "memory")
    registry.register_scheme("mem", lambda uri: MemoryAdapter(uri))
    registry.register_type(list, MemoryAdapter)
    registry.register_type(lambda device: device == "special", MemoryAdapter)

    assert registry.names == ["memory"]
    assert registry.schemes == ["mem"]
    assert isinstance(registry.resolve("memory"), MemoryAdapter)
    assert registry.resolve("MEM://bucket").device == "MEM://bucket"  # type: ignore[attr-defined]
    assert registry.resolve([1]).device == [1]  # type: ignore[attr-defined]
    assert registry.resolve("special").device == "special"  # type: ignore[attr-defined]


def test_type_matchers_are_tried_in_registration_order() -> None:
    registry = AdapterRegistry()
    registry.register_type(object, lambda device: MemoryAdapter("first"))
    registry.register_type(int, lambda device: MemoryAdapter("second"))

    assert registry.resolve(1).device == "first"  # type: ignore[attr-defined]


def test_invalid_matchers_are_rejected() -> None:
    with pytest.raises(TypeError, match="Invalid adapter matcher"):
        AdapterRegistry().register_type(42, MemoryAdapter)  # type: ignore[arg-type]


def test_windows_drive_paths_are_not_uris() -> None:
    registry = AdapterRegistry()
    registry.register_type(str, MemoryAdapter)

    assert registry.resolve("C:\\logs\\app.log").device == "C:\\logs\\app.log"  # type: ignore[attr-defined]
