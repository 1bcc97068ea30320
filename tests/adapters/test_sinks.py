from __future__ import annotations

import io
import logging
import sys
import threading
from typing import Any

import pytest

from lib_log_stash.adapters.encoders import HashEncoder, JSONEncoder, RawEncoder
from lib_log_stash.adapters.sinks import (
    BaseAdapter,
    CallableAdapter,
    IOAdapter,
    LoggerAdapter,
    NullAdapter,
    stream_lock,
)
from lib_log_stash.application.ports import AdapterPort
from lib_log_stash.domain.levels import Severity


@pytest.mark.parametrize(
    "adapter",
    [NullAdapter(), IOAdapter(io.StringIO()), CallableAdapter(print), LoggerAdapter(logging.getLogger("tests.port"))],
    ids=["null", "io", "callable", "logger"],
)
def test_adapters_satisfy_the_port(adapter: BaseAdapter) -> None:
    assert isinstance(adapter, AdapterPort)


def test_base_adapter_requires_write_single() -> None:
    with pytest.raises(NotImplementedError, match="must implement write_single"):
        BaseAdapter().write("x")


def test_base_adapter_defaults_to_json() -> None:
    assert isinstance(BaseAdapter().default_encoder(), JSONEncoder)


@pytest.mark.parametrize("line, expected", [("a", "a\n"), ("b\n", "b\n"), ("", ""), (5, "5\n")])
def test_normalize_line(line: Any, expected: str) -> None:
    assert BaseAdapter.normalize_line(line) == expected


def test_null_adapter_discards_everything() -> None:
    adapter = NullAdapter("ignored", "arguments")

    assert adapter.write({"message": "x"}) is None
    assert isinstance(adapter.default_encoder(), RawEncoder)
    assert repr(adapter) == "NullAdapter()"
    adapter.close()
    adapter.reopen()


def test_io_adapter_writes_one_line_per_event() -> None:
    stream = io.StringIO()
    adapter = IOAdapter(stream)

    adapter.write("first")
    adapter.write("second\n")
    adapter.write("")

    assert stream.getvalue() == "first\nsecond\n"


def test_io_adapter_encodes_for_binary_streams() -> None:
    stream = io.BytesIO()

    IOAdapter(stream).write("grüße")

    assert stream.getvalue() == "grüße\n".encode("utf-8")


def test_io_adapter_flushes_when_asked() -> None:
    class Recorder(io.StringIO):
        flushes = 0

        def flush(self) -> None:
            self.flushes += 1
            super().flush()

    stream = Recorder()
    IOAdapter(stream, flush_immediately=True).write("x")

    assert stream.flushes == 1


def test_io_adapter_closes_its_stream() -> None:
    stream = io.StringIO()

    IOAdapter(stream).close()

    assert stream.closed


def test_io_adapter_never_closes_standard_streams(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_stdout = io.StringIO()
    monkeypatch.setattr(sys, "stdout", fake_stdout)

    IOAdapter(fake_stdout).close()

    assert not fake_stdout.closed


def test_io_adapter_rejects_non_streams() -> None:
    with pytest.raises(TypeError, match="does not look like a stream"):
        IOAdapter(object())  # type: ignore[arg-type]


def test_adapters_on_one_stream_share_a_lock() -> None:
    stream = io.StringIO()

    assert stream_lock(stream) is stream_lock(stream)
    assert stream_lock(stream) is not stream_lock(io.StringIO())


def test_concurrent_writes_do_not_interleave() -> None:
    stream = io.StringIO()
    adapters = [IOAdapter(stream) for _ in range(4)]

    def worker(adapter: IOAdapter, index: int) -> None:
        for _ in range(50):
            adapter.write(f"line-{index}-" + "x" * 40)

    threads = [threading.Thread(target=worker, args=(adapter, index)) for index, adapter in enumerate(adapters)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    lines = stream.getvalue().splitlines()
    assert len(lines) == 200
    assert all(line.endswith("x" * 40) and line.startswith("line-") for line in lines)


def test_callable_adapter_passes_plain_dicts() -> None:
    seen: list[Any] = []
    adapter = CallableAdapter(seen.append)

    adapter.write(adapter.default_encoder().encode({"message": ["hi"], "n": 1}))

    assert seen == [{"message": "hi", "n": 1}]
    assert isinstance(adapter.default_encoder(), HashEncoder)


def test_callable_adapter_requires_a_callable() -> None:
    with pytest.raises(TypeError, match="is not callable"):
        CallableAdapter("nope")  # type: ignore[arg-type]


def test_logger_adapter_logs_at_the_configured_level(caplog: pytest.LogCaptureFixture) -> None:
    target = logging.getLogger("tests.lib_log_stash.target")
    adapter = LoggerAdapter(target, severity="warn")

    with caplog.at_level(logging.DEBUG, logger=target.name):
        adapter.write('{"message":"hi"}\n')

    assert [(record.levelno, record.getMessage()) for record in caplog.records] == [(logging.WARNING, '{"message":"hi"}')]
    assert adapter.severity is Severity.WARN


def test_logger_adapter_flushes_handlers_on_close() -> None:
    class CountingHandler(logging.Handler):
        flushed = 0

        def emit(self, record: logging.LogRecord) -> None:
            pass

        def flush(self) -> None:
            self.flushed += 1

    target = logging.getLogger("tests.lib_log_stash.flush")
    handler = CountingHandler()
    target.addHandler(handler)
    try:
        LoggerAdapter(target).close()
    finally:
        target.removeHandler(handler)

    assert handler.flushed == 1


def test_logger_adapter_rejects_non_loggers() -> None:
    with pytest.raises(TypeError, match="does not look like a logger"):
        LoggerAdapter(object())  # type: ignore[arg-type]
