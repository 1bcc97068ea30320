from __future__ import annotations

import logging
from io import StringIO
from typing import Any

import pytest

from lib_log_stash.adapters.encoders import HashEncoder, JSONEncoder, MessageEncoder, RawEncoder
from lib_log_stash.adapters.sinks import BaseAdapter, CallableAdapter, IOAdapter, NullAdapter
from lib_log_stash.application.flow import Flow, join_message
from lib_log_stash.application.flows import Flows
from lib_log_stash.domain.message import Message


class ListAdapter(BaseAdapter):
    def __init__(self) -> None:
        self.written: list[Any] = []
        self.closed = 0
        self.reopened = 0

    def write_single(self, encoded: Any) -> None:
        self.written.append(encoded)

    def close(self) -> None:
        self.closed += 1

    def reopen(self) -> None:
        self.reopened += 1


class BrokenAdapter(ListAdapter):
    def close(self) -> None:
        raise OSError("device gone")


def _event(*lines: str, **fields: Any) -> dict[str, Any]:
    return {"message": [Message(line) for line in lines], **fields}


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        ([], ""),
        (["a\n", "b\n"], "a\nb\n"),
        (("x", "y"), "xy"),
        ("already joined", "already joined"),
        ([Message("m1 "), Message("m2")], "m1 m2"),
    ],
)
def test_join_message_concatenates_without_separator(value: Any, expected: str) -> None:
    assert join_message(value) == expected


def test_write_joins_messages_and_encodes() -> None:
    adapter = ListAdapter()
    flow = Flow(adapter, encoder="json")

    assert flow.write(_event("one\n", "two\n", user="ada")) is True
    assert adapter.written == ['{"message":"one\\ntwo\\n","user":"ada"}']


def test_adapter_default_encoder_is_used_when_none_given() -> None:
    assert isinstance(Flow(ListAdapter()).encoder, JSONEncoder)
    assert isinstance(Flow(None).encoder, RawEncoder)
    assert isinstance(Flow(print).encoder, HashEncoder)


@pytest.mark.parametrize(
    "device, adapter_type",
    [
        (None, NullAdapter),
        ("null", NullAdapter),
        (StringIO(), IOAdapter),
        (print, CallableAdapter),
    ],
)
def test_devices_are_resolved_through_the_adapter_registry(device: Any, adapter_type: type) -> None:
    assert isinstance(Flow(device).adapter, adapter_type)


def test_encoder_accepts_names_classes_and_objects() -> None:
    flow = Flow(ListAdapter(), encoder=MessageEncoder)
    assert isinstance(flow.encoder, MessageEncoder)

    flow.encoder = "hash"
    assert isinstance(flow.encoder, HashEncoder)

    encoder = JSONEncoder()
    flow.encoder = encoder
    assert flow.encoder is encoder


def test_invalid_encoders_are_rejected() -> None:
    with pytest.raises(TypeError, match="must provide an encoder"):
        Flow(ListAdapter(), encoder=object())
    with pytest.raises(KeyError):
        Flow(ListAdapter(), encoder="no_such_encoder")


def test_dropped_events_never_reach_the_adapter() -> None:
    adapter = ListAdapter()
    flow = Flow(adapter, filters=[lambda event: False])

    assert flow.write(_event("secret")) is False
    assert adapter.written == []


def test_filters_see_the_message_list() -> None:
    seen: list[Any] = []
    adapter = ListAdapter()
    flow = Flow(adapter, encoder="hash")
    flow.filter(lambda event: seen.append(list(event["message"])))

    flow.write(_event("a", "b"))

    assert [[str(m) for m in batch] for batch in seen] == [["a", "b"]]
    assert adapter.written == [{"message": "ab"}]


def test_filter_helpers_edit_the_chain() -> None:
    flow = Flow(ListAdapter())
    first = lambda event: event  # noqa: E731
    flow.filter(first)
    flow.filter_prepend("remove", "password")
    flow.filter_after(first, "rename", {"a": "b"})
    flow.filter_before(first, "select", "message", "b")

    names = [type(f).__name__ for f in flow.filter_chain]
    assert names == ["Remove", "Select", "function", "Rename"]
    assert flow.filter_delete("Select") is not None
    assert len(flow.filter_chain) == 3


def test_adapter_errors_propagate() -> None:
    class Exploding(ListAdapter):
        def write_single(self, encoded: Any) -> None:
            raise OSError("no space left")

    with pytest.raises(OSError, match="no space left"):
        Flow(Exploding()).write(_event("x"))


def test_close_and_reopen_reach_the_adapter() -> None:
    adapter = ListAdapter()
    flow = Flow(adapter)

    flow.close()
    flow.reopen()

    assert (adapter.closed, adapter.reopened) == (1, 1)


def test_close_failures_are_logged_and_reraised(caplog: pytest.LogCaptureFixture) -> None:
    flow = Flow(BrokenAdapter())

    with caplog.at_level(logging.ERROR, logger="lib_log_stash.application.flow"):
        with pytest.raises(OSError, match="device gone"):
            flow.close()

    assert any("close failed" in record.getMessage() for record in caplog.records)


def test_flows_wrap_devices_and_keep_order() -> None:
    adapter = ListAdapter()
    explicit = Flow(adapter)
    flows = Flows(explicit, None)

    assert len(flows) == 2
    assert flows.first() is explicit
    assert isinstance(flows.last().adapter, NullAdapter)  # type: ignore[union-attr]
    assert flows[0] is explicit

    flows[1] = print
    assert isinstance(flows[1].adapter, CallableAdapter)

    flows.add(ListAdapter())
    assert [type(flow.adapter).__name__ for flow in flows] == ["ListAdapter", "CallableAdapter", "ListAdapter"]


def test_empty_flows() -> None:
    flows = Flows()

    assert flows.empty
    assert flows.first() is None
    assert flows.last() is None
    assert flows.to_list() == []
