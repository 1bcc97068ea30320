from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_log_stash.domain.utf8 import REPLACEMENT_CHARACTER, force_inspect, utf8

SURROGATES = st.sampled_from(["\ud800", "\udbff", "\udc80", "\udfff"])
DIRTY_TEXT = st.lists(st.text() | SURROGATES).map("".join)


class Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("no str")

    def __repr__(self) -> str:
        raise RuntimeError("no repr")


class OnlyRepr:
    def __str__(self) -> str:
        raise RuntimeError("no str")

    def __repr__(self) -> str:
        return "OnlyRepr()"


class Label(str):
    def __str__(self) -> str:
        return "overridden"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain", "plain"),
        (b"caf\xc3\xa9", "café"),
        (bytearray(b"abc"), "abc"),
        (memoryview(b"xyz"), "xyz"),
        (b"\xff\xfe", REPLACEMENT_CHARACTER * 2),
        ("a\ud800b", f"a{REPLACEMENT_CHARACTER}b"),
        (42, "42"),
        (None, "None"),
    ],
)
def test_utf8_converts_common_values(value: object, expected: str) -> None:
    assert utf8(value) == expected


def test_utf8_returns_exact_str_for_subclasses() -> None:
    result = utf8(Label("tag"))

    assert type(result) is str
    assert result == "tag"


def test_utf8_falls_back_to_repr_then_forced_inspection() -> None:
    assert utf8(OnlyRepr()) == "OnlyRepr()"
    assert utf8(Unprintable()).startswith("<Unprintable object at 0x")


def test_force_inspect_does_not_call_into_the_object() -> None:
    assert force_inspect(Unprintable()).startswith("<Unprintable object at 0x")


@given(DIRTY_TEXT)
def test_utf8_output_always_encodes(value: str) -> None:
    utf8(value).encode("utf-8")


@given(DIRTY_TEXT | st.binary())
def test_utf8_is_idempotent(value: object) -> None:
    once = utf8(value)

    assert utf8(once) == once
