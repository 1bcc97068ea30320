from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any

import pytest

from lib_log_stash.adapters.encoders import (
    HashEncoder,
    JSONEncoder,
    LogrageEncoder,
    LogstashEncoder,
    MessageEncoder,
    RawEncoder,
    encoder_registry,
)
from lib_log_stash.adapters.encoders._helpers import normalize_message, normalize_timestamp
from lib_log_stash.domain.message import Message

TIMESTAMP = "2016-10-17T10:37:00.000000Z"


def _event(**fields: Any) -> dict[str, Any]:
    event: dict[str, Any] = {"message": [Message("first\n"), Message("second\n")], "tags": ["web"], "@timestamp": TIMESTAMP}
    event.update(fields)
    return event


def test_normalize_message_joins_lists() -> None:
    assert normalize_message({"message": ["a", "b"]}) == {"message": "ab"}
    assert normalize_message({}) == {}
    assert normalize_message({}, force=True) == {"message": ""}


def test_normalize_timestamp_renders_datetimes_and_dates() -> None:
    at = datetime(2016, 10, 17, 12, 37, tzinfo=timezone.utc)

    assert normalize_timestamp({"@timestamp": at}) == {"@timestamp": "2016-10-17T12:37:00.000000Z"}
    assert normalize_timestamp({"@timestamp": date(2016, 10, 17)}) == {"@timestamp": "2016-10-17T00:00:00.000000Z"}
    assert normalize_timestamp({"@timestamp": "kept"}) == {"@timestamp": "kept"}
    assert normalize_timestamp({}) == {}
    assert normalize_timestamp({}, force=True)["@timestamp"].endswith("Z")


def test_json_encoder_writes_compact_single_line_json() -> None:
    encoded = JSONEncoder().encode(_event(user="ada", count=3))

    assert "\n" not in encoded
    assert json.loads(encoded) == {
        "message": "first\nsecond\n",
        "tags": ["web"],
        "@timestamp": TIMESTAMP,
        "user": "ada",
        "count": 3,
    }


def test_json_encoder_keeps_unicode_and_normalises_values() -> None:
    at = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    encoded = JSONEncoder().encode({"message": ["grüße"], "when": at, "ids": {3, 1}})

    payload = json.loads(encoded)
    assert "grüße" in encoded
    assert payload["when"] == "2020-01-02T03:04:05.000000Z"
    assert sorted(payload["ids"]) == [1, 3]



def test_json_encoder_writes_non_finite_floats_as_strings() -> None:
    def reject(token: str) -> None:
        raise ValueError(f"non-JSON token {token}")

    encoded = JSONEncoder().encode({"message": [], "ratio": float("nan"), "big": float("inf"), "small": float("-inf")})

    payload = json.loads(encoded, parse_constant=reject)
    assert payload == {"message": "", "ratio": "NaN", "big": "Infinity", "small": "-Infinity"}


def test_logstash_encoder_adds_the_version() -> None:
    payload = json.loads(LogstashEncoder().encode(_event()))

    assert payload["@version"] == "1"


def test_logstash_encoder_keeps_an_existing_version() -> None:
    payload = json.loads(LogstashEncoder().encode(_event(**{"@version": "2"})))

    assert payload["@version"] == "2"


def test_hash_encoder_returns_plain_data() -> None:
    encoded = HashEncoder().encode(_event(nested={"a": [1, 2]}))

    assert encoded == {
        "message": "first\nsecond\n",
        "tags": ["web"],
        "@timestamp": TIMESTAMP,
        "nested": {"a": [1, 2]},
    }
    assert type(encoded) is dict
    assert type(encoded["nested"]) is dict


def test_raw_encoder_returns_the_event_itself() -> None:
    event = _event()

    assert RawEncoder().encode(event) is event


def test_message_encoder_returns_the_text() -> None:
    assert MessageEncoder().encode(_event()) == "first\nsecond\n"


def test_message_encoder_prefixes_every_line_with_tagged_fields() -> None:
    encoded = MessageEncoder(tagged=["tags", "@timestamp", "missing"]).encode(_event())

    assert encoded == f"[web] [{TIMESTAMP}] first\n[web] [{TIMESTAMP}] second\n"


def test_message_encoder_accepts_a_single_tagged_field() -> None:
    assert MessageEncoder(tagged="pid").encode({"message": ["x\n"], "pid": 7}) == "[7] x\n"


def test_message_encoder_returns_empty_text_for_empty_messages() -> None:
    assert MessageEncoder(tagged=["tags"]).encode({"message": [], "tags": ["web"]}) == ""


def test_lograge_encoder_flattens_fields() -> None:
    encoded = LogrageEncoder().encode(
        {
            "message": ["ignored"],
            "@timestamp": TIMESTAMP,
            "method": "GET",
            "ok": True,
            "duration": 12.3456,
            "params": {"id": 7, "tags": ["a", "b"]},
            "nothing": None,
        }
    )

    assert encoded == (
        f"timestamp={TIMESTAMP} method=GET ok=true duration=12.35 "
        "params.id=7 params.tags.0=a params.tags.1=b"
    )


@pytest.mark.parametrize(
    "fields, expected",
    [
        ({"error": "KeyError", "error_message": "id"}, "error='KeyError: id'"),
        ({"error": "KeyError"}, "error='KeyError'"),
        ({"error_message": "broken"}, "error='broken'"),
    ],
)
def test_lograge_encoder_combines_error_fields(fields: dict[str, Any], expected: str) -> None:
    event: dict[str, Any] = {"message": ["x"], "error_trace": "trace"}
    event.update(fields)

    assert LogrageEncoder().encode(event) == expected


def test_registry_builds_every_encoder() -> None:
    registry = encoder_registry()

    built = {name: type(registry.build(name)).__name__ for name in registry.names()}

    assert built == {
        "json": "JSONEncoder",
        "logstash": "LogstashEncoder",
        "lograge": "LogrageEncoder",
        "message": "MessageEncoder",
        "hash": "HashEncoder",
        "raw": "RawEncoder",
    }
