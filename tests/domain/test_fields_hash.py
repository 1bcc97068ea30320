from __future__ import annotations

import copy
import threading
from typing import Any

import pytest

from lib_log_stash.domain.errors import ForbiddenFieldError
from lib_log_stash.domain.fields import FieldsArray, FieldsHash


def test_keys_are_utf8_and_values_normalized() -> None:
    fields = FieldsHash()
    fields[b"user"] = {"id": 1, "roles": ("admin",)}
    fields[42] = 1.5

    assert fields.keys() == ["user", "42"]
    assert isinstance(fields["user"], FieldsHash)
    assert isinstance(fields["user"]["roles"], FieldsArray)
    assert fields.as_json() == {"user": {"id": 1, "roles": ["admin"]}, "42": 1.5}


def test_reading_helpers() -> None:
    fields = FieldsHash({"a": 1})

    assert fields.get("a") == 1
    assert fields.get("missing", "x") == "x"
    assert "a" in fields and b"a" in fields
    assert list(fields) == ["a"]
    assert fields.items() == [("a", 1)]
    assert fields.values() == [1]
    with pytest.raises(KeyError):
        fields["missing"]


def test_forced_write_of_forbidden_key_raises() -> None:
    fields = FieldsHash(forbidden_keys={"message"})

    with pytest.raises(ForbiddenFieldError) as excinfo:
        fields["message"] = "nope"

    assert excinfo.value.keys == ("message",)
    assert fields.empty


def test_non_forced_write_of_forbidden_key_is_skipped() -> None:
    fields = FieldsHash(forbidden_keys={"message"})

    fields.set("message", "nope", force=False)
    fields.update({"message": "nope", "ok": True}, force=False)

    assert fields.as_json() == {"ok": True}


def test_update_with_forbidden_key_rejects_whole_batch() -> None:
    fields = FieldsHash(forbidden_keys={"tags"})

    with pytest.raises(ForbiddenFieldError):
        fields.update({"fine": 1, "tags": ["x"]})

    assert fields.empty


def test_forbidden_keys_do_not_apply_to_nested_hashes() -> None:
    fields = FieldsHash(forbidden_keys={"message"})
    fields["request"] = {"message": "nested is fine"}

    assert fields["request"]["message"] == "nested is fine"


def test_non_forced_set_keeps_existing_non_none_values() -> None:
    fields = FieldsHash({"a": 1, "b": None})

    fields.set("a", 2, force=False)
    fields.set("b", 3, force=False)

    assert fields.as_json() == {"a": 1, "b": 3}


def test_set_with_default_only_calls_factory_when_needed() -> None:
    calls: list[Any] = []
    fields = FieldsHash({"present": "kept"})

    def factory(current: Any) -> str:
        calls.append(current)
        return f"new:{current}"

    assert fields.set_with_default("present", factory) == "kept"
    assert calls == []
    assert fields.set_with_default("present", factory, force=True) == "new:kept"
    assert fields.set_with_default("absent", lambda: 7) == 7
    assert calls == ["kept"]


def test_set_with_default_never_calls_factory_for_forbidden_keys() -> None:
    fields = FieldsHash(forbidden_keys={"message"})

    assert fields.set_with_default("message", lambda: pytest.fail("called")) is None
    with pytest.raises(ForbiddenFieldError):
        fields.set_with_default("message", lambda: "x", force=True)


def test_delete_returns_value_or_default() -> None:
    fields = FieldsHash({"a": 1})

    assert fields.delete("a") == 1
    assert fields.delete("a", "gone") == "gone"
    fields["b"] = 2
    del fields["b"]
    assert fields.empty


def test_update_rejects_values_that_are_not_mappings() -> None:
    with pytest.raises(TypeError):
        FieldsHash().update(["not", "a", "mapping"])


def test_update_accepts_deferred_mappings_with_scope() -> None:
    fields = FieldsHash()

    fields.update(lambda scope: {"scope": scope}, scope="request")

    assert fields.as_json() == {"scope": "request"}


def test_resolver_decides_conflicts() -> None:
    fields = FieldsHash({"count": 1, "name": "a"})

    fields.update({"count": 2, "new": True}, resolver=lambda key, old, new: old + new)

    assert fields.as_json() == {"count": 3, "name": "a", "new": True}


def test_merge_returns_new_hash() -> None:
    fields = FieldsHash({"a": 1})

    merged = fields.merge({"a": 2, "b": 3})

    assert merged.as_json() == {"a": 2, "b": 3}
    assert fields.as_json() == {"a": 1}


def test_reverse_merge_only_fills_gaps() -> None:
    fields = FieldsHash({"a": 1, "b": None})

    assert fields.reverse_merge({"a": 2, "b": 3, "c": 4}).as_json() == {"a": 1, "b": 3, "c": 4}
    fields.reverse_update({"a": 9})
    assert fields["a"] == 1


def test_deep_update_merges_nested_hashes_and_array_unions() -> None:
    fields = FieldsHash({"user": {"name": "ada", "roles": ["admin"]}, "list": [1]})

    fields.deep_update({"user": {"id": 7, "roles": ["ops", "admin"]}, "list": [1, 2]})

    assert fields.as_json() == {"user": {"name": "ada", "roles": ["admin", "ops"], "id": 7}, "list": [1, 2]}


def test_deep_merge_does_not_touch_nested_originals() -> None:
    fields = FieldsHash({"user": {"name": "ada"}})
    nested = fields["user"]

    merged = fields.deep_merge({"user": {"name": "grace"}})

    assert merged["user"]["name"] == "grace"
    assert nested["name"] == "ada"


def test_deep_merge_without_force_keeps_existing_leaves() -> None:
    fields = FieldsHash({"user": {"name": "ada"}})

    merged = fields.deep_merge({"user": {"name": "grace", "id": 1}}, force=False)

    assert merged.as_json() == {"user": {"name": "ada", "id": 1}}


def test_copies_are_deep_and_equal() -> None:
    fields = FieldsHash({"nested": {"list": [1]}}, forbidden_keys={"message"})

    for duplicate in (fields.copy(), copy.copy(fields), copy.deepcopy(fields)):
        duplicate["nested"]["list"].append(2)
        assert duplicate.forbidden_keys == frozenset({"message"})

    assert fields.as_json() == {"nested": {"list": [1]}}
    assert fields == FieldsHash({"nested": {"list": [1]}})
    assert fields == {"nested": {"list": [1]}}
    assert fields != FieldsArray([])


def test_repr_shows_plain_contents() -> None:
    assert repr(FieldsHash({"a": 1})) == "FieldsHash({'a': 1})"


def test_concurrent_updates_are_not_lost() -> None:
    fields = FieldsHash()

    def writer(offset: int) -> None:
        for index in range(200):
            fields[f"{offset}-{index}"] = index

    threads = [threading.Thread(target=writer, args=(offset,)) for offset in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(fields) == 800
