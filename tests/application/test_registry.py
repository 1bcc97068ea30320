from __future__ import annotations

import pytest

from lib_log_stash.adapters.encoders import JSONEncoder, encoder_registry
from lib_log_stash.application.registry import ClassRegistry
from lib_log_stash.filters import filter_registry


class Alpha:
    def __init__(self, value: int = 0) -> None:
        self.value = value


class Beta:
    pass


def test_register_under_several_names() -> None:
    registry: ClassRegistry[object] = ClassRegistry("widget")

    assert registry.register(Alpha, "alpha", "a") is Alpha
    assert registry["alpha"] is Alpha
    assert registry["a"] is Alpha
    assert sorted(registry.names()) == ["a", "alpha"]
    assert len(registry) == 2


def test_later_registration_replaces_earlier_one() -> None:
    registry: ClassRegistry[object] = ClassRegistry()
    registry["thing"] = Alpha
    registry["thing"] = Beta

    assert registry["thing"] is Beta


def test_fetch_returns_classes_unchanged() -> None:
    registry: ClassRegistry[object] = ClassRegistry()

    assert registry.fetch(Beta) is Beta


def test_unknown_name_raises_key_error_naming_the_object_type() -> None:
    registry: ClassRegistry[object] = ClassRegistry("filter")

    with pytest.raises(KeyError, match="No filter was registered for 'nope'"):
        registry.fetch("nope")
    assert registry.get("nope") is None
    assert registry.get("nope", Alpha) is Alpha


@pytest.mark.parametrize("spec", [42, None, Alpha()])
def test_fetch_rejects_non_name_specs(spec: object) -> None:
    registry: ClassRegistry[object] = ClassRegistry()

    with pytest.raises(TypeError):
        registry.fetch(spec)  # type: ignore[arg-type]


def test_only_classes_can_be_registered() -> None:
    registry: ClassRegistry[object] = ClassRegistry()

    with pytest.raises(TypeError, match="Can only register class objects"):
        registry["instance"] = Alpha()  # type: ignore[assignment]
    with pytest.raises(TypeError):
        registry[1] = Alpha  # type: ignore[index]


def test_build_instantiates_with_arguments() -> None:
    registry: ClassRegistry[object] = ClassRegistry()
    registry.register(Alpha, "alpha")

    built = registry.build("alpha", 5)

    assert isinstance(built, Alpha)
    assert built.value == 5


def test_iteration_contains_and_clear() -> None:
    registry: ClassRegistry[object] = ClassRegistry()
    registry.register(Alpha, "alpha")

    assert "alpha" in registry
    assert list(registry) == [("alpha", Alpha)]
    assert registry.to_dict() == {"alpha": Alpha}
    assert registry.clear() is registry
    assert "alpha" not in registry


def test_factories_hand_out_independent_registries() -> None:
    first = encoder_registry()
    second = encoder_registry()
    first.clear()

    assert second["json"] is JSONEncoder
    assert first is not second


def test_builtin_filter_names_are_registered() -> None:
    names = set(filter_registry().names())

    assert {
        "anonymize_ip_mask",
        "clear_color",
        "default_fields",
        "default_tags",
        "drop",
        "drop_if",
        "remove",
        "rename",
        "replace",
        "select",
        "truncate_message",
        "update",
    } <= names
