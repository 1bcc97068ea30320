from __future__ import annotations

import logging

import pytest

from lib_log_stash.domain.levels import Severity


@pytest.mark.parametrize(
    "name, expected",
    [
        ("debug", Severity.DEBUG),
        ("INFO", Severity.INFO),
        ("Warn", Severity.WARN),
        ("warning", Severity.WARN),
        (" error ", Severity.ERROR),
        ("fatal", Severity.FATAL),
        ("CRITICAL", Severity.FATAL),
        ("unknown", Severity.UNKNOWN),
        ("any", Severity.UNKNOWN),
    ],
)
def test_from_name_accepts_case_insensitive_names_and_aliases(name: str, expected: Severity) -> None:
    assert Severity.from_name(name) is expected


def test_from_name_rejects_unknown_severity() -> None:
    with pytest.raises(ValueError, match="Unknown severity"):
        Severity.from_name("verbose")


def test_severities_are_ordered() -> None:
    assert Severity.DEBUG < Severity.INFO < Severity.WARN < Severity.ERROR < Severity.FATAL < Severity.UNKNOWN
    assert [int(severity) for severity in Severity] == [0, 1, 2, 3, 4, 5]


@pytest.mark.parametrize(
    "severity, label",
    [
        (Severity.DEBUG, "DEBUG"),
        (Severity.INFO, "INFO"),
        (Severity.WARN, "WARN"),
        (Severity.ERROR, "ERROR"),
        (Severity.FATAL, "FATAL"),
        (Severity.UNKNOWN, "ANY"),
    ],
)
def test_labels_match_text_encoder_output(severity: Severity, label: str) -> None:
    assert severity.label == label


@pytest.mark.parametrize(
    "severity, python_level",
    [
        (Severity.DEBUG, logging.DEBUG),
        (Severity.INFO, logging.INFO),
        (Severity.WARN, logging.WARNING),
        (Severity.ERROR, logging.ERROR),
        (Severity.FATAL, logging.CRITICAL),
        (Severity.UNKNOWN, logging.CRITICAL),
    ],
)
def test_to_python_level_maps_onto_stdlib(severity: Severity, python_level: int) -> None:
    assert severity.to_python_level() == python_level


@pytest.mark.parametrize(
    "python_level, expected",
    [
        (logging.NOTSET, Severity.DEBUG),
        (5, Severity.DEBUG),
        (logging.DEBUG, Severity.DEBUG),
        (logging.INFO, Severity.INFO),
        (25, Severity.INFO),
        (logging.WARNING, Severity.WARN),
        (logging.ERROR, Severity.ERROR),
        (logging.CRITICAL, Severity.FATAL),
        (99, Severity.FATAL),
    ],
)
def test_from_python_level_picks_the_closest_lower_severity(python_level: int, expected: Severity) -> None:
    assert Severity.from_python_level(python_level) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (Severity.ERROR, Severity.ERROR),
        ("info", Severity.INFO),
        (3, Severity.ERROR),
        (-1, Severity.DEBUG),
        (42, Severity.UNKNOWN),
    ],
)
def test_coerce_clamps_integers_and_parses_names(value: object, expected: Severity) -> None:
    assert Severity.coerce(value) is expected  # type: ignore[arg-type]
