"""Behavioral tests for the package metadata helpers."""

from __future__ import annotations

import pytest

import lib_log_stash
from lib_log_stash import __init__conf__, summary_info


def test_summary_info_contains_metadata() -> None:
    """The banner names the package and lists every metadata field."""

    summary = summary_info()
    assert "Info for lib_log_stash" in summary
    for label in ("name", "title", "version", "author", "shell_command"):
        assert f"    {label}" in summary
    assert summary.endswith("\n")


def test_summary_info_is_idempotent() -> None:
    assert summary_info() == summary_info()


def test_print_info_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    __init__conf__.print_info()

    assert capsys.readouterr().out == summary_info()


def test_public_api_is_exported() -> None:
    for name in lib_log_stash.__all__:
        assert hasattr(lib_log_stash, name), name
