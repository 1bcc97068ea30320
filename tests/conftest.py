from __future__ import annotations

import os
from io import StringIO
from typing import Any, Iterator

import pytest
from rich.console import Console

from lib_log_stash import config as log_config
from lib_log_stash.runtime import _state
from lib_log_stash.runtime._settings import ENV_PREFIX


class RecordingSink:
    """Buffer sink remembering every buffer it was asked to write."""

    def __init__(self) -> None:
        self.buffers: list[Any] = []
        self.events: list[dict[str, Any]] = []

    def write(self, buffer: Any) -> Any:
        self.buffers.append(buffer)
        self.events.append(buffer.to_event())
        return buffer


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def record_console() -> Console:
    return Console(file=StringIO(), record=True, width=200, force_terminal=False, color_system=None)


@pytest.fixture
def events() -> list[Any]:
    return []


@pytest.fixture(autouse=True)
def _isolate_runtime(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Never leak an initialised runtime, ``LOG_STASH_*`` variables or dotenv state between tests."""

    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    log_config._reset_dotenv_state_for_testing()
    yield
    _state.clear_runtime()
    log_config._reset_dotenv_state_for_testing()
