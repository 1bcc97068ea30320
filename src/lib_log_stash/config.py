"""Opt-in ``.env`` loading for the CLI and host applications.

Purpose
-------
Let operators keep ``LOG_STASH_*`` settings in a ``.env`` file next to the
project instead of exporting them in every shell.

Contents
--------
* :data:`DOTENV_ENV_VAR` – environment toggle enabling ``.env`` loading.
* :func:`should_use_dotenv` – resolve CLI flag versus environment toggle.
* :func:`enable_dotenv` – load the nearest ``.env`` without overriding
  variables that are already set.

System Role
-----------
Used by :mod:`lib_log_stash.cli` before :func:`lib_log_stash.init` reads the
environment; library code never loads ``.env`` files on its own.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import find_dotenv, load_dotenv

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LOG_STASH_USE_DOTENV"

_TRUE_VALUES = {"1", "true", "yes", "on"}

_LOADED: Path | None = None
_LOADED_LOCK = Lock()


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Return whether ``.env`` loading is requested.

    An explicit CLI choice wins; otherwise the environment toggle decides.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value='1')
    False
    >>> should_use_dotenv(env_value='yes')
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUE_VALUES


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` found walking up from ``search_from`` (default: cwd).

    Variables already present in the environment keep their values. Returns
    the resolved path of the loaded file, or ``None`` when none was found.
    Repeated calls reuse the first result.
    """

    global _LOADED
    with _LOADED_LOCK:
        if _LOADED is not None:
            return _LOADED
        if search_from is None:
            found = find_dotenv(usecwd=True)
        else:
            found = _find_from(search_from)
        if not found:
            LOGGER.debug("no .env file found")
            return None
        path = Path(found).resolve()
        load_dotenv(path, override=False)
        LOGGER.debug("loaded environment from %s", path)
        _LOADED = path
        return path


def _find_from(start: Path) -> str:
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return os.fspath(candidate)
    return ""


def _reset_dotenv_state_for_testing() -> None:
    """Forget which ``.env`` file was loaded."""

    global _LOADED
    with _LOADED_LOCK:
        _LOADED = None


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
