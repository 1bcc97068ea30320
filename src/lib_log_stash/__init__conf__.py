"""Static package metadata surfaced by the CLI ``info`` command.

Keep these values in sync with ``pyproject.toml``.
"""

from __future__ import annotations

from typing import Callable

name = "lib_log_stash"
title = "Structured, buffered logging with flows, filters and encoders"
version = "0.1.0"
author = "lib_log_stash developers"
shell_command = "lib_log_stash"


def _print(text: str) -> None:
    print(text, end="")


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Emit the metadata banner through ``writer`` (stdout by default).

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_stash:\\n'
    """

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("shell_command", shell_command),
    ]
    if writer is None:
        writer = _print
    pad = max(len(label) for label, _ in fields)
    writer(f"Info for {name}:\n")
    writer("\n")
    for label, value in fields:
        writer(f"    {label.ljust(pad)} = {value}\n")


__all__ = ["author", "name", "print_info", "shell_command", "title", "version"]
