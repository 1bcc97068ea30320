"""Adapter appending events to a log file.

Purpose
-------
Write one line per event to a file, cooperating with external log rotation
(``logrotate`` moving the file away) and optionally rotating by date itself.

Contents
--------
* :data:`ROTATIONS` – named rotation schedules.
* :class:`FileAdapter` – the adapter.

System Role
-----------
Chosen by the adapter registry for paths and ``file://`` URIs.
"""

from __future__ import annotations

import os
import re
import threading
from datetime import date
from pathlib import Path
from typing import Any, BinaryIO
from urllib.parse import parse_qs, unquote, urlparse

from .base import BaseAdapter

ROTATIONS = {
    "daily": "%Y-%m-%d",
    "weekly": "%G-w%V",
    "monthly": "%Y-%m",
}

_EXTENSION = re.compile(r"\.[^./\\]+\Z")
_FALSE_VALUES = {"", "0", "false", "no", "off"}


def rotated_name(base_path: str, suffix: str) -> str:
    """Insert ``.suffix`` before the file extension of ``base_path``.

    Examples
    --------
    >>> rotated_name('/var/log/app.log', '2016-10-17')
    '/var/log/app.2016-10-17.log'
    >>> rotated_name('/var/log/app', '2016-w42')
    '/var/log/app.2016-w42'
    """

    if not suffix:
        return base_path
    match = _EXTENSION.search(base_path)
    if match is None:
        return f"{base_path}.{suffix}"
    return f"{base_path[: match.start()]}.{suffix}{match.group()}"


class FileAdapter(BaseAdapter):
    """Append encoded events to the file at ``path``.

    Parameters
    ----------
    path:
        Log file path; missing parent directories are created.
    auto_reopen:
        Reopen the file before writing when the path no longer refers to the
        open file (for example after it was moved away by log rotation).
    rotate:
        ``"daily"``, ``"weekly"``, ``"monthly"``, any :meth:`date.strftime`
        pattern, or a callable returning the suffix. The suffix is inserted
        before the file extension (``app.log`` → ``app.2016-10-17.log``).
    lock:
        Hold an exclusive ``flock`` while writing (POSIX only).
    """

    def __init__(self, path: str | os.PathLike[str], *, auto_reopen: bool = True, rotate: Any = None, lock: bool = False) -> None:
        self.base_path = os.path.abspath(os.fspath(path))
        self.auto_reopen = bool(auto_reopen)
        self.rotate = rotate
        self.lock = bool(lock)
        self._mutex = threading.Lock()
        self._file: BinaryIO | None = None
        self.path = self.base_path
        self._open(self.rotated_path())

    @classmethod
    def from_uri(cls, uri: str) -> "FileAdapter":
        """Build an adapter from ``file:///path?auto_reopen=false&rotate=daily``."""

        parsed = urlparse(uri)
        if parsed.scheme != "file":
            raise ValueError(f"Invalid URI: {uri}")
        options: dict[str, Any] = {key: values[-1] for key, values in parse_qs(parsed.query, keep_blank_values=True).items()}
        kwargs: dict[str, Any] = {}
        if "auto_reopen" in options:
            kwargs["auto_reopen"] = options["auto_reopen"].strip().lower() not in _FALSE_VALUES
        if "lock" in options:
            kwargs["lock"] = options["lock"].strip().lower() not in _FALSE_VALUES
        if options.get("rotate"):
            kwargs["rotate"] = options["rotate"]
        path = unquote(parsed.path or parsed.netloc)
        return cls(path, **kwargs)

    @property
    def rotate(self) -> Any:
        return self._rotate

    @rotate.setter
    def rotate(self, rotate: Any) -> None:
        if rotate is None or callable(rotate):
            self._rotate = rotate
        elif isinstance(rotate, str):
            self._rotate = ROTATIONS.get(rotate, rotate)
        else:
            raise ValueError(f"Invalid rotate specification: {rotate!r}")

    def rotated_path(self) -> str:
        """Return the path events are written to right now."""

        if isinstance(self._rotate, str):
            suffix = date.today().strftime(self._rotate)
        elif self._rotate is not None:
            suffix = str(self._rotate())
        else:
            suffix = ""
        return rotated_name(self.base_path, suffix)

    def write_single(self, encoded: Any) -> None:
        line = self.normalize_line(encoded)
        if not line:
            return
        payload = line.encode("utf-8")
        with self._mutex:
            self._rotate_file()
            if self._file is None:
                raise ValueError(f"{self!r} has no open file")
            if self.lock:
                import fcntl

                fcntl.flock(self._file.fileno(), fcntl.LOCK_EX)
                try:
                    self._file.write(payload)
                finally:
                    fcntl.flock(self._file.fileno(), fcntl.LOCK_UN)
            else:
                self._file.write(payload)

    def close(self) -> None:
        with self._mutex:
            if self._file is not None and not self._file.closed:
                self._file.close()

    def reopen(self) -> None:
        with self._mutex:
            self._reopen(self.rotated_path())

    def _open(self, path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._file = open(path, "ab", buffering=0)
        self.path = path

    def _reopen(self, path: str) -> None:
        if self._file is not None and not self._file.closed:
            self._file.close()
        self._open(path)

    def _rotate_file(self) -> None:
        path = self.rotated_path()
        if path != self.path:
            self._reopen(path)
        elif self.auto_reopen and self._file is not None and not self._file.closed and not self._is_current(self._file):
            self._reopen(path)

    def _is_current(self, file: BinaryIO) -> bool:
        try:
            return os.path.samestat(os.fstat(file.fileno()), os.stat(self.path))
        except FileNotFoundError:
            return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"


__all__ = ["FileAdapter", "ROTATIONS", "rotated_name"]
