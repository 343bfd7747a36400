"""Durable key-value backends for :class:`quotesync.state.store.LocalStore`.

Backends store opaque strings.  Read and write failures are raised as
:class:`OSError`; interpreting them is the store's job.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    """Structural backend interface (``localStorage``-like)."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryBackend:
    """In-process backend with an optional byte quota.

    When *quota_bytes* is set, a write that would push the total size of
    stored values past it raises :class:`OSError` and leaves the previous
    value in place.
    """

    def __init__(self, initial: dict[str, str] | None = None, *, quota_bytes: int | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._quota_bytes = quota_bytes

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            others = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
            needed = others + len(value.encode("utf-8"))
            if needed > self._quota_bytes:
                raise OSError(f"quota exceeded: {needed} > {self._quota_bytes} bytes")
        self._data[key] = value


class JsonFileBackend:
    """Backend persisting all keys as one JSON object in a file.

    Writes go to a temporary file in the same directory which then
    replaces the target, so a crash never leaves a half-written file.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str] | None:
        """Return every stored key, or ``None`` when the file exists but is unusable."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError:
            _logger.warning("Ignoring undecodable storage file %s", self._path)
            return None
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            _logger.warning("Ignoring unreadable storage file %s", self._path)
            return None
        if not isinstance(data, dict):
            _logger.warning("Ignoring storage file %s: top level is not an object", self._path)
            return None
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _set_aside(self) -> Path:
        backup = self._path.with_name(f"{self._path.name}.corrupt")
        os.replace(self._path, backup)
        _logger.warning("Moved unreadable storage file %s to %s", self._path, backup)
        return backup

    def get(self, key: str) -> str | None:
        data = self._read_all()
        return None if data is None else data.get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        if data is None:
            self._set_aside()
            data = {}
        data[key] = value
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise
        _logger.debug("Wrote %d key(s) to %s", len(data), self._path)
