"""Client-scoped persistent key-value storage.

The sharing flag must survive restarts of the driver client but is never
shared across devices, so a small local store is enough.  Adapters are
synchronous; every call hits the backing medium directly.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from tmslocation.exceptions import StorageUnavailableError

_logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Structural interface for string key-value stores."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage.  Contents are lost with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Storage backed by a single JSON object on disk.

    A missing file reads as empty.  An unreadable or corrupt file, or a
    write that fails, raises :class:`StorageUnavailableError`.  Writes go
    through a temporary file in the same directory and are moved into
    place, so readers never observe a half-written document.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot read {self._path}: {exc}") from exc

        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StorageUnavailableError(f"Corrupt storage file {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageUnavailableError(f"Storage file {self._path} does not hold a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _dump(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, separators=(",", ":"), sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot write {self._path}: {exc}") from exc
        _logger.debug("Wrote %d key(s) to %s", len(data), self._path)

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load_for_write()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load_for_write()
        if key in data:
            del data[key]
            self._dump(data)

    def _load_for_write(self) -> dict[str, str]:
        # A corrupt file is replaced on the next write rather than blocking it.
        try:
            return self._load()
        except StorageUnavailableError:
            if self._path.is_file():
                _logger.warning("Discarding unreadable storage file %s", self._path)
                return {}
            raise
