"""Durable key-value layer backing the counter and record collection."""

import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from ..core.errors import StorageError

_path_locks: dict[Path, threading.RLock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    """One lock per state file, shared by every store opened on it."""
    with _path_locks_guard:
        return _path_locks.setdefault(path, threading.RLock())


class KeyValueStore(ABC):
    """JSON-valued key-value store.

    ``transaction()`` holds the store's re-entrant lock, so a
    read-modify-write done inside it is not interleaved with another one.
    """

    def __init__(self):
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator["KeyValueStore"]:
        with self._lock:
            yield self

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._save(data)

    @abstractmethod
    def _load(self) -> dict[str, Any]: ...

    @abstractmethod
    def _save(self, data: dict[str, Any]) -> None: ...


class InMemoryKeyValueStore(KeyValueStore):
    """Non-durable store for tests."""

    def __init__(self):
        super().__init__()
        self._data: dict[str, Any] = {}

    def _load(self) -> dict[str, Any]:
        # Round-trip through JSON so callers see the same types as on disk
        return json.loads(json.dumps(self._data))

    def _save(self, data: dict[str, Any]) -> None:
        self._data = json.loads(json.dumps(data))


class JsonFileKeyValueStore(KeyValueStore):
    """Single JSON document on disk, replaced atomically on every write.

    Instances opened on the same file in one process share a lock.
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path).resolve()
        self._lock = _lock_for(self.path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read state file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"State file {self.path} is not a JSON object")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write state file {self.path}: {e}") from e
