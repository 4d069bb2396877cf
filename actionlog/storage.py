"""Key-value stores holding serialized snapshots (string keys, string values)."""
from pathlib import Path
from typing import Dict, Optional

from actionlog.errors import StorageError


class FileKeyValueStore:
    """One file per key under a data directory; last write wins."""

    def __init__(self, directory: Path):
        self._dir = Path(directory)

    @property
    def directory(self) -> Path:
        return self._dir

    def _file_for(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._file_for(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (IOError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set_item(self, key: str, value: str):
        path = self._file_for(key)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(value)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    def remove_item(self, key: str):
        try:
            self._file_for(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Cannot remove {key}: {e}") from e


class MemoryKeyValueStore:
    """In-process store. ``quota`` caps the total stored characters."""

    def __init__(self, quota: Optional[int] = None):
        self._items: Dict[str, str] = {}
        self.quota = quota
        self.writes = 0

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        if self.quota is not None:
            used = sum(len(v) for k, v in self._items.items() if k != key)
            if used + len(value) > self.quota:
                raise StorageError(f"Quota exceeded writing {key!r}")
        self._items[key] = value
        self.writes += 1

    def remove_item(self, key: str):
        self._items.pop(key, None)
