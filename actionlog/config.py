"""Configuration management — JSON-based, stored in ~/.config/actionlog/."""
import json
from pathlib import Path

DEFAULT_CONFIG = {
    "debounce_ms": 350,
    "storage_key": "undoRedoState",
    "storage_dir": "",  # empty = DATA_DIR
    "hotkey_undo": "ctrl+z",
    "hotkey_redo": "ctrl+y",
    "debug_logging": False,
}

CONFIG_DIR = Path.home() / ".config" / "actionlog"
CONFIG_FILE = CONFIG_DIR / "config.json"
DATA_DIR = Path.home() / ".local" / "share" / "actionlog"


class Config:
    def __init__(self, path: Path = None):
        self._path = Path(path) if path is not None else CONFIG_FILE
        self._data = dict(DEFAULT_CONFIG)
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    def load(self):
        if self._path.exists():
            try:
                with open(self._path, "r") as f:
                    stored = json.load(f)
                if isinstance(stored, dict):
                    self._data.update(stored)
            except (json.JSONDecodeError, IOError):
                pass

    def save(self):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = value
        self.save()

    @property
    def debounce_ms(self) -> int:
        return int(self._data.get("debounce_ms", 350))

    @debounce_ms.setter
    def debounce_ms(self, val):
        self._data["debounce_ms"] = int(val)
        self.save()

    @property
    def storage_key(self) -> str:
        return self._data.get("storage_key") or DEFAULT_CONFIG["storage_key"]

    @property
    def storage_dir(self) -> Path:
        configured = self._data.get("storage_dir")
        return Path(configured).expanduser() if configured else DATA_DIR

    @property
    def hotkey_undo(self) -> str:
        return self._data["hotkey_undo"]

    @property
    def hotkey_redo(self) -> str:
        return self._data["hotkey_redo"]

    @property
    def debug_logging(self):
        return self._data["debug_logging"]
