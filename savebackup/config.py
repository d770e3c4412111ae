"""Application settings — JSON-based, with file locking and batch update support."""

from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

_instance: "Config | None" = None

DEFAULT_MAX_BACKUPS = 5


def get_config(data_dir: Path | None = None) -> Config:
    """Module-level factory — single global Config instance."""
    global _instance
    if _instance is None:
        _instance = Config(data_dir)
    return _instance


def reset_config() -> None:
    """Reset the global config instance (for testing)."""
    global _instance
    _instance = None


class Config:
    """JSON settings stored as ``config.json`` in the data directory.

    The data directory defaults to the working directory, so backups land
    in ``./Backups`` and tracked folders in ``./savefolders.ini``.
    """

    _DEFAULTS: dict[str, Any] = {
        "max_backups": DEFAULT_MAX_BACKUPS,
        "backup_path": "",
        "save_folders_file": "",
        "use_folder_dialog": True,
    }

    def __init__(self, data_dir: Path | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._dir = data_dir or Path.cwd()
        self._path = self._dir / "config.json"
        self._lock = threading.Lock()
        self._defer_save = False
        self._load()

    def _load(self) -> None:
        """Load settings from disk, merging with defaults."""
        self._data = dict(self._DEFAULTS)
        if not self._path.exists():
            return
        try:
            with open(self._path, encoding="utf-8") as f:
                user_data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load config, using defaults: {e}")
            return
        if isinstance(user_data, dict):
            self._data.update(user_data)
        else:
            logger.warning(f"Ignoring malformed config file: {self._path}")

    def _save(self) -> None:
        """Persist settings to disk with file locking."""
        if self._defer_save:
            return
        with self._lock:
            self._dir.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(".tmp")
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(self._data, f, ensure_ascii=False, indent=2)
                tmp_path.replace(self._path)
            except OSError as e:
                logger.error(f"Failed to save config: {e}")
                if tmp_path.exists():
                    tmp_path.unlink(missing_ok=True)

    @contextmanager
    def batch_update(self) -> Iterator[None]:
        """Context manager for batching multiple config changes into a single write."""
        self._defer_save = True
        try:
            yield
        finally:
            self._defer_save = False
            self._save()

    # ── Generic access ──

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def override(self, key: str, value: Any) -> None:
        """Change a value for this process only (command-line flags)."""
        self._data[key] = value

    # ── Typed properties ──

    @property
    def data_dir(self) -> Path:
        return self._dir

    @property
    def backup_root(self) -> Path:
        raw = self._data.get("backup_path", "")
        return Path(raw) if raw else self._dir / "Backups"

    @property
    def save_folders_file(self) -> Path:
        raw = self._data.get("save_folders_file", "")
        return Path(raw) if raw else self._dir / "savefolders.ini"

    @property
    def max_backups(self) -> int:
        """Retention limit per game; never below 1."""
        try:
            value = int(self._data.get("max_backups", DEFAULT_MAX_BACKUPS))
        except (TypeError, ValueError):
            logger.warning("Invalid max_backups in config, using default")
            value = DEFAULT_MAX_BACKUPS
        return max(value, 1)

    @property
    def use_folder_dialog(self) -> bool:
        return bool(self._data.get("use_folder_dialog", True))

    @property
    def log_dir(self) -> Path:
        return self._dir / "logs"
