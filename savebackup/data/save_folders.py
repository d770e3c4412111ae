"""Tracked save folders — ``name = path`` mapping file."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from savebackup.errors import (
    DuplicateNameError,
    DuplicatePathError,
    InvalidNameError,
    UnknownGameError,
)
from savebackup.models.tracked_game import TrackedGame
from savebackup.utils import COMMENT_PREFIXES


def _normalize_path(path: str | Path) -> str:
    """Comparable form of a save path (absolute, case-folded where the OS is)."""
    return os.path.normcase(os.path.abspath(os.path.expanduser(str(path))))


class SaveFolderStore:
    """
    In-memory mapping of game name → live save folder, backed by a text file.

    One entry per line, ``name = path``; whitespace around the first ``=``
    is trimmed. Mutations stay in memory until ``save()``.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._folders: dict[str, str] = {}

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> int:
        """Load mappings from disk, replacing the in-memory ones. Returns the count."""
        self._folders.clear()
        if not self._path.exists():
            logger.info(f"No save folder list at {self._path}, starting empty")
            return 0
        try:
            with open(self._path, encoding="utf-8") as f:
                lines = f.readlines()
        except OSError as e:
            logger.error(f"Failed to load save folder list: {e}")
            return 0

        for lineno, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith(COMMENT_PREFIXES):
                continue
            name, sep, value = line.partition("=")
            name, value = name.strip(), value.strip()
            if not sep or not name or not value:
                logger.warning(f"Skipping malformed line {lineno} in {self._path.name}: {raw.rstrip()}")
                continue
            self._folders[name] = value

        logger.info(f"Loaded {len(self._folders)} save folder(s) from {self._path}")
        return len(self._folders)

    def save(self) -> None:
        """Write mappings to disk atomically."""
        tmp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                for name in sorted(self._folders):
                    f.write(f"{name} = {self._folders[name]}\n")
            tmp_path.replace(self._path)
            logger.debug(f"Saved {len(self._folders)} save folder(s) to {self._path}")
        except OSError as e:
            logger.error(f"Failed to save save folder list: {e}")
            tmp_path.unlink(missing_ok=True)

    # ── Queries ──

    def get(self, name: str) -> TrackedGame | None:
        path = self._folders.get(name)
        return TrackedGame(name=name, live_path=Path(path)) if path is not None else None

    def find_by_path(self, path: str | Path) -> TrackedGame | None:
        wanted = _normalize_path(path)
        for name, value in self._folders.items():
            if _normalize_path(value) == wanted:
                return TrackedGame(name=name, live_path=Path(value))
        return None

    def games(self) -> list[TrackedGame]:
        """All tracked games, sorted by name."""
        return [
            TrackedGame(name=name, live_path=Path(self._folders[name]))
            for name in sorted(self._folders)
        ]

    def snapshot(self) -> dict[str, str]:
        """Copy of the current mapping."""
        return dict(self._folders)

    def __len__(self) -> int:
        return len(self._folders)

    def __contains__(self, name: object) -> bool:
        return name in self._folders

    # ── Mutations ──

    def add(self, name: str, path: str | Path) -> TrackedGame:
        """
        Track a new save folder.

        Raises InvalidNameError, DuplicatePathError or DuplicateNameError;
        the mapping is left untouched when any of them is raised.
        """
        name = name.strip()
        if not name:
            raise InvalidNameError("Game name must not be empty")
        if "=" in name:
            raise InvalidNameError(f'Game name must not contain "=": {name}')
        if name.startswith(COMMENT_PREFIXES):
            raise InvalidNameError(f"Game name must not start with '#' or ';': {name}")

        existing = self.find_by_path(path)
        if existing is not None:
            raise DuplicatePathError(str(path), existing.name)
        if name in self._folders:
            raise DuplicateNameError(name)

        self._folders[name] = str(path)
        logger.info(f'Tracking "{name}" -> {path}')
        return TrackedGame(name=name, live_path=Path(path))

    def remove(self, name: str) -> TrackedGame:
        path = self._folders.pop(name, None)
        if path is None:
            raise UnknownGameError(name)
        logger.info(f'Stopped tracking "{name}" ({path})')
        return TrackedGame(name=name, live_path=Path(path))
