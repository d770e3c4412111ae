"""Tracked save-folder model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TrackedGame:
    """A user-registered save folder, keyed by a unique game name."""

    name: str  # Also the folder name under the backup root
    live_path: Path

    @property
    def exists(self) -> bool:
        return self.live_path.exists()
