"""Snapshot models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path


@dataclass
class Snapshot:
    """One timestamped backup directory of a tracked game."""

    game_name: str
    label: str  # "YYYY-MM-DD HHhMMmSSs", empty when the name did not parse
    path: Path
    created_at: datetime | None = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_parsed(self) -> bool:
        return self.created_at is not None


@dataclass
class EvictionPlan:
    """Split of existing snapshots into those to delete and those to keep."""

    to_delete: list[Snapshot] = field(default_factory=list)
    to_keep: list[Snapshot] = field(default_factory=list)
