"""Backup manager — timestamped directory snapshots with per-game retention."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable

from loguru import logger

from savebackup.core.snapshots import delete_snapshots, list_snapshots, plan_eviction
from savebackup.core.timestamp import format_timestamp, snapshot_dir_name
from savebackup.core.tree_copy import copy_tree
from savebackup.models.snapshot import Snapshot

if TYPE_CHECKING:
    from savebackup.config import Config
    from savebackup.models.tracked_game import TrackedGame


class BackupStatus(StrEnum):
    BACKED_UP = "backed_up"
    SOURCE_MISSING = "source_missing"
    FAILED = "failed"


@dataclass
class BackupResult:
    """Outcome of backing up one tracked game."""

    game_name: str
    live_path: Path
    status: BackupStatus
    snapshot: Snapshot | None = None
    evicted: list[Snapshot] = field(default_factory=list)
    failed_path: Path | None = None
    error: str = ""

    @property
    def success(self) -> bool:
        return self.status == BackupStatus.BACKED_UP


class BackupManager:
    """Creates snapshots under ``<backup_root>/<game name>/Backup - <timestamp>``."""

    def __init__(self, config: Config, clock: Callable[[], datetime] = datetime.now) -> None:
        self._config = config
        self._clock = clock

    @property
    def backup_root(self) -> Path:
        return self._config.backup_root

    def game_backup_dir(self, game_name: str) -> Path:
        return self.backup_root / game_name

    def list_snapshots(self, game_name: str) -> list[Snapshot]:
        """Snapshots of one game, newest first."""
        snapshots = list_snapshots(self.game_backup_dir(game_name), game_name)
        snapshots.reverse()
        return snapshots

    def backup_one(self, game_name: str, live_path: Path) -> BackupResult:
        """
        Snapshot one live save folder.

        Never raises for filesystem problems: a missing live folder yields
        SOURCE_MISSING with nothing created, and any copy error removes the
        new snapshot directory and yields FAILED.
        """
        live_path = Path(live_path)
        if not live_path.exists():
            logger.warning(f'Save folder for "{game_name}" does not exist: {live_path}')
            return BackupResult(game_name, live_path, BackupStatus.SOURCE_MISSING)

        game_dir = self.game_backup_dir(game_name)
        try:
            game_dir.mkdir(parents=True, exist_ok=True)
            plan = plan_eviction(list_snapshots(game_dir, game_name), self._config.max_backups)
        except OSError as e:
            logger.error(f'Cannot prepare backup folder for "{game_name}": {e}')
            return BackupResult(
                game_name, live_path, BackupStatus.FAILED, failed_path=game_dir, error=str(e)
            )
        evicted = delete_snapshots(plan.to_delete)

        created_at = self._clock().replace(microsecond=0)
        snapshot_dir = game_dir / snapshot_dir_name(created_at)
        if snapshot_dir.exists():
            logger.warning(f"Snapshot {snapshot_dir.name} already exists, overwriting")

        copy = copy_tree(live_path, snapshot_dir / live_path.name, rollback=True)
        if not copy.success:
            self._discard(snapshot_dir)
            return BackupResult(
                game_name,
                live_path,
                BackupStatus.FAILED,
                evicted=evicted,
                failed_path=copy.failed_path,
                error=copy.error,
            )

        snapshot = Snapshot(
            game_name=game_name,
            label=format_timestamp(created_at),
            path=snapshot_dir,
            created_at=created_at,
        )
        logger.info(f'Backed up "{game_name}" to {snapshot_dir}')
        return BackupResult(
            game_name, live_path, BackupStatus.BACKED_UP, snapshot=snapshot, evicted=evicted
        )

    def backup_all(self, games: Iterable[TrackedGame]) -> list[BackupResult]:
        """Back up every game in turn; one game's failure does not stop the rest."""
        results = [self.backup_one(game.name, game.live_path) for game in games]
        done = sum(1 for r in results if r.success)
        logger.info(f"Backup run finished: {done}/{len(results)} game(s) backed up")
        return results

    @staticmethod
    def _discard(snapshot_dir: Path) -> None:
        """Remove a snapshot directory left by a failed copy."""
        if not snapshot_dir.exists():
            return
        try:
            shutil.rmtree(snapshot_dir)
            logger.info(f"Deleted incomplete backup: {snapshot_dir}")
        except OSError as e:
            logger.error(f"Failed to delete incomplete backup {snapshot_dir}: {e}")
