"""Restore manager — copy a snapshot back over a live save folder."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from loguru import logger

from savebackup.core.tree_copy import copy_tree
from savebackup.models.snapshot import Snapshot

SAFETY_DIR_NAME = "CurrentSaveBackup"


class RestoreStatus(StrEnum):
    RESTORED = "restored"
    FAILED = "failed"


@dataclass
class RestoreResult:
    """Outcome of restoring one snapshot."""

    game_name: str
    live_path: Path
    snapshot: Snapshot
    status: RestoreStatus = RestoreStatus.RESTORED
    safety_path: Path | None = None
    safety_refreshed: bool = False
    failed_path: Path | None = None
    error: str = ""

    @property
    def success(self) -> bool:
        return self.status == RestoreStatus.RESTORED


def safety_dir_for(live_path: Path) -> Path:
    """Folder shared by the pre-restore copies of saves next to *live_path*."""
    return Path(live_path).parent / SAFETY_DIR_NAME


def safety_copy_for(live_path: Path) -> Path:
    """This save's own pre-restore copy, inside safety_dir_for()."""
    live_path = Path(live_path)
    return safety_dir_for(live_path) / live_path.name


def has_safety_copy(live_path: Path) -> bool:
    return safety_copy_for(live_path).exists()


class RestoreManager:
    """
    Restores snapshots produced by BackupManager.

    Before overwriting, the live save is copied to
    ``<live parent>/CurrentSaveBackup/<save folder>``. That copy is created
    the first time and afterwards refreshed only when the caller confirms.
    """

    def restore_one(
        self,
        game_name: str,
        live_path: Path,
        snapshot: Snapshot,
        overwrite_safety: bool = False,
    ) -> RestoreResult:
        live_path = Path(live_path)
        result = RestoreResult(game_name=game_name, live_path=live_path, snapshot=snapshot)

        if not self._take_safety_copy(live_path, overwrite_safety, result):
            return result

        saved_folder = snapshot.path / live_path.name
        if not saved_folder.is_dir():
            result.status = RestoreStatus.FAILED
            result.failed_path = saved_folder
            result.error = f"Snapshot has no folder named {live_path.name!r}"
            logger.error(f"Cannot restore {snapshot.path}: {result.error}")
            return result

        # The snapshot's top level mirrors the save folder itself, so copying
        # it onto the parent recreates the save folder in place.
        copy = copy_tree(snapshot.path, live_path.parent, rollback=False)
        if not copy.success:
            result.status = RestoreStatus.FAILED
            result.failed_path = copy.failed_path
            result.error = copy.error
            if result.safety_path is not None:
                logger.error(
                    f'Restore of "{game_name}" failed; previous save kept at {result.safety_path}'
                )
            return result

        logger.info(f'Restored "{game_name}" from {snapshot.path.name}')
        return result

    def _take_safety_copy(
        self, live_path: Path, overwrite: bool, result: RestoreResult
    ) -> bool:
        """Copy the live save aside. Returns False if the restore must stop."""
        safety_copy = safety_copy_for(live_path)

        if safety_copy.exists():
            result.safety_path = safety_copy
            if not overwrite:
                logger.info(f"Keeping existing safety copy at {safety_copy}")
                return True
        if not live_path.exists():
            logger.warning(f"No live save at {live_path}, skipping safety copy")
            return True

        if safety_copy.exists():
            try:
                shutil.rmtree(safety_copy)
            except OSError as e:
                return self._fail_safety(result, safety_copy, str(e))
            result.safety_path = None

        copy = copy_tree(live_path, safety_copy, rollback=True)
        if not copy.success:
            return self._fail_safety(result, copy.failed_path, copy.error)

        result.safety_path = safety_copy
        result.safety_refreshed = True
        logger.info(f"Saved current save to {safety_copy}")
        return True

    @staticmethod
    def _fail_safety(result: RestoreResult, path: Path | None, error: str) -> bool:
        result.status = RestoreStatus.FAILED
        result.failed_path = path
        result.error = f"Safety copy failed: {error}"
        logger.error(f"Aborting restore of {result.live_path}: {result.error}")
        return False
