"""Application context — service container for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from savebackup.config import Config
    from savebackup.core.backup import BackupManager
    from savebackup.core.restore import RestoreManager
    from savebackup.data.save_folders import SaveFolderStore
    from savebackup.picker import FolderPicker


@dataclass
class AppContext:
    """Central service container handed to the console menu."""

    config: Config
    save_folders: SaveFolderStore
    backup_manager: BackupManager
    restore_manager: RestoreManager
    picker: FolderPicker
