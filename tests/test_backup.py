"""Tests for the BackupManager."""

from __future__ import annotations

import shutil
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from conftest import read_tree
from savebackup.core import tree_copy
from savebackup.core.backup import BackupManager, BackupStatus
from savebackup.core.timestamp import snapshot_dir_name
from savebackup.models.tracked_game import TrackedGame

NOW = datetime(2024, 6, 1, 18, 30, 15)


@pytest.fixture
def tmp_config(tmp_path: Path):
    """Create a mock Config pointing to a temp directory."""
    config = MagicMock()
    config.backup_root = tmp_path / "Backups"
    config.data_dir = tmp_path
    config.max_backups = 5
    return config


@pytest.fixture
def manager(tmp_config) -> BackupManager:
    return BackupManager(tmp_config, clock=lambda: NOW)


def _seed_snapshots(game_dir: Path, count: int) -> list[Path]:
    """Create *count* older snapshots, one day apart, oldest first."""
    paths = []
    for i in range(count):
        path = game_dir / snapshot_dir_name(NOW - timedelta(days=count - i))
        (path / "SaveData").mkdir(parents=True)
        paths.append(path)
    return paths


class TestBackupOne:
    def test_creates_timestamped_snapshot(
        self, manager: BackupManager, tmp_config, live_save: Path
    ) -> None:
        result = manager.backup_one("My Game", live_save)
        assert result.status == BackupStatus.BACKED_UP
        expected = tmp_config.backup_root / "My Game" / "Backup - 2024-06-01 18h30m15s"
        assert result.snapshot.path == expected
        assert result.snapshot.created_at == NOW

    def test_preserves_save_folder_name(
        self, manager: BackupManager, live_save: Path
    ) -> None:
        result = manager.backup_one("My Game", live_save)
        copied = result.snapshot.path / "SaveData"
        assert read_tree(copied) == read_tree(live_save)

    def test_source_missing_creates_nothing(
        self, manager: BackupManager, tmp_config, tmp_path: Path
    ) -> None:
        result = manager.backup_one("Ghost", tmp_path / "no-such-save")
        assert result.status == BackupStatus.SOURCE_MISSING
        assert not (tmp_config.backup_root / "Ghost").exists()

    def test_four_existing_evicts_none(
        self, manager: BackupManager, tmp_config, live_save: Path
    ) -> None:
        game_dir = tmp_config.backup_root / "X"
        seeded = _seed_snapshots(game_dir, 4)
        result = manager.backup_one("X", live_save)
        assert result.evicted == []
        remaining = sorted(p for p in game_dir.iterdir())
        assert len(remaining) == 5
        assert all(p.exists() for p in seeded)

    def test_five_existing_evicts_oldest(
        self, manager: BackupManager, tmp_config, live_save: Path
    ) -> None:
        game_dir = tmp_config.backup_root / "X"
        seeded = _seed_snapshots(game_dir, 5)
        result = manager.backup_one("X", live_save)
        assert [s.path for s in result.evicted] == [seeded[0]]
        assert not seeded[0].exists()
        assert len(list(game_dir.iterdir())) == 5

    def test_over_limit_trims_to_limit(
        self, manager: BackupManager, tmp_config, live_save: Path
    ) -> None:
        tmp_config.max_backups = 3
        game_dir = tmp_config.backup_root / "X"
        seeded = _seed_snapshots(game_dir, 6)
        result = manager.backup_one("X", live_save)
        assert len(result.evicted) == 4
        assert sorted(game_dir.iterdir()) == sorted([*seeded[4:], result.snapshot.path])

    def test_unparseable_snapshot_evicted_first(
        self, manager: BackupManager, tmp_config, live_save: Path
    ) -> None:
        game_dir = tmp_config.backup_root / "X"
        seeded = _seed_snapshots(game_dir, 4)
        broken = game_dir / "Backup - copy"
        broken.mkdir()
        result = manager.backup_one("X", live_save)
        assert [s.path for s in result.evicted] == [broken]
        assert all(p.exists() for p in seeded)

    def test_copy_failure_rolls_back(
        self,
        manager: BackupManager,
        tmp_config,
        live_save: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        real_copy2 = shutil.copy2

        def flaky_copy2(src, dst, *args, **kwargs):
            if Path(src).name == "slot2.sav":
                raise OSError("disk full")
            return real_copy2(src, dst, *args, **kwargs)

        monkeypatch.setattr(tree_copy.shutil, "copy2", flaky_copy2)
        result = manager.backup_one("X", live_save)
        assert result.status == BackupStatus.FAILED
        assert result.failed_path == live_save / "slot2.sav"
        assert "disk full" in result.error
        assert list((tmp_config.backup_root / "X").iterdir()) == []


class TestBackupAll:
    def test_failures_isolated_per_game(
        self, manager: BackupManager, live_save: Path, tmp_path: Path
    ) -> None:
        games = [
            TrackedGame("A", live_save),
            TrackedGame("B", tmp_path / "missing"),
            TrackedGame("C", live_save),
        ]
        results = manager.backup_all(games)
        assert [r.status for r in results] == [
            BackupStatus.BACKED_UP,
            BackupStatus.SOURCE_MISSING,
            BackupStatus.BACKED_UP,
        ]


class TestListSnapshots:
    def test_newest_first(self, manager: BackupManager, tmp_config) -> None:
        seeded = _seed_snapshots(tmp_config.backup_root / "X", 3)
        listed = manager.list_snapshots("X")
        assert [s.path for s in listed] == list(reversed(seeded))

    def test_unknown_game_empty(self, manager: BackupManager) -> None:
        assert manager.list_snapshots("nobody") == []
