"""Snapshot set — list, order and evict timestamped backups of one game."""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path

from loguru import logger

from savebackup.core.timestamp import SNAPSHOT_MARKER, format_timestamp, try_parse_timestamp
from savebackup.models.snapshot import EvictionPlan, Snapshot


def list_snapshots(backup_root: Path, game_name: str = "") -> list[Snapshot]:
    """
    List snapshot directories directly under *backup_root*, oldest first.

    Every subdirectory whose name contains ``"Backup"`` counts, including
    ones whose timestamp does not parse; those get ``created_at=None`` and
    sort before all parsed snapshots so they are evicted first.
    """
    if not backup_root.is_dir():
        return []

    snapshots: list[Snapshot] = []
    for entry in backup_root.iterdir():
        if not entry.is_dir() or SNAPSHOT_MARKER not in entry.name:
            continue
        created_at = try_parse_timestamp(entry.name)
        if created_at is None:
            logger.warning(f"Unrecognised snapshot timestamp, treating as oldest: {entry}")
            label = ""
        else:
            label = format_timestamp(created_at)
        snapshots.append(
            Snapshot(
                game_name=game_name or backup_root.name,
                label=label,
                path=entry,
                created_at=created_at,
            )
        )

    return sort_ascending(snapshots)


def sort_ascending(snapshots: list[Snapshot]) -> list[Snapshot]:
    """Chronological order; unparsed first, ties broken by directory name."""
    return sorted(
        snapshots,
        key=lambda s: (s.is_parsed, s.created_at or datetime.min, s.name),
    )


def plan_eviction(snapshots: list[Snapshot], retention_limit: int) -> EvictionPlan:
    """
    Decide which snapshots to delete before one more is created.

    Leaves ``retention_limit - 1`` snapshots (or fewer, if there are fewer)
    so the set holds at most *retention_limit* once the new one exists.
    """
    ordered = sort_ascending(snapshots)
    keep_count = max(retention_limit - 1, 0)
    excess = max(len(ordered) - keep_count, 0)
    return EvictionPlan(to_delete=ordered[:excess], to_keep=ordered[excess:])


def delete_snapshots(snapshots: list[Snapshot]) -> list[Snapshot]:
    """Recursively delete snapshots; return the ones actually removed."""
    deleted: list[Snapshot] = []
    for snapshot in snapshots:
        try:
            shutil.rmtree(snapshot.path)
            deleted.append(snapshot)
            logger.debug(f"Evicted old snapshot: {snapshot.path}")
        except OSError as e:
            logger.warning(f"Failed to evict snapshot {snapshot.path}: {e}")
    return deleted
