"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


def make_tree(root: Path, files: dict[str, bytes]) -> Path:
    """Create *files* (relative path → content) below *root*."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    return root


def read_tree(root: Path) -> dict[str, bytes]:
    """Relative path → content for every file below *root*."""
    return {
        child.relative_to(root).as_posix(): child.read_bytes()
        for child in sorted(root.rglob("*"))
        if child.is_file()
    }


@pytest.fixture
def live_save(tmp_path: Path) -> Path:
    """A save folder with nested content."""
    return make_tree(
        tmp_path / "games" / "MyGame" / "SaveData",
        {
            "slot1.sav": b"slot one",
            "slot2.sav": b"slot two",
            "profiles/player.dat": b"\x00\x01\x02",
            "profiles/settings/options.ini": b"volume=7\n",
        },
    )
