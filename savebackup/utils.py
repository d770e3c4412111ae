"""Game-name and size helpers shared by the menu and the folder store."""

from __future__ import annotations

from pathlib import Path

# Characters Windows refuses in folder names, plus "=", which separates
# name from path in the save folder list.
FORBIDDEN_NAME_CHARS = '<>:"/\\|?*='

# A line of the save folder list starting with one of these is a comment.
COMMENT_PREFIXES = ("#", ";")

_SIZE_UNITS = ("KB", "MB", "GB", "TB")


def format_size(size_bytes: int) -> str:
    """Byte count as shown next to each snapshot, e.g. ``"1.5 MB"``."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    for unit in _SIZE_UNITS:
        size /= 1024
        if size < 1024 or unit == _SIZE_UNITS[-1]:
            break
    return f"{size:.1f} {unit}"


def directory_size(path: Path) -> int:
    """Total size of regular files below *path*; unreadable entries count as 0."""
    total = 0
    for child in path.rglob("*"):
        try:
            if child.is_file() and not child.is_symlink():
                total += child.stat().st_size
        except OSError:
            continue
    return total


def sanitize_game_name(name: str) -> str:
    """
    Turn typed text into a name usable both as a backup folder name and as
    a key in the save folder list.

    Forbidden characters become ``_``, runs of whitespace collapse to one
    space, and leading comment markers, dots and spaces are dropped. The
    result may be empty; the store rejects empty names.
    """
    cleaned = "".join("_" if ch in FORBIDDEN_NAME_CHARS else ch for ch in name)
    cleaned = " ".join(cleaned.split())
    return cleaned.lstrip("#; .").rstrip(". ")
