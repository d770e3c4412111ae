"""Tree copier — recursive, all-or-nothing directory copies."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from loguru import logger


@dataclass
class CopyResult:
    """Result of a tree copy."""

    source: Path
    destination: Path
    success: bool = True
    copied_files: list[Path] = field(default_factory=list)
    created_dirs: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed_path: Path | None = None
    error: str = ""
    rolled_back: bool = False


def _is_within(path: Path, other: Path) -> bool:
    """True if *path* is *other* or lies below it (after resolving)."""
    try:
        path.resolve().relative_to(other.resolve())
    except ValueError:
        return False
    return True


def _walk(root: Path, exclude: Path | None) -> Iterator[Path]:
    """Yield every entry below *root*, depth first, in sorted order.

    Symlinked directories and *exclude* are yielded but never descended into.
    """
    for entry in sorted(root.iterdir()):
        yield entry
        if entry.is_symlink() or not entry.is_dir():
            continue
        if exclude is None or not _is_within(entry, exclude):
            yield from _walk(entry, exclude)


def copy_tree(source: Path, destination: Path, *, rollback: bool = True) -> CopyResult:
    """
    Copy *source* onto *destination*, preserving relative structure.

    ``destination`` plays the role of ``source`` itself: it is created if
    needed, then every directory below ``source`` is created at the same
    relative path and every regular file is copied over any existing file.
    Symlinks and special files are skipped with a warning.

    The first entry that fails aborts the copy. With ``rollback`` the whole
    destination tree is then deleted, so a failed copy leaves nothing behind.
    """
    result = CopyResult(source=source, destination=destination)
    current = source

    if source.exists() and _is_within(source, destination) and _is_within(destination, source):
        result.success = False
        result.failed_path = source
        result.error = "Source and destination are the same folder"
        logger.error(f"Refusing to copy {source} onto itself")
        return result

    try:
        destination.mkdir(parents=True, exist_ok=True)
        result.created_dirs.append(destination)

        # Only a destination inside the source needs to be kept out of the walk.
        nested = destination if _is_within(destination, source) else None
        for entry in _walk(source, nested):
            current = entry
            target = destination / entry.relative_to(source)

            if entry.is_symlink():
                logger.warning(f"Skipping symlink: {entry}")
                result.skipped.append(entry)
            elif entry.is_dir():
                if nested is not None and _is_within(entry, nested):
                    logger.warning(f"Skipping destination nested in source: {entry}")
                    result.skipped.append(entry)
                    continue
                target.mkdir(parents=True, exist_ok=True)
                result.created_dirs.append(target)
            elif entry.is_file():
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(entry, target)
                result.copied_files.append(target)
            else:
                logger.warning(f"Skipping special file: {entry}")
                result.skipped.append(entry)
    except OSError as e:
        result.success = False
        result.failed_path = current
        result.error = str(e)
        logger.error(f"Error copying {current}: {e}")
        if rollback:
            result.rolled_back = _remove_tree(destination)
        return result

    logger.debug(
        f"Copied {len(result.copied_files)} file(s) from {source} to {destination}"
    )
    return result


def _remove_tree(path: Path) -> bool:
    """Delete an incomplete copy. Returns True when nothing is left."""
    if not path.exists():
        return True
    logger.info(f"Deleting incomplete copy: {path}")
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.error(f"Failed to delete incomplete copy {path}: {e}")
        return False
    return True
