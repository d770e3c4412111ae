"""Application entry point — wires services and runs the console menu.

Usage:
    python main.py                     # interactive menu
    python main.py --backup-all        # back up every tracked folder and exit
    python main.py --list              # print tracked folders and exit
    python main.py --data-dir D:/SaveBackups --max-backups 10 --no-dialog
"""

from __future__ import annotations

import argparse
import atexit
import signal
import sys
from pathlib import Path
from typing import Callable

from loguru import logger

from savebackup.config import get_config
from savebackup.console import ConsoleMenu
from savebackup.context import AppContext
from savebackup.core.backup import BackupManager, BackupStatus
from savebackup.core.restore import RestoreManager
from savebackup.data.save_folders import SaveFolderStore
from savebackup.logger import setup_logger
from savebackup.picker import ConsoleFolderPicker, QtFolderPicker


def create_context(args: argparse.Namespace) -> AppContext:
    """Wire all services and return an AppContext."""
    config = get_config(args.data_dir)
    if args.max_backups is not None:
        config.override("max_backups", args.max_backups)

    # The menu prints its own messages; keep console logging to problems.
    if args.verbose:
        level = "DEBUG"
    elif args.backup_all or args.list:
        level = "INFO"
    else:
        level = "WARNING"
    setup_logger(config.log_dir, level=level)

    save_folders = SaveFolderStore(config.save_folders_file)
    save_folders.load()

    use_dialog = config.use_folder_dialog and not args.no_dialog
    picker = QtFolderPicker() if use_dialog else ConsoleFolderPicker()

    return AppContext(
        config=config,
        save_folders=save_folders,
        backup_manager=BackupManager(config),
        restore_manager=RestoreManager(),
        picker=picker,
    )


def install_shutdown_hook(callback: Callable[[], None]) -> None:
    """Run *callback* exactly once on normal exit, Ctrl+C or termination."""
    done = False

    def run_once() -> None:
        nonlocal done
        if done:
            return
        done = True
        callback()

    def on_signal(signum: int, _frame: object) -> None:
        logger.info(f"Received signal {signum}, shutting down")
        run_once()
        sys.exit(128 + signum)

    atexit.register(run_once)
    for name in ("SIGINT", "SIGTERM", "SIGBREAK", "SIGHUP"):
        signum = getattr(signal, name, None)
        if signum is not None:
            signal.signal(signum, on_signal)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Back up and restore save-game folders into timestamped snapshots.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Folder holding config.json, savefolders.ini and Backups (default: current folder)",
    )
    parser.add_argument(
        "--max-backups",
        type=int,
        default=None,
        help="Snapshots kept per game (default: from config, 5)",
    )
    parser.add_argument(
        "--no-dialog",
        action="store_true",
        help="Type folder paths instead of using the folder dialog",
    )
    parser.add_argument("--backup-all", action="store_true", help="Back up all saves and exit")
    parser.add_argument("--list", action="store_true", help="List tracked save folders and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Application entry point."""
    args = parse_args(argv)
    ctx = create_context(args)
    install_shutdown_hook(ctx.save_folders.save)

    if args.list:
        for game in ctx.save_folders.games():
            print(f"{game.name} | {game.live_path}")
        return 0

    if args.backup_all:
        results = ctx.backup_manager.backup_all(ctx.save_folders.games())
        for result in results:
            if result.status == BackupStatus.SOURCE_MISSING:
                print(f'{result.game_name}: save folder missing ({result.live_path})')
            elif result.status == BackupStatus.FAILED:
                print(f"{result.game_name}: failed - {result.error}")
            else:
                print(f"{result.game_name}: {result.snapshot.path}")
        return 1 if any(r.status == BackupStatus.FAILED for r in results) else 0

    ConsoleMenu(ctx).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
