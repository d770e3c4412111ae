"""Interactive console menu."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from loguru import logger

from savebackup.core.backup import BackupStatus
from savebackup.core.restore import has_safety_copy, safety_copy_for
from savebackup.errors import DuplicateNameError, DuplicatePathError, InvalidNameError
from savebackup.utils import directory_size, format_size, sanitize_game_name

if TYPE_CHECKING:
    from savebackup.context import AppContext
    from savebackup.core.backup import BackupResult
    from savebackup.models.tracked_game import TrackedGame

_MENU = (
    "Save Backup Manager:\n"
    "--------------------\n"
    "1. Choose a new folder to add to the managed save backups list.\n"
    "2. List all backup games and their paths.\n"
    "3. Backup all saves.\n"
    "4. Restore a backup.\n"
    "5. Exit program.\n"
)


class ConsoleMenu:
    """
    Numbered-menu front end over the backup and restore engines.

    Input and output are injectable so the menu can be driven from tests.
    End of input on any prompt ends the session.
    """

    def __init__(
        self,
        ctx: AppContext,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self._ctx = ctx
        self._input = input_fn
        self._output = output_fn
        self._actions: dict[int, Callable[[], None]] = {
            1: self.add_folder,
            2: self.list_games,
            3: self.backup_all,
            4: self.restore,
        }

    def run(self) -> None:
        while True:
            self._output(_MENU)
            try:
                choice = self._ask_number("> ", 1, len(self._actions) + 1)
            except EOFError:
                break
            if choice == len(self._actions) + 1:
                break
            try:
                self._actions[choice]()
            except EOFError:
                break
        self._output("Exiting...")

    # ── Prompts ──

    def _ask_number(self, prompt: str, low: int, high: int) -> int:
        """Re-prompt until an integer in [low, high] is entered."""
        while True:
            raw = self._input(prompt).strip()
            try:
                value = int(raw)
            except ValueError:
                value = None
            if value is not None and low <= value <= high:
                return value
            self._output(f"Invalid input, '{raw}'. Enter a number from {low} to {high}.")

    def _ask_yes_no(self, prompt: str) -> bool:
        while True:
            answer = self._input(f"{prompt} (y/n) -> ").strip().lower()
            if answer in ("y", "n"):
                return answer == "y"
            self._output("Please enter a correct answer.")

    def _choose_game(self) -> TrackedGame | None:
        games = self._ctx.save_folders.games()
        if not games:
            self._output("No save folders are being managed yet.\n")
            return None
        for i, game in enumerate(games, start=1):
            self._output(f"{i}. {game.name}")
        index = self._ask_number("Game number (0 to cancel): ", 0, len(games))
        return games[index - 1] if index else None

    # ── Actions ──

    def add_folder(self) -> None:
        """Pick a folder and register it under a unique name."""
        store = self._ctx.save_folders
        path = self._ctx.picker.pick_folder()
        if path is None:
            self._output("User cancelled selection, no save backup file path was added.\n")
            return

        existing = store.find_by_path(path)
        if existing is not None:
            self._output(
                f'Save folder, "{path}" already exists in the stored save file paths '
                f'as "{existing.name}".\n'
            )
            return

        while True:
            name = sanitize_game_name(
                self._input(
                    "Enter the name you want to associate this save data with "
                    "(a folder with this name will be created when backing up saves): "
                )
            )
            try:
                store.add(name, path)
            except DuplicateNameError:
                self._output(
                    f'A backup save folder with game name, "{name}", already exists. '
                    "Please enter a new game name."
                )
            except InvalidNameError as e:
                self._output(f"{e}. Please enter a new game name.")
            except DuplicatePathError as e:
                self._output(f"{e}.\n")
                return
            else:
                break

        self._output(f'Added "{path}" to save backup path list with the name: "{name}"\n')

    def list_games(self) -> None:
        self._output(
            "Saves Managed\n"
            "---------------\n"
            "Game Name           |             Save Game Path\n"
            "-------------------------------------------------------------"
        )
        for game in self._ctx.save_folders.games():
            marker = "" if game.exists else "  (missing)"
            self._output(f"{game.name} | {game.live_path}{marker}")
        self._output("")

    def backup_all(self) -> None:
        games = self._ctx.save_folders.games()
        results = self._ctx.backup_manager.backup_all(games)

        for result in results:
            if result.status == BackupStatus.SOURCE_MISSING:
                self._handle_missing(result)
            elif result.status == BackupStatus.FAILED:
                self._output(
                    f'Backup of "{result.game_name}" failed at {result.failed_path}: '
                    f"{result.error}\nDeleted incomplete backup data."
                )

        backed_up = [r.game_name for r in results if r.success]
        if backed_up:
            self._output("Backups made for the following games:")
            self._output("-------------------------------------")
            for name in backed_up:
                self._output(name)
            self._output("")
        else:
            self._output("No save data was backed up.\n")

    def _handle_missing(self, result: BackupResult) -> None:
        """Ask whether to stop tracking a game whose save folder is gone."""
        self._output(
            f'The backup save file location for "{result.game_name}" -> '
            f'"{result.live_path}" doesn\'t exist.\n'
        )
        if self._ask_yes_no("Should we remove this backup path from the configuration?"):
            self._ctx.save_folders.remove(result.game_name)
            self._output(f'Removed "{result.game_name}" from the configuration.')
        else:
            self._output(
                f'Despite the save data path not existing for "{result.game_name}", '
                "the save path will be kept in your configuration."
            )

    def restore(self) -> None:
        """Choose a game and one of its snapshots, then restore it."""
        game = self._choose_game()
        if game is None:
            return

        snapshots = self._ctx.backup_manager.list_snapshots(game.name)
        if not snapshots:
            self._output(f'There are no backups of "{game.name}" to restore.\n')
            return

        for i, snapshot in enumerate(snapshots, start=1):
            size = format_size(directory_size(snapshot.path))
            self._output(f"{i}. {snapshot.name}  ({size})")
        index = self._ask_number("Backup number (0 to cancel): ", 0, len(snapshots))
        if not index:
            return
        snapshot = snapshots[index - 1]

        overwrite = False
        if has_safety_copy(game.live_path):
            overwrite = self._ask_yes_no(
                f"A copy of a previous save already exists in {safety_copy_for(game.live_path)}. "
                "Overwrite it with the current save?"
            )

        result = self._ctx.restore_manager.restore_one(
            game.name, game.live_path, snapshot, overwrite_safety=overwrite
        )
        if result.success:
            self._output(f'Restored "{game.name}" from {snapshot.name}.\n')
        else:
            logger.debug(f"Restore result: {result}")
            self._output(f'Restore of "{game.name}" failed: {result.error}\n')
            if result.safety_path is not None:
                self._output(f"Your previous save is kept in {result.safety_path}\n")
