"""Folder pickers — choose a save folder to track."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol

from loguru import logger


class FolderPicker(Protocol):
    """Returns an absolute folder path, or None when the user cancels."""

    def pick_folder(self) -> Path | None: ...


class QtFolderPicker:
    """Native directory dialog via PySide6."""

    def __init__(self, title: str = "Select a save folder to back up") -> None:
        self._title = title

    def pick_folder(self) -> Path | None:
        from PySide6.QtWidgets import QApplication, QFileDialog

        # The console app has no event loop of its own; one QApplication
        # is enough to host the modal dialog.
        app = QApplication.instance() or QApplication([])
        selected = QFileDialog.getExistingDirectory(None, self._title)
        app.processEvents()
        if not selected:
            return None
        return Path(selected).resolve()


class ConsoleFolderPicker:
    """Reads a folder path typed at the prompt (blank line cancels)."""

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self._input = input_fn
        self._output = output_fn

    def pick_folder(self) -> Path | None:
        raw = self._input("Save folder path (blank to cancel): ").strip().strip('"')
        if not raw:
            return None
        path = Path(raw).expanduser().resolve()
        if not path.is_dir():
            logger.warning(f"Not a folder: {path}")
            self._output(f'"{path}" is not an existing folder.')
            return None
        return path
