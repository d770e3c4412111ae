"""Domain exceptions."""

from __future__ import annotations


class SaveBackupError(Exception):
    """Base class for all save-backup errors."""


class TimestampParseError(SaveBackupError, ValueError):
    """A snapshot name does not carry a valid ``YYYY-MM-DD HHhMMmSSs`` label."""


class TrackedGameError(SaveBackupError):
    """A tracked-game mutation was rejected."""


class DuplicateNameError(TrackedGameError):
    def __init__(self, name: str) -> None:
        super().__init__(f'A save folder named "{name}" is already tracked')
        self.name = name


class DuplicatePathError(TrackedGameError):
    def __init__(self, path: str, existing_name: str) -> None:
        super().__init__(f'"{path}" is already tracked as "{existing_name}"')
        self.path = path
        self.existing_name = existing_name


class InvalidNameError(TrackedGameError):
    pass


class UnknownGameError(TrackedGameError, KeyError):
    pass
