"""Save Backup Manager — timestamped save-game snapshots with retention."""

__version__ = "1.0.0"
