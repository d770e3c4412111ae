"""Snapshot timestamp labels — ``YYYY-MM-DD HHhMMmSSs`` in local time."""

from __future__ import annotations

from datetime import datetime

from savebackup.errors import TimestampParseError

SNAPSHOT_PREFIX = "Backup - "
SNAPSHOT_MARKER = "Backup"

_LABEL_FORMAT = "%Y-%m-%d %Hh%Mm%Ss"

# Delimiter that terminates each numeric field, in order:
# year, month, day, hour, minute, second.
_FIELD_DELIMITERS = ("-", "-", " ", "h", "m", "s")


def format_timestamp(instant: datetime | None = None) -> str:
    """Render *instant* (default: now, local time) as a snapshot label."""
    if instant is None:
        instant = datetime.now()
    return instant.strftime(_LABEL_FORMAT)


def snapshot_dir_name(instant: datetime | None = None) -> str:
    """Directory name of a snapshot taken at *instant*."""
    return SNAPSHOT_PREFIX + format_timestamp(instant)


def parse_timestamp(text: str) -> datetime:
    """
    Parse a snapshot label back into a naive local datetime.

    *text* may be a bare label or a whole directory name; everything up to
    and including ``"Backup - "`` is dropped first. Trailing text after the
    seconds field is ignored.

    Raises TimestampParseError when any of the six fields is missing,
    non-numeric or out of calendar range.
    """
    _, sep, remaining = text.partition(SNAPSHOT_PREFIX)
    if not sep:
        remaining = text

    fields: list[int] = []
    for delimiter in _FIELD_DELIMITERS:
        head, found, remaining = remaining.partition(delimiter)
        if not found or not (head.isascii() and head.isdigit()):
            raise TimestampParseError(f"Not a snapshot timestamp: {text!r}")
        fields.append(int(head))

    try:
        return datetime(*fields)
    except ValueError as e:
        raise TimestampParseError(f"Invalid snapshot timestamp {text!r}: {e}") from e


def try_parse_timestamp(text: str) -> datetime | None:
    """Like parse_timestamp, but returns None instead of raising."""
    try:
        return parse_timestamp(text)
    except TimestampParseError:
        return None
