"""Tests for snapshot timestamp labels."""

from __future__ import annotations

from datetime import datetime

import pytest

from savebackup.core.timestamp import (
    format_timestamp,
    parse_timestamp,
    snapshot_dir_name,
    try_parse_timestamp,
)
from savebackup.errors import TimestampParseError


class TestFormat:
    def test_zero_padded_label(self) -> None:
        assert format_timestamp(datetime(2024, 3, 7, 9, 5, 2)) == "2024-03-07 09h05m02s"

    def test_24_hour_clock(self) -> None:
        assert format_timestamp(datetime(2023, 12, 31, 23, 59, 59)) == "2023-12-31 23h59m59s"

    def test_dir_name_has_prefix(self) -> None:
        name = snapshot_dir_name(datetime(2024, 1, 2, 3, 4, 5))
        assert name == "Backup - 2024-01-02 03h04m05s"


class TestParse:
    @pytest.mark.parametrize(
        "instant",
        [
            datetime(2024, 2, 29, 0, 0, 0),
            datetime(1999, 12, 31, 23, 59, 59),
            datetime(2030, 6, 15, 12, 30, 45),
        ],
    )
    def test_round_trip(self, instant: datetime) -> None:
        assert parse_timestamp(format_timestamp(instant)) == instant

    def test_round_trip_drops_microseconds(self) -> None:
        instant = datetime(2024, 5, 6, 7, 8, 9, 123456)
        assert parse_timestamp(format_timestamp(instant)) == instant.replace(microsecond=0)

    def test_parses_full_directory_name(self) -> None:
        parsed = parse_timestamp("Backup - 2024-01-02 03h04m05s")
        assert parsed == datetime(2024, 1, 2, 3, 4, 5)

    def test_ignores_trailing_text(self) -> None:
        parsed = parse_timestamp("Backup - 2024-01-02 03h04m05s (manual)")
        assert parsed == datetime(2024, 1, 2, 3, 4, 5)

    @pytest.mark.parametrize(
        "text",
        [
            "Backup",
            "Backup - ",
            "Backup - 2024-01-02",
            "Backup - 2024-01-02 03h04m",
            "Backup - 2024-01-02 03h04m05",
            "Backup - 2024-xx-02 03h04m05s",
            "Backup - 2024-13-02 03h04m05s",
            "Backup - 2024-02-30 03h04m05s",
            "Backup - 2024-01-02 25h04m05s",
        ],
    )
    def test_rejects_malformed(self, text: str) -> None:
        with pytest.raises(TimestampParseError):
            parse_timestamp(text)

    def test_try_parse_returns_none(self) -> None:
        assert try_parse_timestamp("Backup - old") is None
