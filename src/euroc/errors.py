"""Exceptions raised while reading EuRoC sequences."""

from __future__ import annotations

from pathlib import Path


class EurocError(Exception):
    """Base class for all dataset errors raised by this package."""


class RecordParseError(EurocError, ValueError):
    """A data.csv row could not be turned into a record.

    Attributes:
        path: CSV file the row came from
        line_number: 1-based line number in that file
        line: Raw line content (stripped)
    """

    def __init__(self, path: Path, line_number: int, line: str, reason: str) -> None:
        self.path = Path(path)
        self.line_number = line_number
        self.line = line
        super().__init__(f"{path}:{line_number}: {reason} (line: '{line}')")


class CalibrationError(EurocError, ValueError):
    """A sensor.yaml file is missing a key or holds a malformed value."""
