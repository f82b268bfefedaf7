"""Exceptions raised by top2csv."""


class Top2CsvError(Exception):
    """Base class for every error top2csv raises on purpose."""


class MalformedInputError(Top2CsvError):
    """A status line was found before any snapshot header."""

    def __init__(self, line_number: int) -> None:
        super().__init__(
            f"log must start with a snapshot header (line {line_number})"
        )
        self.line_number = line_number


class NumericParseError(Top2CsvError, ValueError):
    """A metric field is not a number."""

    def __init__(self, field: str, line_number: int | None = None) -> None:
        location = f" on line {line_number}" if line_number is not None else ""
        super().__init__(f"invalid metric value {field!r}{location}")
        self.field = field
        self.line_number = line_number


class UnknownPresetError(Top2CsvError):
    """The requested process preset does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown preset '{name}'")
        self.name = name


class EmptyWatchListError(Top2CsvError):
    """No process was selected for output."""

    def __init__(self) -> None:
        super().__init__("at least one process must be specified.")


class DiscoveryError(Top2CsvError):
    """The directory to search for logs cannot be used."""
