"""
Line grammars for top snapshot logs.

Two independent grammars live here: the snapshot header
(``top - HH:MM:SS ...``) and the unit-suffixed number used in metric columns
(``2048``, ``100m``, ``3.5``). Neither knows about column positions.
"""

import re

from top2csv.errors import NumericParseError

HEADER_PATTERN = re.compile(r"^top - ([0-2][0-9]):([0-5][0-9]):([0-5][0-9])")

# Leading decimal number; whatever follows is the unit suffix.
NUMBER_PATTERN = re.compile(r"^([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)(.*)$")

FIELD_PATTERN = re.compile(r"\S+")

MEGA_SUFFIX = "m"
MEGA_FACTOR = 1024.0


def parse_header(line: str) -> tuple[int, int, int] | None:
    """
    Return ``(hour, minute, second)`` if ``line`` opens a snapshot, else None.

    The pattern alone admits hours up to 29, so the hour is range-checked
    after matching.
    """
    match = HEADER_PATTERN.match(line)
    if match is None:
        return None
    hour, minute, second = (int(group) for group in match.groups())
    if hour > 23:
        return None
    return hour, minute, second


def tokenize(line: str) -> list[str]:
    """Split a line into runs of non-whitespace characters."""
    return FIELD_PATTERN.findall(line)


def parse_metric_value(field: str) -> float:
    """
    Read a metric field, scaling a trailing ``m`` (mega) by 1024.

    Unsuffixed values are already in the base (kilo) unit. Any other suffix is
    ignored and leaves the value unscaled.

    Raises:
        NumericParseError: ``field`` does not start with a number.
    """
    match = NUMBER_PATTERN.match(field)
    if match is None:
        raise NumericParseError(field)
    value = float(match.group(1))
    if field.endswith(MEGA_SUFFIX):
        value *= MEGA_FACTOR
    return value
