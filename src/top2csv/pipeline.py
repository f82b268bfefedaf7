"""Full conversion of one top log into one CSV document."""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from top2csv.emitter import write_csv
from top2csv.models import TOP_LAYOUT, ColumnLayout, Metric, Snapshot
from top2csv.parser import NumericPolicy, TopLogParser

logger = logging.getLogger(__name__)


def parse(
    lines: Iterable[str],
    watch_list: list[str],
    metric: Metric,
    *,
    layout: ColumnLayout = TOP_LAYOUT,
    numeric_policy: NumericPolicy = NumericPolicy.SKIP,
) -> list[Snapshot]:
    """Parse a whole log with a fresh parser."""
    parser = TopLogParser(watch_list, metric, layout, numeric_policy)
    return parser.feed_all(lines)


def convert(
    source: Iterable[str],
    sink: TextIO,
    watch_list: list[str],
    metric: Metric,
    *,
    layout: ColumnLayout = TOP_LAYOUT,
    numeric_policy: NumericPolicy = NumericPolicy.SKIP,
) -> int:
    """
    Parse ``source`` to the end, then write its CSV to ``sink``.

    Nothing is written if parsing fails.

    Returns:
        Number of snapshot rows written.
    """
    snapshots = parse(
        source, watch_list, metric, layout=layout, numeric_policy=numeric_policy
    )
    write_csv(snapshots, watch_list, metric, sink)
    logger.debug("Wrote %d snapshots for %d processes", len(snapshots), len(watch_list))
    return len(snapshots)


def output_path_for(log_path: Path, metric: Metric) -> Path:
    """CSV path placed next to ``log_path``: ``top.log`` -> ``top.log-mem.csv``."""
    return log_path.with_name(log_path.name + metric.file_suffix)


def convert_file(
    input_path: Path,
    output_path: Path,
    watch_list: list[str],
    metric: Metric,
    *,
    layout: ColumnLayout = TOP_LAYOUT,
    numeric_policy: NumericPolicy = NumericPolicy.SKIP,
) -> int:
    """
    Convert one log file into one CSV file.

    The output file is only created once the log parsed successfully, so a
    malformed log never leaves a truncated CSV behind.
    """
    with open(input_path, encoding="utf-8", errors="replace") as source:
        snapshots = parse(
            source, watch_list, metric, layout=layout, numeric_policy=numeric_policy
        )
    write_file(snapshots, output_path, watch_list, metric)
    return len(snapshots)


def write_file(
    snapshots: list[Snapshot],
    output_path: Path,
    watch_list: list[str],
    metric: Metric,
) -> None:
    """Write already parsed snapshots to a new CSV file."""
    with open(output_path, "w", encoding="utf-8", newline="") as sink:
        write_csv(snapshots, watch_list, metric, sink)
