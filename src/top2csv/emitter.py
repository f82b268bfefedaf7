"""CSV output for parsed snapshots."""

import csv
from collections.abc import Iterator
from typing import TextIO

from top2csv.models import Metric, Snapshot

TIME_COLUMNS = ["Hour", "Minute", "Second"]


def format_value(value: float, metric: Metric) -> str:
    """Fixed-point text for a total, with the metric's precision."""
    return f"{value:.{metric.precision}f}"


def header_row(watch_list: list[str]) -> list[str]:
    return TIME_COLUMNS + list(watch_list)


def render_rows(snapshots: list[Snapshot], metric: Metric) -> Iterator[list[str]]:
    """Yield one formatted data row per snapshot, in input order."""
    for snapshot in snapshots:
        row = [str(snapshot.hour), str(snapshot.minute), str(snapshot.second)]
        row.extend(format_value(total, metric) for total in snapshot.totals)
        yield row


def write_csv(
    snapshots: list[Snapshot],
    watch_list: list[str],
    metric: Metric,
    out: TextIO,
) -> None:
    """
    Write the header and every snapshot row to ``out``, then flush it.

    Rows end with a single newline; nothing follows the last row.
    """
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(header_row(watch_list))
    writer.writerows(render_rows(snapshots, metric))
    out.flush()
