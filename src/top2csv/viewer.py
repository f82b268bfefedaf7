"""top2csv viewer - Textual application showing a parsed time series."""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Footer, Static

from top2csv.cli import add_metric_options, add_process_options
from top2csv.emitter import format_value, header_row, render_rows
from top2csv.errors import Top2CsvError
from top2csv.models import Metric, Snapshot
from top2csv.pipeline import parse
from top2csv.presets import build_watch_list


@dataclass(slots=True, frozen=True)
class Peak:
    """Highest total seen for one process."""

    name: str
    value: float
    time_label: str | None  # None when the log has no snapshot


def find_peaks(snapshots: list[Snapshot], watch_list: list[str]) -> list[Peak]:
    """Peak value per watched process; the earliest snapshot wins ties."""
    peaks = []
    for index, name in enumerate(watch_list):
        best: Snapshot | None = None
        for snapshot in snapshots:
            if best is None or snapshot.totals[index] > best.totals[index]:
                best = snapshot
        if best is None:
            peaks.append(Peak(name, 0.0, None))
        else:
            peaks.append(Peak(name, best.totals[index], best.time_label))
    return peaks


class PeakSummary(Static):
    """Header widget listing the peak of each watched process."""

    DEFAULT_CSS = """
    PeakSummary {
        height: auto;
        min-height: 3;
        padding: 1;
        background: $surface;
    }
    """

    def show_peaks(self, peaks: list[Peak], metric: Metric, snapshot_count: int) -> None:
        label = "VIRT (KiB)" if metric is Metric.VIRTUAL_MEMORY else "%CPU"
        lines = [f"{label} over {snapshot_count} snapshots"]
        for peak in peaks:
            when = f"at {peak.time_label}" if peak.time_label else "no data"
            lines.append(f"{peak.name:<20} peak {format_value(peak.value, metric):>12} {when}")
        self.update("\n".join(lines))

    def show_error(self, message: str) -> None:
        self.update(f"[red]{message}[/red]")


class SeriesTable(Container):
    """Container for the time series data table."""

    DEFAULT_CSS = """
    SeriesTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def compose(self) -> ComposeResult:
        yield DataTable(id="series-table")

    def on_mount(self) -> None:
        table = self.query_one("#series-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True

    def show_series(self, snapshots: list[Snapshot], watch_list: list[str], metric: Metric) -> None:
        """Replace the table contents with the rows the CSV would contain."""
        table = self.query_one("#series-table", DataTable)
        table.clear(columns=True)
        table.add_columns(*header_row(watch_list))
        for row in render_rows(snapshots, metric):
            table.add_row(*row)


class TimeSeriesApp(App):
    """Browse the per-process time series of a top log."""

    TITLE = "top2csv"

    CSS = """
    Screen {
        layout: vertical;
    }

    #peak-summary {
        dock: top;
        height: auto;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("m", "toggle_metric", "Toggle metric"),
    ]

    def __init__(self, log_path: Path, watch_list: list[str], metric: Metric) -> None:
        """
        Initialize the TimeSeriesApp.

        Args:
            log_path: Top log to display.
            watch_list: Processes shown as columns, in order.
            metric: Metric shown first.
        """
        super().__init__()
        self._log_path = Path(log_path)
        self._watch_list = list(watch_list)
        self._metric = metric
        self._snapshots: list[Snapshot] = []
        self.sub_title = str(self._log_path)

    @property
    def metric(self) -> Metric:
        return self._metric

    @property
    def snapshots(self) -> list[Snapshot]:
        return self._snapshots

    def compose(self) -> ComposeResult:
        yield PeakSummary(id="peak-summary")
        yield SeriesTable()
        yield Footer()

    def on_mount(self) -> None:
        self._load()

    def _load(self) -> None:
        """Parse the log for the current metric and refresh both widgets."""
        summary = self.query_one("#peak-summary", PeakSummary)
        try:
            with open(self._log_path, encoding="utf-8", errors="replace") as source:
                self._snapshots = parse(source, self._watch_list, self._metric)
        except (OSError, Top2CsvError) as e:
            self._snapshots = []
            summary.show_error(f"Cannot load {self._log_path}: {e}")
            self.query_one(SeriesTable).show_series([], self._watch_list, self._metric)
            return

        summary.show_peaks(
            find_peaks(self._snapshots, self._watch_list), self._metric, len(self._snapshots)
        )
        self.query_one(SeriesTable).show_series(self._snapshots, self._watch_list, self._metric)

    def action_toggle_metric(self) -> None:
        """Switch between virtual memory and CPU and re-read the log."""
        if self._metric is Metric.VIRTUAL_MEMORY:
            self._metric = Metric.CPU_PERCENT
        else:
            self._metric = Metric.VIRTUAL_MEMORY
        self._load()
        self.notify(f"Metric: {self._metric.value.upper()}")


def main(argv: list[str] | None = None) -> int:
    """Entry point for the top2csv-view command."""
    parser = argparse.ArgumentParser(
        prog="top2csv-view", description="Browse a top log as a per-process table."
    )
    parser.add_argument("log", type=Path, help="Top log file.")
    add_metric_options(parser)
    add_process_options(parser)
    args = parser.parse_args(argv)

    try:
        watch_list = build_watch_list(args.preset, args.processes)
    except Top2CsvError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    TimeSeriesApp(args.log, watch_list, args.metric).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
