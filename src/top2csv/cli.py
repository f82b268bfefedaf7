"""Command line entry point for top2csv."""

import argparse
import logging
import sys
from pathlib import Path

from top2csv import __version__
from top2csv.discovery import find_top_logs
from top2csv.errors import Top2CsvError
from top2csv.log_config import setup_logger
from top2csv.models import Metric
from top2csv.parser import NumericPolicy
from top2csv.pipeline import convert, convert_file, output_path_for, parse, write_file
from top2csv.presets import build_watch_list, preset_names

logger = logging.getLogger(__name__)


def add_metric_options(parser: argparse.ArgumentParser) -> None:
    """Add the mutually exclusive --cpu / --mem pair."""
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "-c",
        "--cpu",
        dest="metric",
        action="store_const",
        const=Metric.CPU_PERCENT,
        help="Gather CPU usage for each process.",
    )
    group.add_argument(
        "-m",
        "--mem",
        dest="metric",
        action="store_const",
        const=Metric.VIRTUAL_MEMORY,
        help="Gather virtual memory usage for each process.",
    )


def add_process_options(parser: argparse.ArgumentParser) -> None:
    """Add the preset option and the positional process names."""
    parser.add_argument(
        "-p",
        "--preset",
        metavar="PRESET",
        help="Start from a named set of processes (one of "
        + ", ".join(preset_names())
        + "); listed processes are added to it.",
    )
    parser.add_argument(
        "processes",
        nargs="*",
        metavar="PROCESS",
        help="Process names to report, in output column order.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="top2csv",
        description="Convert top batch logs into a per-process CSV time series.",
    )
    add_metric_options(parser)
    parser.add_argument(
        "-f",
        "--find",
        type=Path,
        metavar="DIR",
        help="Convert every top.log[.N] found below DIR next to the log. "
        "--input-file and --output-file are ignored.",
    )
    parser.add_argument(
        "-i", "--input-file", type=Path, help="Input file to read from, instead of stdin."
    )
    parser.add_argument(
        "-o", "--output-file", type=Path, help="Output file to write to, instead of stdout."
    )
    add_process_options(parser)
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Abort on a metric value that is not a number instead of skipping the line.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    parser.add_argument("--log-file", type=Path, help="Also write detailed logs to this file.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_find(
    root: Path,
    watch_list: list[str],
    metric: Metric,
    numeric_policy: NumericPolicy,
) -> int:
    """
    Convert each discovered log next to itself.

    A log that fails to convert is reported and skipped.

    Returns:
        Number of logs converted.
    """
    converted = 0
    for log_path in find_top_logs(root):
        print(f"Found: {log_path}", flush=True)
        output_path = output_path_for(log_path, metric)
        try:
            rows = convert_file(
                log_path, output_path, watch_list, metric, numeric_policy=numeric_policy
            )
        except (OSError, Top2CsvError) as e:
            logger.warning("Skipping %s: %s", log_path, e)
            continue
        print(f"Writing: {output_path}", flush=True)
        logger.debug("%s: %d snapshots", output_path, rows)
        converted += 1
    return converted


def run_single(
    input_path: Path | None,
    output_path: Path | None,
    watch_list: list[str],
    metric: Metric,
    numeric_policy: NumericPolicy,
) -> None:
    """Convert one stream, from files or stdin/stdout."""
    if input_path is None and output_path is None:
        convert(sys.stdin, sys.stdout, watch_list, metric, numeric_policy=numeric_policy)
    elif output_path is None:
        with open(input_path, encoding="utf-8", errors="replace") as source:
            convert(source, sys.stdout, watch_list, metric, numeric_policy=numeric_policy)
    elif input_path is None:
        snapshots = parse(sys.stdin, watch_list, metric, numeric_policy=numeric_policy)
        write_file(snapshots, output_path, watch_list, metric)
    else:
        convert_file(input_path, output_path, watch_list, metric, numeric_policy=numeric_policy)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the top2csv command. Returns the exit status."""
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # --help and --version exit 0; usage errors map to 1.
        return 0 if e.code in (0, None) else 1
    setup_logger(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file,
    )
    numeric_policy = NumericPolicy.ABORT if args.strict else NumericPolicy.SKIP

    try:
        watch_list = build_watch_list(args.preset, args.processes)
        if args.find is not None:
            run_find(args.find, watch_list, args.metric, numeric_policy)
        else:
            run_single(
                args.input_file, args.output_file, watch_list, args.metric, numeric_policy
            )
    except Top2CsvError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
