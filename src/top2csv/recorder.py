"""Record top-compatible snapshot logs from the live system using psutil."""

import argparse
import logging
import sys
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import TextIO

import psutil

from top2csv.log_config import setup_logger

logger = logging.getLogger(__name__)

COLUMN_HEADER = (
    "    PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND"
)

STATUS_CODES = {
    psutil.STATUS_RUNNING: "R",
    psutil.STATUS_SLEEPING: "S",
    psutil.STATUS_DISK_SLEEP: "D",
    psutil.STATUS_STOPPED: "T",
    psutil.STATUS_TRACING_STOP: "t",
    psutil.STATUS_ZOMBIE: "Z",
    psutil.STATUS_DEAD: "X",
    psutil.STATUS_IDLE: "I",
}


@dataclass(slots=True, frozen=True)
class ProcessRow:
    """One line of the task area, values in top's units."""

    pid: int
    user: str
    nice: int
    virt_kib: int
    res_kib: int
    shr_kib: int
    status: str  # 'R', 'S', 'Z', 'D', etc.
    cpu_percent: float
    mem_percent: float
    cpu_seconds: float
    command: str


@dataclass(slots=True, frozen=True)
class SystemSummary:
    """System-wide values shown above the task area."""

    taken_at: datetime
    uptime_seconds: float
    user_count: int
    load_avg: tuple[float, float, float]
    mem_total_kib: int
    mem_free_kib: int
    mem_used_kib: int
    swap_total_kib: int
    swap_used_kib: int


def format_uptime(seconds: float) -> str:
    """Uptime the way top prints it: ``3 days,  2:01`` or ``14 min``."""
    days = int(seconds // 86400)
    hours = int((seconds % 86400) // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours == 0 and days == 0:
        clock = f"{minutes} min"
    else:
        clock = f"{hours:2d}:{minutes:02d}"
    if days > 0:
        unit = "day" if days == 1 else "days"
        return f"{days} {unit}, {clock}"
    return clock


def format_cpu_time(seconds: float) -> str:
    """TIME+ column: minutes, seconds and hundredths."""
    hundredths = round(seconds * 100)
    minutes, rest = divmod(hundredths, 6000)
    return f"{minutes}:{rest // 100:02d}.{rest % 100:02d}"


def format_row(row: ProcessRow) -> str:
    priority = 20 + row.nice
    return (
        f"{row.pid:7d} {row.user[:8].replace(' ', '_'):<8} {priority:4d} {row.nice:3d} "
        f"{row.virt_kib:7d} {row.res_kib:6d} {row.shr_kib:6d} {row.status} "
        f"{row.cpu_percent:5.1f} {row.mem_percent:5.1f} "
        f"{format_cpu_time(row.cpu_seconds):>9} {row.command}"
    )


def render_snapshot(summary: SystemSummary, rows: list[ProcessRow]) -> str:
    """Render one batch-mode snapshot, header line first, ending in a blank line."""
    users = "user" if summary.user_count == 1 else "users"
    load = ", ".join(f"{value:.2f}" for value in summary.load_avg)
    counts = {code: 0 for code in ("R", "S", "T", "Z")}
    for row in rows:
        if row.status in counts:
            counts[row.status] += 1
    lines = [
        f"top - {summary.taken_at:%H:%M:%S} up {format_uptime(summary.uptime_seconds)}, "
        f" {summary.user_count} {users},  load average: {load}",
        f"Tasks: {len(rows)} total, {counts['R']} running, {counts['S']} sleeping, "
        f"{counts['T']} stopped, {counts['Z']} zombie",
        f"KiB Mem : {summary.mem_total_kib} total, {summary.mem_free_kib} free, "
        f"{summary.mem_used_kib} used",
        f"KiB Swap: {summary.swap_total_kib} total, {summary.swap_used_kib} used",
        "",
        COLUMN_HEADER,
        *(format_row(row) for row in rows),
        "",
    ]
    return "\n".join(lines) + "\n"


class SnapshotRecorder:
    """
    Periodically write top-style snapshots of the running system.

    Runs in a separate daemon thread. Each poll appends one snapshot to the
    output stream, so the result can be fed straight back into the parser.
    Processes that exit, deny access or are zombies are left out of a poll.
    """

    def __init__(self, out: TextIO, poll_rate: float = 3.0) -> None:
        """
        Initialize the SnapshotRecorder.

        Args:
            out: Text stream receiving the snapshots.
            poll_rate: Seconds between snapshots. Default 3.0s, like top.
        """
        self._out = out
        self._poll_rate = poll_rate
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._snapshot_count = 0

    @property
    def poll_rate(self) -> float:
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        self._poll_rate = max(0.1, value)  # Minimum 0.1 seconds

    @property
    def is_running(self) -> bool:
        """Check if the recorder thread is running."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def snapshot_count(self) -> int:
        return self._snapshot_count

    def start(self) -> None:
        """Start the recording thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="SnapshotRecorder",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the recording thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def run(self, iterations: int | None = None) -> None:
        """Record in the calling thread, forever or ``iterations`` times."""
        self._stop_event.clear()
        while iterations is None or self._snapshot_count < iterations:
            self.record_once()
            if iterations is not None and self._snapshot_count >= iterations:
                break
            if self._stop_event.wait(timeout=self._poll_rate):
                break

    def record_once(self) -> None:
        """Collect and write a single snapshot."""
        text = render_snapshot(self._collect_summary(), self._collect_processes())
        self._out.write(text)
        self._out.flush()
        self._snapshot_count += 1

    def _poll_loop(self) -> None:
        """Main polling loop running in the background thread."""
        while not self._stop_event.is_set():
            try:
                self.record_once()
            except OSError:
                logger.exception("Cannot write snapshot, stopping recorder")
                break

            self._stop_event.wait(timeout=self._poll_rate)

    def _collect_summary(self) -> SystemSummary:
        mem = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return SystemSummary(
            taken_at=datetime.now(),
            uptime_seconds=time.time() - psutil.boot_time(),
            user_count=len(psutil.users()),
            load_avg=psutil.getloadavg(),
            mem_total_kib=mem.total // 1024,
            mem_free_kib=mem.available // 1024,
            mem_used_kib=mem.used // 1024,
            swap_total_kib=swap.total // 1024,
            swap_used_kib=swap.used // 1024,
        )

    def _collect_processes(self) -> list[ProcessRow]:
        """
        Collect a task-area row for every running process.

        Uses psutil.process_iter() with oneshot() for efficiency.
        """
        rows: list[ProcessRow] = []
        attrs = [
            "pid",
            "name",
            "username",
            "status",
            "cpu_percent",
            "memory_percent",
            "memory_info",
            "cpu_times",
            "nice",
        ]

        for proc in psutil.process_iter(attrs=attrs):
            try:
                with proc.oneshot():
                    info = proc.info
                    mem_info = info.get("memory_info")
                    cpu_times = info.get("cpu_times")
                    rows.append(
                        ProcessRow(
                            pid=info.get("pid", 0),
                            user=info.get("username") or "?",
                            nice=info.get("nice") or 0,
                            virt_kib=mem_info.vms // 1024 if mem_info else 0,
                            res_kib=mem_info.rss // 1024 if mem_info else 0,
                            shr_kib=getattr(mem_info, "shared", 0) // 1024,
                            status=STATUS_CODES.get(info.get("status"), "?"),
                            cpu_percent=info.get("cpu_percent") or 0.0,
                            mem_percent=info.get("memory_percent") or 0.0,
                            cpu_seconds=(cpu_times.user + cpu_times.system) if cpu_times else 0.0,
                            command=info.get("name") or "?",
                        )
                    )
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue

        return rows


def main(argv: list[str] | None = None) -> int:
    """Entry point for the top2csv-record command."""
    parser = argparse.ArgumentParser(
        prog="top2csv-record",
        description="Write top-compatible snapshots of the running system.",
    )
    parser.add_argument("-o", "--output-file", help="Append to this file instead of stdout.")
    parser.add_argument(
        "-d", "--delay", type=float, default=3.0, help="Seconds between snapshots."
    )
    parser.add_argument(
        "-n", "--iterations", type=int, help="Number of snapshots before exiting."
    )
    args = parser.parse_args(argv)
    setup_logger()

    out = open(args.output_file, "a", encoding="utf-8") if args.output_file else sys.stdout
    recorder = SnapshotRecorder(out)
    recorder.poll_rate = args.delay
    try:
        recorder.run(args.iterations)
    except KeyboardInterrupt:
        pass
    finally:
        if out is not sys.stdout:
            out.close()
    logger.info("Recorded %d snapshots", recorder.snapshot_count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
