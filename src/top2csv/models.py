"""Data models for top2csv."""

from dataclasses import dataclass, field
from enum import Enum


class Metric(Enum):
    """Resource metric collected for each watched process."""

    VIRTUAL_MEMORY = "mem"
    CPU_PERCENT = "cpu"

    @property
    def precision(self) -> int:
        """Number of decimals used when the metric is written out."""
        return 0 if self is Metric.VIRTUAL_MEMORY else 1

    @property
    def file_suffix(self) -> str:
        """Suffix appended to a log path to name its CSV output."""
        return f"-{self.value}.csv"


@dataclass(slots=True, frozen=True)
class ColumnLayout:
    """
    Positions of the columns the aggregator reads in a process-status line.

    The defaults follow the task area of ``top -b``:
    PID USER PR NI VIRT RES SHR S %CPU %MEM TIME+ COMMAND
    """

    name_index: int = 11
    virtual_memory_index: int = 4
    cpu_percent_index: int = 8

    def metric_index(self, metric: Metric) -> int:
        """Column holding the value of ``metric``."""
        indices = {
            Metric.VIRTUAL_MEMORY: self.virtual_memory_index,
            Metric.CPU_PERCENT: self.cpu_percent_index,
        }
        return indices[metric]

    @property
    def min_fields(self) -> int:
        """Fewest fields a line needs to be considered a process-status line."""
        return self.name_index + 1


TOP_LAYOUT = ColumnLayout()


@dataclass(slots=True)
class Snapshot:
    """One timestamped monitor reading with a running total per watched process."""

    hour: int
    minute: int
    second: int
    totals: list[float] = field(default_factory=list)

    @classmethod
    def empty(cls, hour: int, minute: int, second: int, size: int) -> "Snapshot":
        """Create a snapshot whose ``size`` totals all start at zero."""
        return cls(hour, minute, second, [0.0] * size)

    @property
    def time_label(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
