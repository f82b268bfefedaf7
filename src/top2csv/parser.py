"""Snapshot scanner and process aggregator for top logs."""

import logging
from collections.abc import Iterable
from enum import Enum

from top2csv.errors import MalformedInputError, NumericParseError
from top2csv.grammar import parse_header, parse_metric_value, tokenize
from top2csv.models import TOP_LAYOUT, ColumnLayout, Metric, Snapshot

logger = logging.getLogger(__name__)


class ParseState(Enum):
    """Where the scanner stands relative to snapshot headers."""

    NO_SNAPSHOT = "no_snapshot"
    IN_SNAPSHOT = "in_snapshot"


class NumericPolicy(Enum):
    """What to do with a watched process whose metric field is not a number."""

    SKIP = "skip"
    ABORT = "abort"


class TopLogParser:
    """
    Turn the lines of one top log into a list of snapshots.

    Lines are fed in order. A header line opens a new snapshot; every other
    line is offered to the aggregator, which adds the metric of watched
    processes into the current snapshot. A parser instance holds the state of
    a single log and must not be reused for another one.
    """

    def __init__(
        self,
        watch_list: list[str],
        metric: Metric,
        layout: ColumnLayout = TOP_LAYOUT,
        numeric_policy: NumericPolicy = NumericPolicy.SKIP,
    ) -> None:
        """
        Initialize the TopLogParser.

        Args:
            watch_list: Ordered, distinct process names. Defines column order.
            metric: Which metric column to collect.
            layout: Column positions of process-status lines.
            numeric_policy: Handling of unparseable metric fields.
        """
        self._watch_list = list(watch_list)
        self._positions = {name: index for index, name in enumerate(self._watch_list)}
        self._metric = metric
        self._metric_index = layout.metric_index(metric)
        self._name_index = layout.name_index
        self._min_fields = max(layout.min_fields, self._metric_index + 1)
        self._numeric_policy = numeric_policy
        self._state = ParseState.NO_SNAPSHOT
        self._snapshots: list[Snapshot] = []
        # Index of the snapshot receiving status lines; valid once IN_SNAPSHOT.
        self._current = -1
        self._line_number = 0

    @property
    def state(self) -> ParseState:
        return self._state

    @property
    def snapshots(self) -> list[Snapshot]:
        """Snapshots found so far, in input order."""
        return self._snapshots

    @property
    def watch_list(self) -> list[str]:
        return list(self._watch_list)

    def feed(self, line: str) -> None:
        """
        Consume one input line.

        Raises:
            MalformedInputError: A non-header line arrived before any header.
            NumericParseError: Only with ``NumericPolicy.ABORT``.
        """
        self._line_number += 1
        header = parse_header(line)
        if header is not None:
            self._open_snapshot(*header)
            return

        if self._state is ParseState.NO_SNAPSHOT:
            if not line.strip():
                return
            raise MalformedInputError(self._line_number)

        self._aggregate(line)

    def feed_all(self, lines: Iterable[str]) -> list[Snapshot]:
        """Consume every line and return the resulting snapshots."""
        for line in lines:
            self.feed(line)
        return self._snapshots

    def _open_snapshot(self, hour: int, minute: int, second: int) -> None:
        self._snapshots.append(
            Snapshot.empty(hour, minute, second, len(self._watch_list))
        )
        self._current = len(self._snapshots) - 1
        self._state = ParseState.IN_SNAPSHOT

    def _aggregate(self, line: str) -> None:
        """Add the metric of a watched process line into the current snapshot."""
        fields = tokenize(line)
        if len(fields) < self._min_fields:
            return

        position = self._positions.get(fields[self._name_index])
        if position is None:
            return

        field = fields[self._metric_index]
        try:
            value = parse_metric_value(field)
        except NumericParseError:
            if self._numeric_policy is NumericPolicy.ABORT:
                raise NumericParseError(field, self._line_number) from None
            logger.warning(
                "Skipping line %d: invalid %s value %r for %s",
                self._line_number,
                self._metric.value,
                field,
                self._watch_list[position],
            )
            return

        self._snapshots[self._current].totals[position] += value
