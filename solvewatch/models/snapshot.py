"""Snapshot value models: validated, immutable observations of solver state."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Cell alphabet.  Any other character is a placed piece identifier.
BLOCKED_CELL = "#"
VACANT_CELL = "."

# ``<total-steps>: <steps-since-dequeue> / <queue-size> / <total-dequeues>``
STATS_LINE_PATTERN = re.compile(r"(\d+):\s*(\d+)\s*/\s*(\d+)\s*/\s*(\d+)")

# Header emitted for sampled trend data.
TREND_CSV_HEADER = "steps,queueSize,queueGrowthRate,solutions,stepsPerSecond"

# 0-based column positions in the solver's stats CSV.
_CSV_STEPS = 0
_CSV_QUEUE_SIZE = 3
_CSV_QUEUE_GROWTH_RATE = 4
_CSV_SOLUTIONS = 5
_CSV_STEPS_PER_SECOND = 7

Board = tuple[str, ...]


class ProgressStats(BaseModel):
    """The four counters carried by the snapshot's progress line."""

    model_config = ConfigDict(frozen=True)

    total_steps: int
    steps_since_dequeue: int
    queue_size: int
    total_dequeues: int

    @classmethod
    def from_line(cls, line: str) -> ProgressStats | None:
        """Parse a progress line; ``None`` when it does not have the fixed shape."""
        match = STATS_LINE_PATTERN.fullmatch(line.strip())
        if match is None:
            return None
        total, since, queue, dequeues = (int(g) for g in match.groups())
        return cls(
            total_steps=total,
            steps_since_dequeue=since,
            queue_size=queue,
            total_dequeues=dequeues,
        )


class TrendPoint(BaseModel):
    """One row of the solver's time-series log, reduced to the tracked columns."""

    model_config = ConfigDict(frozen=True)

    steps: float
    queue_size: float
    queue_growth_rate: float
    solutions: float
    steps_per_second: float

    @classmethod
    def from_csv_row(cls, row: str) -> TrendPoint | None:
        """Parse a raw CSV row.

        Returns ``None`` for header rows, short rows and rows with
        non-numeric fields in the tracked columns.
        """
        fields = row.strip().split(",")
        if len(fields) <= _CSV_STEPS_PER_SECOND:
            return None
        try:
            return cls(
                steps=float(fields[_CSV_STEPS]),
                queue_size=float(fields[_CSV_QUEUE_SIZE]),
                queue_growth_rate=float(fields[_CSV_QUEUE_GROWTH_RATE]),
                solutions=float(fields[_CSV_SOLUTIONS]),
                steps_per_second=float(fields[_CSV_STEPS_PER_SECOND]),
            )
        except ValueError:
            return None

    def to_csv_row(self) -> str:
        """Render in ``TREND_CSV_HEADER`` column order."""
        return ",".join(
            _format_number(v)
            for v in (
                self.steps,
                self.queue_size,
                self.queue_growth_rate,
                self.solutions,
                self.steps_per_second,
            )
        )


class Snapshot(BaseModel):
    """A frozen, validated observation of the solver.

    Constructed fresh on every successful parse and never mutated.
    Equality is value equality over all four fields, which is what the
    watcher's change detection relies on.
    """

    model_config = ConfigDict(frozen=True)

    board: Board
    stats: str
    metric: float | None = None
    csv_stats: str | None = Field(default=None, serialization_alias="csvStats")

    @field_validator("board")
    @classmethod
    def board_is_rectangular(cls, board: Board) -> Board:
        if not board or not board[0]:
            raise ValueError("board must have at least one non-empty row")
        width = len(board[0])
        for index, row in enumerate(board):
            if len(row) != width:
                raise ValueError(
                    f"board row {index} has width {len(row)}, expected {width}"
                )
        return board

    @property
    def height(self) -> int:
        return len(self.board)

    @property
    def width(self) -> int:
        return len(self.board[0]) if self.board else 0

    @property
    def progress(self) -> ProgressStats | None:
        """Structured view of ``stats``."""
        return ProgressStats.from_line(self.stats)

    @property
    def csv_point(self) -> TrendPoint | None:
        """Structured view of ``csv_stats``."""
        if self.csv_stats is None:
            return None
        return TrendPoint.from_csv_row(self.csv_stats)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict in the push-stream shape."""
        return {
            "board": list(self.board),
            "stats": self.stats,
            "metric": self.metric,
            "csvStats": self.csv_stats,
        }


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)
