"""solvewatch data models: all Pydantic v2, all frozen (immutable)."""

from solvewatch.models.process import ProcessStats
from solvewatch.models.snapshot import (
    BLOCKED_CELL,
    STATS_LINE_PATTERN,
    TREND_CSV_HEADER,
    VACANT_CELL,
    Board,
    ProgressStats,
    Snapshot,
    TrendPoint,
)

__all__ = [
    # snapshot
    "Board",
    "Snapshot",
    "ProgressStats",
    "TrendPoint",
    "BLOCKED_CELL",
    "VACANT_CELL",
    "STATS_LINE_PATTERN",
    "TREND_CSV_HEADER",
    # process
    "ProcessStats",
]
