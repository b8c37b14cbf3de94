"""Trend sampling over the solver's append-only stats CSV.

The log grows without bound, so trend views take every Nth row to keep
roughly ``max_points`` samples regardless of file length.
"""

from __future__ import annotations

import logging
from pathlib import Path

from solvewatch.models.snapshot import TREND_CSV_HEADER, TrendPoint

logger = logging.getLogger(__name__)


def _count_lines(path: Path) -> int:
    with open(path, "rb") as fh:
        return sum(1 for _ in fh)


def sample_trend_points(path: Path, max_points: int = 1000) -> list[TrendPoint]:
    """Sample at most about *max_points* rows from the stats CSV.

    The sampling interval is ``max(1, total_lines // max_points)``; a row
    is kept when its 1-based line number is divisible by the interval.
    Header rows and rows that fail to parse are skipped.  A missing or
    unreadable file yields an empty list.
    """
    try:
        total = _count_lines(path)
        if total == 0:
            return []
        interval = max(1, total // max(1, max_points))
        logger.debug(
            "Sampling %s: %d lines, every %d line(s), ~%d points",
            path,
            total,
            interval,
            total // interval,
        )

        points: list[TrendPoint] = []
        with open(path, encoding="utf-8", errors="replace") as fh:
            for line_no, line in enumerate(fh, start=1):
                if line_no % interval:
                    continue
                point = TrendPoint.from_csv_row(line)
                if point is not None:
                    points.append(point)
        return points
    except OSError as exc:
        logger.warning("Cannot read trend data from %s: %s", path, exc)
        return []


def render_trend_csv(points: list[TrendPoint]) -> str:
    """Render sampled points as CSV text with a header row."""
    lines = [TREND_CSV_HEADER]
    lines.extend(point.to_csv_row() for point in points)
    return "\n".join(lines) + "\n"
