"""Snapshot parser: strict validation of the solver's snapshot file.

The solver rewrites its snapshot file in place, so a reader may see a
truncated or interleaved write.  Any structural anomaly is a parse
failure; a partially-populated ``Snapshot`` is never returned.

File layout::

    <board row>
    <board row>
    ...
    <blank line>
    <total-steps>: <steps-since-dequeue> / <queue-size> / <total-dequeues>
    <metric>
"""

from __future__ import annotations

import math

from solvewatch.models.snapshot import STATS_LINE_PATTERN, Snapshot

# Length of the smallest grammatical file: "x\n\n0:0/0/0\n1".
MIN_SNAPSHOT_CHARS = 12


class MalformedSnapshot(ValueError):
    """Raised when snapshot text violates the file grammar."""


def parse_snapshot(raw_text: str, csv_stats: str | None = None) -> Snapshot:
    """Parse and validate raw snapshot text.

    Parameters
    ----------
    raw_text:
        Full contents of the snapshot file.
    csv_stats:
        Trailing row of the stats CSV, read separately by the caller.
        Optional; carried through verbatim.

    Raises
    ------
    MalformedSnapshot
        On any grammar violation, including truncation.
    """
    text = raw_text.rstrip()
    if len(text) < MIN_SNAPSHOT_CHARS:
        raise MalformedSnapshot(
            f"Snapshot too short: {len(text)} chars (minimum {MIN_SNAPSHOT_CHARS})"
        )

    lines = text.splitlines()

    board: list[str] = []
    i = 0
    while i < len(lines) and lines[i].strip() != "":
        board.append(lines[i])
        i += 1

    if not board:
        raise MalformedSnapshot("Board section is empty")

    width = len(board[0])
    for row_no, row in enumerate(board):
        if len(row) != width:
            raise MalformedSnapshot(
                f"Board row {row_no} has length {len(row)}, expected {width}"
            )

    # board rows + separator + stats + metric
    if len(lines) < len(board) + 3:
        raise MalformedSnapshot(
            f"Truncated snapshot: {len(lines)} lines for a {len(board)}-row board"
        )

    # Skip exactly one blank separator
    i += 1
    stats = lines[i].strip()
    if not stats:
        raise MalformedSnapshot("Missing stats line after board")
    if STATS_LINE_PATTERN.fullmatch(stats) is None:
        raise MalformedSnapshot(f"Stats line has unexpected shape: {stats!r}")

    metric_line = lines[i + 1].strip()
    if not metric_line:
        raise MalformedSnapshot("Missing metric line after stats")
    try:
        metric = float(metric_line)
    except ValueError as exc:
        raise MalformedSnapshot(f"Metric is not a number: {metric_line!r}") from exc
    if not math.isfinite(metric):
        raise MalformedSnapshot(f"Metric is not finite: {metric_line!r}")

    return Snapshot(
        board=tuple(board),
        stats=stats,
        metric=metric,
        csv_stats=csv_stats,
    )
