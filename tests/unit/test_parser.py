"""Tests for the snapshot parser: grammar, validation and truncation."""

from __future__ import annotations

import pytest

from solvewatch.core.parser import MIN_SNAPSHOT_CHARS, MalformedSnapshot, parse_snapshot
from solvewatch.models.snapshot import ProgressStats, Snapshot


class TestParseValid:
    def test_parses_board_stats_and_metric(self, snapshot_text):
        snap = parse_snapshot(snapshot_text)
        assert snap.board == ("##AB", "#.AB", "CC..")
        assert snap.stats == "120: 3 / 45 / 67"
        assert snap.metric == pytest.approx(1.0234)
        assert snap.csv_stats is None

    @pytest.mark.parametrize(
        "board",
        [
            ("A.",),
            ("abc", "def"),
            ("#" * 10, "." * 10, "Q" * 10, "x" * 10),
        ],
    )
    def test_round_trips_board_shape(self, make_snapshot_text, board):
        snap = parse_snapshot(make_snapshot_text(board=board))
        assert snap.height == len(board)
        assert snap.width == len(board[0])
        assert snap.board == tuple(board)

    def test_csv_stats_is_carried_through(self, snapshot_text):
        snap = parse_snapshot(snapshot_text, csv_stats="1,2,3")
        assert snap.csv_stats == "1,2,3"

    def test_flexible_stats_spacing(self, make_snapshot_text):
        snap = parse_snapshot(make_snapshot_text(stats="5:1/2/3"))
        assert snap.progress == ProgressStats(
            total_steps=5, steps_since_dequeue=1, queue_size=2, total_dequeues=3
        )

    def test_trailing_whitespace_and_extra_lines_ignored(self, snapshot_text):
        snap = parse_snapshot(snapshot_text + "trailing junk\n\n   \n")
        assert snap == parse_snapshot(snapshot_text)

    def test_windows_line_endings(self, snapshot_text):
        snap = parse_snapshot(snapshot_text.replace("\n", "\r\n"))
        assert snap == parse_snapshot(snapshot_text)

    def test_integer_and_negative_metric(self, make_snapshot_text):
        assert parse_snapshot(make_snapshot_text(metric="1")).metric == 1.0
        assert parse_snapshot(make_snapshot_text(metric="-0.5")).metric == -0.5

    def test_returns_frozen_snapshot(self, snapshot_text):
        snap = parse_snapshot(snapshot_text)
        assert isinstance(snap, Snapshot)
        with pytest.raises(Exception):
            snap.stats = "changed"  # type: ignore[misc]

    def test_minimal_file_is_accepted(self):
        text = "x\n\n0:0/0/0\n1"
        assert len(text) == MIN_SNAPSHOT_CHARS
        snap = parse_snapshot(text)
        assert snap.board == ("x",)


class TestParseInvalid:
    @pytest.mark.parametrize("text", ["", "   \n\n", "A.\n\n1"])
    def test_empty_or_too_short(self, text):
        with pytest.raises(MalformedSnapshot, match="too short"):
            parse_snapshot(text)

    def test_empty_board_section(self):
        with pytest.raises(MalformedSnapshot, match="Board section is empty"):
            parse_snapshot("\n\n120: 3 / 45 / 67\n1.0\n")

    def test_inconsistent_row_lengths(self, make_snapshot_text):
        with pytest.raises(MalformedSnapshot, match="row 1"):
            parse_snapshot(make_snapshot_text(board=("ABC", "AB", "ABC")))

    @pytest.mark.parametrize(
        "stats",
        ["120 3 / 45 / 67", "120: 3 / 45", "a: 1 / 2 / 3", "120: 3 / 45 / 67 extra"],
    )
    def test_bad_stats_shape(self, make_snapshot_text, stats):
        with pytest.raises(MalformedSnapshot, match="Stats line"):
            parse_snapshot(make_snapshot_text(stats=stats))

    @pytest.mark.parametrize("metric", ["abc", "1.2.3", "nan", "inf"])
    def test_bad_metric(self, make_snapshot_text, metric):
        with pytest.raises(MalformedSnapshot, match="Metric"):
            parse_snapshot(make_snapshot_text(metric=metric))

    def test_blank_metric_line(self, snapshot_text):
        lines = snapshot_text.rstrip().split("\n")
        lines[-1] = "   "
        text = "\n".join(lines) + "\nignored-tail-line-long-enough\n"
        with pytest.raises(MalformedSnapshot, match="Missing metric"):
            parse_snapshot(text)

    def test_two_blank_separators(self, snapshot_text):
        text = snapshot_text.replace("\n\n", "\n\n\n", 1)
        with pytest.raises(MalformedSnapshot, match="Missing stats"):
            parse_snapshot(text)


class TestTruncation:
    """A torn write must never yield a partial snapshot."""

    BOARD = ("ABCDEFGH", "ABCDEFGH", "ABCDEFGH", "ABCDEFGH")

    def _full(self, make_snapshot_text) -> str:
        return make_snapshot_text(board=self.BOARD)

    def test_after_board(self):
        text = "\n".join(self.BOARD) + "\n"
        with pytest.raises(MalformedSnapshot):
            parse_snapshot(text)

    def test_after_separator(self):
        text = "\n".join(self.BOARD) + "\n\n"
        with pytest.raises(MalformedSnapshot):
            parse_snapshot(text)

    def test_after_stats(self):
        text = "\n".join(self.BOARD) + "\n\n120: 3 / 45 / 67\n"
        with pytest.raises(MalformedSnapshot, match="Truncated"):
            parse_snapshot(text)

    def test_mid_board_row(self, make_snapshot_text):
        full = self._full(make_snapshot_text)
        cut = full[: len(self.BOARD[0]) * 2 + 5]
        with pytest.raises(MalformedSnapshot):
            parse_snapshot(cut)

    def test_every_prefix_fails_or_is_complete(self, make_snapshot_text):
        full = self._full(make_snapshot_text)
        expected = parse_snapshot(full)
        for cut in range(len(full)):
            try:
                snap = parse_snapshot(full[:cut])
            except MalformedSnapshot:
                continue
            # A prefix parses only once it reaches the metric line, by
            # which point board and stats are complete.
            assert snap.board == expected.board
            assert snap.stats == expected.stats
