"""Tests for trend sampling over the stats CSV."""

from __future__ import annotations

from solvewatch.core.trends import render_trend_csv, sample_trend_points
from solvewatch.models.snapshot import TREND_CSV_HEADER, TrendPoint

CSV_HEADER = "steps,elapsed,dequeues,queue-size,queue-growth-rate,solutions,depth,avg-steps-per-second"


def _write_rows(path, count: int) -> None:
    rows = [CSV_HEADER]
    rows.extend(f"{i * 100},1,{i},{i * 2},0.5,{i // 10},4,99.5" for i in range(1, count + 1))
    path.write_text("\n".join(rows) + "\n", encoding="utf-8")


class TestSampleTrendPoints:
    def test_small_file_keeps_every_data_row(self, tmp_path):
        path = tmp_path / "stats.csv"
        _write_rows(path, 5)
        points = sample_trend_points(path, max_points=1000)
        assert [p.steps for p in points] == [100.0, 200.0, 300.0, 400.0, 500.0]

    def test_columns_are_mapped(self, tmp_path):
        path = tmp_path / "stats.csv"
        path.write_text(f"{CSV_HEADER}\n1000,12,7,45,1.02,3,9,250.5\n", encoding="utf-8")
        (point,) = sample_trend_points(path)
        assert point == TrendPoint(
            steps=1000, queue_size=45, queue_growth_rate=1.02, solutions=3, steps_per_second=250.5
        )

    def test_downsamples_large_file(self, tmp_path):
        path = tmp_path / "stats.csv"
        _write_rows(path, 999)  # 1000 lines including header
        points = sample_trend_points(path, max_points=100)
        # interval 10: lines 10, 20, ... 1000 are kept
        assert len(points) == 100
        assert points[0].steps == 900.0
        assert points[-1].steps == 99900.0

    def test_skips_malformed_rows(self, tmp_path):
        path = tmp_path / "stats.csv"
        path.write_text(
            f"{CSV_HEADER}\n1,2,3\n10,0,0,5,0.1,0,0,7\nx,y,z,a,b,c,d,e\n", encoding="utf-8"
        )
        points = sample_trend_points(path)
        assert len(points) == 1
        assert points[0].queue_size == 5.0

    def test_missing_file_is_empty(self, tmp_path):
        assert sample_trend_points(tmp_path / "missing.csv") == []

    def test_empty_file_is_empty(self, tmp_path):
        path = tmp_path / "stats.csv"
        path.write_text("", encoding="utf-8")
        assert sample_trend_points(path) == []

    def test_zero_max_points_keeps_only_last_line(self, tmp_path):
        path = tmp_path / "stats.csv"
        _write_rows(path, 3)
        points = sample_trend_points(path, max_points=0)
        assert [p.steps for p in points] == [300.0]


class TestRenderTrendCsv:
    def test_header_only_when_empty(self):
        assert render_trend_csv([]) == TREND_CSV_HEADER + "\n"

    def test_integral_values_render_without_fraction(self):
        point = TrendPoint(
            steps=1000, queue_size=45, queue_growth_rate=1.02, solutions=3, steps_per_second=250.5
        )
        assert render_trend_csv([point]).splitlines() == [
            TREND_CSV_HEADER,
            "1000,45,1.02,3,250.5",
        ]
