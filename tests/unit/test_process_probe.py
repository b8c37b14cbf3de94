"""Tests for the solver process probe and its formatting helpers."""

from __future__ import annotations

import os

import psutil
import pytest

from solvewatch.core.process_probe import find_solver_process, format_bytes, format_uptime


class TestFindSolverProcess:
    def test_unknown_name_is_none(self):
        assert find_solver_process("no-such-solver-process-xyz") is None

    def test_finds_current_process(self):
        me = psutil.Process(os.getpid())
        stats = find_solver_process(me.name())
        assert stats is not None
        assert stats.rss_bytes > 0
        assert stats.uptime_seconds >= 0.0

    def test_vanishing_process_is_skipped(self, monkeypatch):
        class Vanishing:
            pid = 4242
            info = {"name": "solve_file", "cmdline": []}

            def oneshot(self):
                raise psutil.NoSuchProcess(self.pid)

        monkeypatch.setattr(psutil, "process_iter", lambda attrs: iter([Vanishing()]))
        assert find_solver_process("solve_file") is None

    def test_matches_cmdline_basename(self, monkeypatch):
        class Mem:
            rss = 1024

        class Cpu:
            user = 1.5
            system = 0.25

        class Fake:
            pid = 99
            info = {"name": "python3", "cmdline": ["/usr/bin/python3", "/opt/solve_file"]}

            def oneshot(self):
                return self

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def memory_info(self):
                return Mem()

            def cpu_times(self):
                return Cpu()

            def create_time(self):
                return 0.0

        monkeypatch.setattr(psutil, "process_iter", lambda attrs: iter([Fake()]))
        stats = find_solver_process("solve_file")
        assert stats is not None
        assert stats.pid == 99
        assert stats.rss_bytes == 1024
        assert stats.cpu_user_seconds == 1.5


class TestFormatting:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "0 B"),
            (512, "512 B"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5 MB"),
            (3 * 1024**4, "3072 GB"),
        ],
    )
    def test_format_bytes(self, value, expected):
        assert format_bytes(value) == expected

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (5, "5s"),
            (65, "1m 5s"),
            (3725, "1h 2m 5s"),
            (90061.7, "1d 1h 1m 1s"),
        ],
    )
    def test_format_uptime(self, seconds, expected):
        assert format_uptime(seconds) == expected
