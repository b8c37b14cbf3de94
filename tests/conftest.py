"""Shared test fixtures for solvewatch."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from solvewatch.config import WatchConfig
from solvewatch.core.source import SnapshotSource
from solvewatch.core.watcher import FatalObserverError

SAMPLE_BOARD: tuple[str, ...] = ("##AB", "#.AB", "CC..")
SAMPLE_STATS = "120: 3 / 45 / 67"
SAMPLE_METRIC = "1.0234"
CSV_HEADER = "steps,elapsed,dequeues,queue-size,queue-growth-rate,solutions,depth,avg-steps-per-second"
CSV_ROW = "1000,12,7,45,1.02,3,9,250.5"


class SyntheticNotifier:
    """In-memory ``ChangeNotifier`` driven explicitly by tests."""

    def __init__(self, start_error: Exception | None = None) -> None:
        self.start_error = start_error
        self.callback: Callable[[], None] | None = None
        self.on_error: Callable[[BaseException], None] | None = None
        self.started = False
        self.stopped = False

    def on_change(
        self,
        callback: Callable[[], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        if self.start_error is not None:
            raise self.start_error
        self.callback = callback
        self.on_error = on_error
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def fire(self) -> None:
        assert self.callback is not None, "notifier was never started"
        self.callback()

    def fail(self, exc: BaseException | None = None) -> None:
        assert self.on_error is not None, "notifier was never started"
        self.on_error(exc or FatalObserverError("observer died"))


# ---------------------------------------------------------------------------
# Snapshot text factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_snapshot_text() -> Callable[..., str]:
    """Factory fixture: build snapshot file text with sensible defaults."""

    def _factory(
        board: Sequence[str] = SAMPLE_BOARD,
        stats: str = SAMPLE_STATS,
        metric: str = SAMPLE_METRIC,
    ) -> str:
        return "\n".join([*board, "", stats, metric]) + "\n"

    return _factory


@pytest.fixture
def snapshot_text(make_snapshot_text: Callable[..., str]) -> str:
    """Convenience: a ready-made valid snapshot file body."""
    return make_snapshot_text()


# ---------------------------------------------------------------------------
# On-disk solver output
# ---------------------------------------------------------------------------


@pytest.fixture
def log_dir(tmp_path: Path, snapshot_text: str) -> Path:
    """A solver output directory with a valid snapshot and a stats CSV."""
    (tmp_path / "snapshot-treequence.txt").write_text(snapshot_text, encoding="utf-8")
    (tmp_path / "stats-treequence.csv").write_text(
        f"{CSV_HEADER}\n{CSV_ROW}\n", encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def watch_config(log_dir: Path) -> WatchConfig:
    """Config pointing at the temporary solver output directory."""
    return WatchConfig(log_dir=log_dir)


@pytest.fixture
def source(watch_config: WatchConfig) -> SnapshotSource:
    return SnapshotSource(watch_config.snapshot_path, watch_config.stats_path)


@pytest.fixture
def write_snapshot(watch_config: WatchConfig) -> Callable[[str], None]:
    """Overwrite the snapshot file with raw text."""

    def _write(text: str) -> None:
        watch_config.snapshot_path.write_text(text, encoding="utf-8")

    return _write


@pytest.fixture
def notifier() -> SyntheticNotifier:
    return SyntheticNotifier()


@pytest.fixture
def make_notifier() -> Callable[..., SyntheticNotifier]:
    """Factory fixture: a notifier that optionally fails to start."""

    def _factory(start_error: Exception | None = None) -> SyntheticNotifier:
        return SyntheticNotifier(start_error=start_error)

    return _factory
