"""MonitorSession: wires the watcher to the heatmap and the broadcaster.

Every accepted snapshot flows, in order, to:

1. ``StabilityHeatmap.update_board`` (age tracking)
2. ``SnapshotBroadcaster.publish`` (push stream)

Both run synchronously inside ``SnapshotWatcher.notify``, so one heatmap
update always completes before the next snapshot is processed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from solvewatch.config import WatchConfig
from solvewatch.core.heatmap import StabilityHeatmap
from solvewatch.core.notifier import WatchdogNotifier
from solvewatch.core.process_probe import find_solver_process
from solvewatch.core.source import SnapshotSource
from solvewatch.core.watcher import NotifierFactory, SnapshotWatcher
from solvewatch.models.snapshot import Snapshot
from solvewatch.monitor.projection import MonitorView
from solvewatch.routing.broadcaster import SnapshotBroadcaster

logger = logging.getLogger(__name__)


class MonitorSession:
    """Composition root for one monitored solver run.

    Parameters
    ----------
    config:
        Paths and observer settings.
    notifier_factory:
        Override the filesystem notifier (tests pass a synthetic one).
    probe_process:
        Whether ``view()`` queries the solver process.  Disable in tests
        and on hosts where the solver runs elsewhere.
    """

    def __init__(
        self,
        config: WatchConfig,
        *,
        notifier_factory: NotifierFactory | None = None,
        probe_process: bool = True,
    ) -> None:
        self.config = config
        self.source = SnapshotSource(config.snapshot_path, config.stats_path)
        self.heatmap = StabilityHeatmap()
        self.broadcaster = SnapshotBroadcaster()
        self.watcher = SnapshotWatcher(
            self.source,
            notifier_factory or self._default_notifier,
        )
        self._probe_process = probe_process
        self._last_fed: Snapshot | None = None
        self.watcher.subscribe(self._on_snapshot)

    def _default_notifier(self) -> WatchdogNotifier:
        return WatchdogNotifier(
            Path(self.config.snapshot_path),
            polling=self.config.use_polling,
            poll_interval=self.config.poll_interval_seconds,
        )

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        self._last_fed = snapshot
        self.heatmap.update_board(snapshot.board)
        self.broadcaster.publish(snapshot)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Seed from disk and begin watching.

        The seed snapshot does not pass through ``notify``, so it is fed
        to the heatmap and broadcaster here as the first observation.
        On a restart the seed is skipped when it equals the last snapshot
        already fed, so an unchanged file neither ages the heatmap nor
        republishes.
        """
        was_watching = self.watcher.is_watching
        self.watcher.start_watching()
        seed = self.watcher.last_valid_snapshot
        if not was_watching and seed is not None and seed != self._last_fed:
            self._on_snapshot(seed)

    def stop(self) -> None:
        self.watcher.stop_watching()
        self.broadcaster.close()

    def __enter__(self) -> MonitorSession:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def view(self) -> MonitorView:
        """Point-in-time view for renderers and HTTP handlers."""
        process = (
            find_solver_process(self.config.solver_process_name)
            if self._probe_process
            else None
        )
        return MonitorView(
            snapshot=self.watcher.last_valid_snapshot,
            heatmap_stats=self.heatmap.get_stats(),
            percentiles=self.heatmap.get_percentile_matrix(),
            process=process,
            is_watching=self.watcher.is_watching,
            observer_error=str(self.watcher.last_error) if self.watcher.last_error else None,
        )
