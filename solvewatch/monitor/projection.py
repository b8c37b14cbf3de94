"""MonitorView: a frozen, point-in-time view of a monitored solver run.

The view holds nothing the session does not already know.  It is
computed fresh on every ``MonitorSession.view()`` call and never stored.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from solvewatch.core.heatmap import HeatmapStats
from solvewatch.models.process import ProcessStats
from solvewatch.models.snapshot import Snapshot


class MonitorView(BaseModel):
    """Everything a renderer needs for one frame."""

    model_config = ConfigDict(frozen=True)

    snapshot: Snapshot | None = None
    heatmap_stats: HeatmapStats = HeatmapStats()
    percentiles: list[list[float]] = []
    process: ProcessStats | None = None
    is_watching: bool = False
    observer_error: str | None = None
    taken_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
