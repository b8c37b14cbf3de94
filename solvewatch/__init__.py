"""solvewatch: live monitor for a long-running combinatorial solver.

Tails the snapshot file the solver rewrites, validates each rewrite,
pushes genuine changes to observers and tracks how long every board
cell has stayed unchanged (the stability heatmap).
"""

__version__ = "0.1.0"
__description__ = "Snapshot watcher and stability heatmap for long-running solvers"

from solvewatch.core.heatmap import StabilityHeatmap
from solvewatch.core.parser import MalformedSnapshot, parse_snapshot
from solvewatch.core.watcher import SnapshotWatcher
from solvewatch.models.snapshot import Snapshot
from solvewatch.monitor.session import MonitorSession

__all__ = [
    "MalformedSnapshot",
    "MonitorSession",
    "Snapshot",
    "SnapshotWatcher",
    "StabilityHeatmap",
    "parse_snapshot",
    "__version__",
]
