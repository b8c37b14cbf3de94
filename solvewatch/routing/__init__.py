"""Outbound delivery of accepted snapshots."""

from solvewatch.routing.broadcaster import SnapshotBroadcaster, SnapshotListener, format_sse

__all__ = ["SnapshotBroadcaster", "SnapshotListener", "format_sse"]
