"""SnapshotBroadcaster: hands accepted snapshots to any number of listeners.

Latest-value semantics: a slow listener skips intermediate snapshots and
always resumes at the newest one, so no per-listener backlog can build
up.  Publishing happens on the watcher's thread; listeners typically
block in HTTP handler threads, so the channel is guarded by a
``threading.Condition``.
"""

from __future__ import annotations

import json
import logging
import threading

from solvewatch.models.snapshot import Snapshot

logger = logging.getLogger(__name__)


def format_sse(snapshot: Snapshot, event: str | None = None) -> bytes:
    """Frame a snapshot as one server-sent event."""
    payload = json.dumps(snapshot.to_wire(), separators=(",", ":"))
    prefix = f"event: {event}\n" if event else ""
    return f"{prefix}data: {payload}\n\n".encode("utf-8")


class SnapshotBroadcaster:
    """Thread-safe latest-value channel with multi-listener fan-out.

    Usage
    -----
    >>> broadcaster = SnapshotBroadcaster()
    >>> watcher.subscribe(broadcaster.publish)
    >>> listener = broadcaster.listen()
    >>> snapshot = listener.next(timeout=15.0)
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._latest: Snapshot | None = None
        self._version = 0
        self._closed = False
        self._listener_count = 0

    @property
    def latest(self) -> Snapshot | None:
        with self._cond:
            return self._latest

    @property
    def listener_count(self) -> int:
        with self._cond:
            return self._listener_count

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def publish(self, snapshot: Snapshot) -> None:
        """Make *snapshot* the newest value and wake all listeners."""
        with self._cond:
            if self._closed:
                return
            self._latest = snapshot
            self._version += 1
            self._cond.notify_all()
            count = self._listener_count
        logger.debug("Broadcast snapshot v%d to %d listener(s)", self._version, count)

    def close(self) -> None:
        """Wake all listeners with end-of-stream."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def listen(self, *, include_current: bool = True) -> SnapshotListener:
        """Open a listener.

        With *include_current*, the first ``next()`` returns the current
        snapshot immediately (if any) so a new observer is not left blank
        until the next change.
        """
        with self._cond:
            self._listener_count += 1
            seen = 0 if include_current else self._version
        return SnapshotListener(self, seen)

    def _release(self) -> None:
        with self._cond:
            self._listener_count -= 1


class SnapshotListener:
    """One consumer's cursor into a ``SnapshotBroadcaster``."""

    def __init__(self, parent: SnapshotBroadcaster, seen: int) -> None:
        self._parent = parent
        self._seen = seen
        self._open = True

    def next(self, timeout: float | None = None) -> Snapshot | None:
        """Block until a snapshot newer than the last one seen is available.

        Returns ``None`` on timeout or when the broadcaster is closed.
        """
        p = self._parent
        with p._cond:
            ok = p._cond.wait_for(
                lambda: p._closed or (p._version > self._seen and p._latest is not None),
                timeout,
            )
            if not ok or p._closed:
                return None
            self._seen = p._version
            return p._latest

    def close(self) -> None:
        if self._open:
            self._open = False
            self._parent._release()

    def __enter__(self) -> SnapshotListener:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
