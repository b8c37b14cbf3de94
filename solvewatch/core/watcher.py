"""SnapshotWatcher: turns file-change signals into a semantic change stream.

A change signal only means "the file was touched".  The watcher re-reads
and re-parses, then compares the parsed ``Snapshot`` by value against the
last accepted one.  Two cases collapse to a no-op:

1. The file was touched but the content is logically unchanged
   (including the same write observed twice).
2. The file was caught mid-rewrite and does not parse (torn write).

Only genuine changes reach subscribers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from solvewatch.core.parser import MalformedSnapshot
from solvewatch.core.source import ResourceUnavailable, SnapshotSource
from solvewatch.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[Snapshot], None]


class FatalObserverError(RuntimeError):
    """Raised when the file-change notification mechanism itself fails."""


@runtime_checkable
class ChangeNotifier(Protocol):
    """Capability that fires a callback whenever the watched file changes."""

    def on_change(
        self,
        callback: Callable[[], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        """Install *callback* and start delivering change signals.

        Observer-level failures after start are reported via *on_error*.
        Failure to start raises ``FatalObserverError``.
        """
        ...

    def stop(self) -> None:
        """Stop delivering signals and release OS resources."""
        ...


NotifierFactory = Callable[[], ChangeNotifier]


class WatchContext:
    """Mutable watch state, one instance per watcher.

    Attributes
    ----------
    is_watching:
        Whether a notifier is currently installed.
    last_valid_snapshot:
        The last accepted snapshot; the baseline for change detection.
    """

    def __init__(self) -> None:
        self.is_watching: bool = False
        self.last_valid_snapshot: Snapshot | None = None

    def clear(self) -> None:
        self.is_watching = False
        self.last_valid_snapshot = None


class SnapshotWatcher:
    """Bridges file-change notifications to accepted ``Snapshot`` events.

    Parameters
    ----------
    source:
        Reads and parses the snapshot file.
    notifier_factory:
        Builds a fresh ``ChangeNotifier`` on every ``start_watching()``.
    context:
        Watch state.  A new ``WatchContext`` is created if not provided.

    Usage
    -----
    >>> watcher = SnapshotWatcher(source, lambda: WatchdogNotifier(path))
    >>> watcher.subscribe(heatmap_feed)
    >>> watcher.start_watching()
    """

    def __init__(
        self,
        source: SnapshotSource,
        notifier_factory: NotifierFactory,
        context: WatchContext | None = None,
    ) -> None:
        self._source = source
        self._notifier_factory = notifier_factory
        self._context = context or WatchContext()
        self._notifier: ChangeNotifier | None = None
        self._subscribers: list[SnapshotCallback] = []
        self.last_error: BaseException | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def context(self) -> WatchContext:
        return self._context

    @property
    def is_watching(self) -> bool:
        return self._context.is_watching

    @property
    def last_valid_snapshot(self) -> Snapshot | None:
        return self._context.last_valid_snapshot

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, callback: SnapshotCallback) -> None:
        """Register *callback* for accepted changes.

        Callbacks run synchronously in registration order.  Registering
        the same callback twice is ignored.
        """
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: SnapshotCallback) -> None:
        """Remove *callback*.  Safe to call from inside a callback."""
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_watching(self) -> None:
        """Seed the baseline and install the notifier.

        Idempotent while already watching.  The seed read is the only
        blocking read; a failed seed leaves the baseline empty so the
        first notification is accepted unconditionally.

        Raises
        ------
        FatalObserverError
            If the notifier cannot be created or installed.  Any other
            exception from the factory or ``on_change`` is wrapped.
        """
        if self._context.is_watching:
            return

        self._context.is_watching = True
        self.last_error = None
        self._context.last_valid_snapshot = self._seed()

        logger.info("Starting to watch snapshot file: %s", self._source.snapshot_path)
        try:
            notifier = self._notifier_factory()
            notifier.on_change(self.notify, self._on_observer_error)
        except Exception as exc:
            logger.error("Could not install snapshot observer: %s", exc)
            error = (
                exc
                if isinstance(exc, FatalObserverError)
                else FatalObserverError(f"Could not install snapshot observer: {exc}")
            )
            self.last_error = error
            self._context.clear()
            if error is exc:
                raise
            raise error from exc
        self._notifier = notifier

    def stop_watching(self) -> None:
        """Remove the notifier.  The baseline is kept."""
        notifier, self._notifier = self._notifier, None
        self._context.is_watching = False
        if notifier is not None:
            notifier.stop()
            logger.info("Stopped watching snapshot file: %s", self._source.snapshot_path)

    def _seed(self) -> Snapshot | None:
        try:
            return self._source.load()
        except (MalformedSnapshot, ResourceUnavailable) as exc:
            logger.warning("No valid baseline snapshot at start-up: %s", exc)
            return None

    def _on_observer_error(self, exc: BaseException) -> None:
        logger.error("Snapshot file observer failed, watching stopped: %s", exc)
        self.last_error = (
            exc
            if isinstance(exc, FatalObserverError)
            else FatalObserverError(str(exc))
        )
        notifier, self._notifier = self._notifier, None
        self._context.clear()
        if notifier is not None:
            notifier.stop()

    # ------------------------------------------------------------------
    # Change handling
    # ------------------------------------------------------------------

    def notify(self) -> Snapshot | None:
        """Handle one file-change signal.

        Returns the newly accepted snapshot, or ``None`` when the signal
        was discarded (torn write, unreadable file, or no logical change).
        """
        try:
            snapshot = self._source.load()
        except MalformedSnapshot as exc:
            logger.debug("Discarding unparseable snapshot (torn write?): %s", exc)
            return None
        except ResourceUnavailable as exc:
            logger.warning("Snapshot file unavailable: %s", exc)
            return None

        if snapshot == self._context.last_valid_snapshot:
            return None

        self._context.last_valid_snapshot = snapshot
        self._emit(snapshot)
        return snapshot

    def _emit(self, snapshot: Snapshot) -> None:
        # Iterate over a copy so callbacks may unsubscribe themselves.
        for callback in tuple(self._subscribers):
            try:
                callback(snapshot)
            except Exception:  # noqa: BLE001
                logger.exception("Snapshot subscriber %r failed", callback)
