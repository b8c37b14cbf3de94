"""WatchdogNotifier: filesystem-backed ``ChangeNotifier``.

The solver may replace its snapshot file rather than rewrite it in place,
so the notifier watches the parent directory and filters events down to
the target path.  watchdog dispatches events serially on a single
thread, which keeps ``SnapshotWatcher.notify`` calls from overlapping.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver
from watchdog.observers.polling import PollingObserver

from solvewatch.core.watcher import FatalObserverError

logger = logging.getLogger(__name__)


class _SnapshotEventHandler(FileSystemEventHandler):
    """Forwards events that touch one file; reports loss of its directory."""

    def __init__(
        self,
        target: Path,
        callback: Callable[[], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        super().__init__()
        self._target = target
        self._watch_dir = target.parent
        self._callback = callback
        self._on_error = on_error

    @staticmethod
    def _resolve(raw_path: str | bytes) -> Path | None:
        if not raw_path:
            return None
        if isinstance(raw_path, bytes):
            raw_path = raw_path.decode("utf-8", errors="replace")
        return Path(raw_path).resolve()

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            gone = event.event_type in ("deleted", "moved")
            if gone and self._resolve(event.src_path) == self._watch_dir:
                self._on_error(
                    FatalObserverError(f"Watched directory went away: {event.src_path}")
                )
            return

        if event.event_type not in ("modified", "created", "moved", "closed"):
            return
        touched = (
            self._resolve(event.src_path),
            self._resolve(getattr(event, "dest_path", "")),
        )
        if self._target in touched:
            self._callback()


class WatchdogNotifier:
    """Fires a callback whenever *path* is written, created or replaced.

    Parameters
    ----------
    path:
        The file to watch.
    polling:
        Use ``PollingObserver`` instead of the native OS backend.  Needed
        on network filesystems where native events are not delivered.
    poll_interval:
        Seconds between polls when *polling* is set.
    """

    def __init__(
        self,
        path: Path,
        *,
        polling: bool = False,
        poll_interval: float = 1.0,
    ) -> None:
        self._path = Path(path).resolve()
        self._polling = polling
        self._poll_interval = poll_interval
        self._observer: BaseObserver | None = None

    def on_change(
        self,
        callback: Callable[[], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        if self._observer is not None:
            return

        watch_dir = self._path.parent
        if not watch_dir.is_dir():
            raise FatalObserverError(f"Directory does not exist: {watch_dir}")

        observer = (
            PollingObserver(timeout=self._poll_interval) if self._polling else Observer()
        )
        handler = _SnapshotEventHandler(self._path, callback, on_error)
        try:
            observer.schedule(handler, str(watch_dir), recursive=False)
            observer.start()
        except OSError as exc:
            raise FatalObserverError(f"Cannot observe {watch_dir}: {exc}") from exc

        self._observer = observer
        logger.debug(
            "Observer started on %s (%s)",
            watch_dir,
            "polling" if self._polling else "native",
        )

    def stop(self) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        try:
            observer.join(timeout=5.0)
        except RuntimeError:
            # Raised when stop() is called from the observer's own thread.
            pass
