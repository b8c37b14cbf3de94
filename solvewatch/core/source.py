"""SnapshotSource: reads the solver's backing files.

The source only reads.  The snapshot file and the stats CSV are owned by
the external solver process.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from solvewatch.core.parser import parse_snapshot
from solvewatch.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

# Bytes read per step when scanning backwards for the last CSV row.
_TAIL_CHUNK = 4096


class ResourceUnavailable(RuntimeError):
    """Raised when a backing artifact cannot be read."""


def read_last_line(path: Path) -> str | None:
    """Return the last non-blank line of *path*, or ``None`` if there is none.

    Reads backwards from the end of the file so the cost does not grow
    with the length of an append-only log.

    Raises
    ------
    ResourceUnavailable
        If the file cannot be opened or read.
    """
    try:
        with open(path, "rb") as fh:
            fh.seek(0, os.SEEK_END)
            end = fh.tell()
            buf = b""
            pos = end
            while pos > 0:
                step = min(_TAIL_CHUNK, pos)
                pos -= step
                fh.seek(pos)
                buf = fh.read(step) + buf
                stripped = buf.rstrip()
                if b"\n" in stripped:
                    break
    except OSError as exc:
        raise ResourceUnavailable(f"Cannot read {path}: {exc}") from exc

    lines = buf.decode("utf-8", errors="replace").rstrip().splitlines()
    if not lines:
        return None
    last = lines[-1].strip()
    return last or None


class SnapshotSource:
    """Reads and parses the current snapshot from disk.

    Parameters
    ----------
    snapshot_path:
        The text file the solver rewrites periodically.
    stats_path:
        The append-only stats CSV.  Optional; when absent or unreadable
        the snapshot's ``csv_stats`` is ``None``.
    """

    def __init__(self, snapshot_path: Path, stats_path: Path | None = None) -> None:
        self.snapshot_path = Path(snapshot_path)
        self.stats_path = Path(stats_path) if stats_path is not None else None

    def read_text(self) -> str:
        """Return the raw snapshot text.

        Raises
        ------
        ResourceUnavailable
            If the snapshot file cannot be read.
        """
        try:
            return self.snapshot_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ResourceUnavailable(
                f"Cannot read snapshot {self.snapshot_path}: {exc}"
            ) from exc

    def read_csv_tail(self) -> str | None:
        """Return the last stats CSV row, or ``None`` when unavailable."""
        if self.stats_path is None:
            return None
        try:
            return read_last_line(self.stats_path)
        except ResourceUnavailable as exc:
            logger.debug("Stats CSV unavailable: %s", exc)
            return None

    def load(self) -> Snapshot:
        """Read and parse the current snapshot.

        Raises
        ------
        ResourceUnavailable
            If the snapshot file cannot be read.
        MalformedSnapshot
            If its contents violate the grammar.
        """
        return parse_snapshot(self.read_text(), csv_stats=self.read_csv_tail())
