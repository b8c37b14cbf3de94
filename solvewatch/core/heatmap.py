"""StabilityHeatmap: tracks how long each board cell has held the same character.

Low ages mark regions the solver is actively reworking; high ages mark
regions that have been stable for a long time.

Age semantics
-------------
- The first board observed is the baseline: every age is 0.
- On each later board, a cell whose character is unchanged ages by 1;
  a cell whose character changed resets to 0.
- Vacant cells (``.``) hold no piece and stay at age 0.
- A change of board dimensions discards all history.
- ``max_age_ever`` is a high-water mark seeded to 1, so normalization
  never divides by zero.
"""

from __future__ import annotations

import logging
import threading
from bisect import bisect_left
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from solvewatch.models.snapshot import VACANT_CELL

logger = logging.getLogger(__name__)


class HeatmapStats(BaseModel):
    """Summary of the current age matrix.

    ``min``, ``max`` and ``average`` are instantaneous; ``max_age_ever``
    is the historical high-water mark.  Serialized with camelCase keys.
    """

    model_config = ConfigDict(frozen=True)

    min: int = 0
    max: int = 0
    average: float = 0.0
    total_cells: int = Field(default=0, serialization_alias="totalCells")
    max_age_ever: int = Field(default=1, serialization_alias="maxAgeEver")


class HeatmapUpdate(BaseModel):
    """What one ``update_board`` call did."""

    model_config = ConfigDict(frozen=True)

    changed_cells: int
    total_cells: int
    is_baseline: bool = False
    full_reset: bool = False

    @property
    def is_duplicate(self) -> bool:
        """No cell changed relative to the previous board."""
        return not self.is_baseline and self.changed_cells == 0


class StabilityHeatmap:
    """Per-cell age tracking over successive boards.

    The heatmap owns its age matrix and a private copy of the previous
    board.  Callers only ever receive copies.

    Updates arrive on the observer thread while renderers and HTTP
    handlers read from their own threads.  Every public method holds
    ``_lock``, reads included, since reads fill the percentile cache.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._previous_board: list[str] | None = None
        self._ages: list[list[int]] = []
        self._width = 0
        self._height = 0
        self._max_age_ever = 1
        self._percentile_cache: list[list[float]] | None = None

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_board(self, board: Sequence[str]) -> HeatmapUpdate:
        """Fold a new board observation into the age matrix.

        Unchanged cells age by 1 and changed cells reset to 0, with one
        exception: a vacant cell (``.``) stays at age 0 even when
        unchanged, since an empty slot holds no piece.  This is what makes
        ``["A."], ["A."], ["AB"]`` yield ``[[1, 0]]`` then ``[[2, 0]]``.
        Blocked cells (``#``) age like pieces.

        The new matrix is built aside and swapped in, so a failed update
        leaves the previous state intact.
        """
        with self._lock:
            return self._update_locked(board)

    def _update_locked(self, board: Sequence[str]) -> HeatmapUpdate:
        height = len(board)
        width = len(board[0]) if height else 0

        if width != self._width or height != self._height:
            self._allocate(width, height)

        rows = list(board)
        previous = self._previous_board
        total = width * height

        if previous is None:
            self._ages = [[0] * width for _ in range(height)]
            self._previous_board = rows
            self._percentile_cache = None
            logger.debug("Heatmap baseline set: %dx%d", height, width)
            return HeatmapUpdate(changed_cells=0, total_cells=total, is_baseline=True)

        had_ages = any(age > 0 for row in self._ages for age in row)
        ages = [list(row) for row in self._ages]
        peak = self._max_age_ever
        changed = 0

        for y in range(height):
            cur_row, prev_row, age_row = rows[y], previous[y], ages[y]
            for x in range(width):
                cell = cur_row[x]
                if cell != prev_row[x]:
                    age_row[x] = 0
                    changed += 1
                elif cell == VACANT_CELL:
                    age_row[x] = 0
                else:
                    age_row[x] += 1
                    if age_row[x] > peak:
                        peak = age_row[x]

        self._ages = ages
        self._max_age_ever = peak
        self._previous_board = rows
        self._percentile_cache = None

        full_reset = had_ages and not any(age for row in ages for age in row)
        if changed == 0:
            logger.debug("Heatmap received a board identical to the previous one")
        elif full_reset:
            logger.info(
                "All ages reset (%d/%d cells changed); the solver likely found a solution",
                changed,
                total,
            )
        else:
            logger.debug("Heatmap update: %d/%d cells changed", changed, total)

        return HeatmapUpdate(changed_cells=changed, total_cells=total, full_reset=full_reset)

    def reset(self) -> None:
        """Discard all history, as if newly constructed."""
        with self._lock:
            self._previous_board = None
            self._ages = []
            self._width = 0
            self._height = 0
            self._max_age_ever = 1
            self._percentile_cache = None

    def _allocate(self, width: int, height: int) -> None:
        if self._previous_board is not None:
            logger.info(
                "Board resized from %dx%d to %dx%d; age history discarded",
                self._height,
                self._width,
                height,
                width,
            )
        self._width = width
        self._height = height
        self._ages = [[0] * width for _ in range(height)]
        self._previous_board = None
        self._percentile_cache = None

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def max_age_ever(self) -> int:
        with self._lock:
            return self._max_age_ever

    @property
    def current_board(self) -> list[str] | None:
        """Copy of the last observed board, or ``None`` before the first update."""
        with self._lock:
            if self._previous_board is None:
                return None
            return list(self._previous_board)

    def get_age_matrix(self) -> list[list[int]]:
        with self._lock:
            return [list(row) for row in self._ages]

    def age_at(self, row: int, col: int) -> int | None:
        with self._lock:
            if 0 <= row < self._height and 0 <= col < self._width:
                return self._ages[row][col]
            return None

    def get_normalized_age_matrix(self) -> list[list[float]]:
        """Ages scaled by ``max_age_ever`` into [0, 1]."""
        with self._lock:
            peak = self._max_age_ever
            return [[age / peak for age in row] for row in self._ages]

    def get_percentile_matrix(self) -> list[list[float]]:
        """Rank of each cell's age among all current ages, in [0, 1].

        A cell's value is the fraction of *other* cells that are strictly
        younger.  Cells holding the current maximum age are pinned to 1.0
        so the most stable cells always sit at the top of the color scale.

        Memoized until the next ``update_board`` or ``reset``.
        """
        with self._lock:
            return [list(row) for row in self._cached_percentiles()]

    def percentile_at(self, row: int, col: int) -> float | None:
        with self._lock:
            if 0 <= row < self._height and 0 <= col < self._width:
                return self._cached_percentiles()[row][col]
            return None

    def _cached_percentiles(self) -> list[list[float]]:
        # Caller holds _lock.
        if self._percentile_cache is None:
            self._percentile_cache = self._compute_percentiles()
        return self._percentile_cache

    def _compute_percentiles(self) -> list[list[float]]:
        flat = sorted(age for row in self._ages for age in row)
        if not flat:
            return []
        current_max = flat[-1]
        denominator = len(flat) - 1
        rank: dict[int, float] = {}
        for age in set(flat):
            if age == current_max:
                rank[age] = 1.0
            else:
                # denominator > 0 here: a non-max age implies at least two cells
                rank[age] = bisect_left(flat, age) / denominator
        return [[rank[age] for age in row] for row in self._ages]

    def get_stats(self) -> HeatmapStats:
        """Instantaneous min/max/average plus the historical ``max_age_ever``."""
        with self._lock:
            flat = [age for row in self._ages for age in row]
            peak = self._max_age_ever
        if not flat:
            return HeatmapStats(max_age_ever=peak)
        return HeatmapStats(
            min=min(flat),
            max=max(flat),
            average=sum(flat) / len(flat),
            total_cells=len(flat),
            max_age_ever=peak,
        )
