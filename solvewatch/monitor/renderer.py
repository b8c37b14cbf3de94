"""Rich terminal renderer for the solver monitor.

Turns ``MonitorView`` into Rich renderables: the board tinted by the
stability heatmap, solver progress, heatmap summary and process stats,
with optional continuous ``Rich.Live`` mode.

Color scheme
------------
- red to white: percentile age, youngest to most stable
- dim: blocked cells (``#``)
- default: vacant cells (``.``)
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from solvewatch.core.process_probe import format_bytes, format_uptime
from solvewatch.models.snapshot import BLOCKED_CELL, VACANT_CELL

if TYPE_CHECKING:
    from solvewatch.models.snapshot import Snapshot
    from solvewatch.monitor.projection import MonitorView
    from solvewatch.monitor.session import MonitorSession


_YOUNG_RGB = (220, 40, 40)
_STABLE_RGB = (255, 255, 255)


def heat_color(value: float) -> str:
    """Map a [0, 1] percentile to a Rich ``rgb(...)`` color, red to white."""
    t = min(1.0, max(0.0, value))
    r, g, b = (
        round(lo + (hi - lo) * t) for lo, hi in zip(_YOUNG_RGB, _STABLE_RGB)
    )
    return f"rgb({r},{g},{b})"


class MonitorRenderer:
    """Renders ``MonitorView`` as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Single frame
    # ------------------------------------------------------------------

    def render_view(self, view: MonitorView) -> Panel:
        """Render a full monitor frame as a Rich Panel."""
        if view.snapshot is None:
            body: Group | Text = Text.from_markup(
                "[dim]Waiting for a valid snapshot...[/dim]"
            )
        else:
            body = Group(
                self.render_board(view.snapshot, view.percentiles),
                Text(""),
                self._build_summary_table(view),
            )

        status = (
            "[green]watching[/green]"
            if view.is_watching
            else "[bold red]NOT WATCHING[/bold red]"
        )
        if view.observer_error:
            status += f" [red]({view.observer_error})[/red]"

        return Panel(
            body,
            title="[bold]Solver Monitor[/bold]",
            subtitle=f"{status}  |  {view.taken_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            border_style="blue",
            padding=(1, 2),
        )

    def render_board(
        self, snapshot: Snapshot, percentiles: list[list[float]] | None = None
    ) -> Text:
        """Render the board, tinting piece cells by heatmap percentile."""
        tinted = bool(percentiles) and len(percentiles) == snapshot.height
        text = Text()
        for y, row in enumerate(snapshot.board):
            for x, ch in enumerate(row):
                if ch == BLOCKED_CELL:
                    text.append(ch, style="dim")
                elif ch == VACANT_CELL or not tinted:
                    text.append(ch)
                else:
                    text.append(ch, style=f"black on {heat_color(percentiles[y][x])}")
            if y < snapshot.height - 1:
                text.append("\n")
        return text

    def _build_summary_table(self, view: MonitorView) -> Table:
        table = Table(show_header=False, box=None, pad_edge=False, expand=False)
        table.add_column("Key", style="bold cyan", no_wrap=True)
        table.add_column("Value")

        snapshot = view.snapshot
        if snapshot is not None:
            table.add_row("Progress", snapshot.stats)
            if snapshot.metric is not None:
                table.add_row("Metric", self._format_metric(snapshot.metric))
            point = snapshot.csv_point
            if point is not None:
                table.add_row("Solutions", f"{point.solutions:g}")
                table.add_row("Steps/s", f"{point.steps_per_second:,.1f}")

        stats = view.heatmap_stats
        table.add_row(
            "Heatmap",
            f"min {stats.min}  max {stats.max}  avg {stats.average:.1f}"
            f"  peak {stats.max_age_ever}  cells {stats.total_cells}",
        )

        if view.process is not None:
            proc = view.process
            table.add_row(
                "Process",
                f"pid {proc.pid}  up {format_uptime(proc.uptime_seconds)}"
                f"  rss {format_bytes(proc.rss_bytes)}",
            )
        else:
            table.add_row("Process", "[dim italic]solver process not found[/dim italic]")

        return table

    @staticmethod
    def _format_metric(metric: float) -> str:
        if metric > 1.0:
            trend = "[red]growing[/red]"
        elif metric < 1.0:
            trend = "[green]shrinking[/green]"
        else:
            trend = "[yellow]stable[/yellow]"
        return f"{metric:.4f} (queue {trend})"

    # ------------------------------------------------------------------
    # Continuous live rendering
    # ------------------------------------------------------------------

    def render_live(self, session: MonitorSession, *, refresh_hz: float = 2.0) -> None:
        """Continuously render the monitor in Rich Live mode.

        Each frame is a fresh ``session.view()``.  Press Ctrl+C to stop.
        """
        interval = 1.0 / max(refresh_hz, 0.1)

        with Live(
            console=self.console,
            refresh_per_second=refresh_hz,
            transient=False,
        ) as live:
            try:
                while True:
                    live.update(self.render_view(session.view()))
                    time.sleep(interval)
            except KeyboardInterrupt:
                live.update(self.render_view(session.view()))

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_view(self, view: MonitorView) -> None:
        self.console.print(self.render_view(view))
