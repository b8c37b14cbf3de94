"""``solvewatch trends``: sampled trend data from the stats CSV."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from solvewatch.cli.commands._options import LOG_DIR_OPTION, resolve_config
from solvewatch.core.trends import render_trend_csv, sample_trend_points

console = Console()


def trends_cmd(
    log_dir: Optional[Path] = LOG_DIR_OPTION,
    max_points: Optional[int] = typer.Option(
        None,
        "--max-points",
        "-n",
        min=1,
        help="Approximate number of samples. Defaults to SOLVEWATCH_TREND_MAX_POINTS.",
    ),
    as_csv: bool = typer.Option(False, "--csv", help="Print raw CSV."),
) -> None:
    """Print sampled steps, queue size, growth rate, solutions and speed."""
    cfg = resolve_config(log_dir)
    points = sample_trend_points(
        cfg.stats_path, max_points if max_points is not None else cfg.trend_max_points
    )

    if as_csv:
        typer.echo(render_trend_csv(points), nl=False)
        return

    if not points:
        console.print(f"[dim]No trend data in {cfg.stats_path}.[/dim]")
        return

    table = Table(title=f"Trends ({len(points)} samples)")
    table.add_column("Steps", justify="right", style="cyan")
    table.add_column("Queue", justify="right")
    table.add_column("Growth", justify="right")
    table.add_column("Solutions", justify="right", style="green")
    table.add_column("Steps/s", justify="right")
    for p in points:
        table.add_row(
            f"{p.steps:,.0f}",
            f"{p.queue_size:,.0f}",
            f"{p.queue_growth_rate:.4f}",
            f"{p.solutions:,.0f}",
            f"{p.steps_per_second:,.1f}",
        )
    console.print(table)
