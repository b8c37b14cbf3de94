"""``solvewatch snapshot``: parse the current snapshot once and print it.

Exits non-zero when the snapshot file is missing or malformed, which
makes the command usable as a health check in scripts.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from solvewatch.cli.commands._options import LOG_DIR_OPTION, resolve_config
from solvewatch.core.heatmap import StabilityHeatmap
from solvewatch.core.parser import MalformedSnapshot
from solvewatch.core.source import ResourceUnavailable, SnapshotSource
from solvewatch.monitor.projection import MonitorView
from solvewatch.monitor.renderer import MonitorRenderer

console = Console()


def snapshot_cmd(
    log_dir: Optional[Path] = LOG_DIR_OPTION,
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the snapshot as JSON instead of a rendered board.",
    ),
) -> None:
    """Parse and print the current snapshot."""
    cfg = resolve_config(log_dir)
    source = SnapshotSource(cfg.snapshot_path, cfg.stats_path)

    try:
        snapshot = source.load()
    except ResourceUnavailable as exc:
        console.print(f"[bold red]Snapshot unavailable:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except MalformedSnapshot as exc:
        console.print(f"[bold red]Malformed snapshot:[/bold red] {exc}")
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(json.dumps(snapshot.to_wire(), indent=2))
        return

    heatmap = StabilityHeatmap()
    heatmap.update_board(snapshot.board)
    view = MonitorView(
        snapshot=snapshot,
        heatmap_stats=heatmap.get_stats(),
        is_watching=False,
    )
    MonitorRenderer(console=console).print_view(view)
