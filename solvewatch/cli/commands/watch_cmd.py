"""``solvewatch watch``: live terminal monitor.

Watches the snapshot file, tracks cell stability across accepted
snapshots and redraws the board tinted by the heatmap.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from solvewatch.cli.commands._options import LOG_DIR_OPTION, resolve_config
from solvewatch.core.watcher import FatalObserverError
from solvewatch.monitor.renderer import MonitorRenderer
from solvewatch.monitor.session import MonitorSession

console = Console()


def watch_cmd(
    log_dir: Optional[Path] = LOG_DIR_OPTION,
    refresh_hz: Optional[float] = typer.Option(
        None,
        "--refresh",
        "-r",
        help="Redraw rate in Hz. Defaults to SOLVEWATCH_REFRESH_HZ.",
    ),
    polling: bool = typer.Option(
        False,
        "--polling",
        help="Poll the file instead of using native filesystem events.",
    ),
) -> None:
    """Watch the solver's snapshot file until Ctrl+C."""
    cfg = resolve_config(log_dir)
    if polling:
        cfg = cfg.model_copy(update={"use_polling": True})

    session = MonitorSession(cfg)
    try:
        session.start()
    except FatalObserverError as exc:
        console.print(f"[bold red]Cannot watch snapshot file:[/bold red] {exc}")
        raise typer.Exit(code=1)

    hz = refresh_hz if refresh_hz is not None else cfg.refresh_hz
    console.print(
        f"[dim]Watching {cfg.snapshot_path} at {hz} Hz. Press Ctrl+C to exit.[/dim]"
    )
    try:
        MonitorRenderer(console=console).render_live(session, refresh_hz=hz)
    finally:
        session.stop()
