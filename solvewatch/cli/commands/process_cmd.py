"""``solvewatch process``: resource usage of the solver process."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from solvewatch.config import config
from solvewatch.core.process_probe import find_solver_process, format_bytes, format_uptime

console = Console()


def process_cmd(
    name: Optional[str] = typer.Option(
        None,
        "--name",
        help="Process name to look for. Defaults to SOLVEWATCH_SOLVER_PROCESS_NAME.",
    ),
) -> None:
    """Show PID, uptime, memory and CPU time of the solver."""
    process_name = name or config.solver_process_name
    stats = find_solver_process(process_name)
    if stats is None:
        console.print(f"[yellow]{process_name} process not found[/yellow]")
        raise typer.Exit(code=1)

    table = Table(title="Solver Process Statistics", show_header=False)
    table.add_column("Key", style="bold cyan")
    table.add_column("Value")
    table.add_row("Process ID", str(stats.pid))
    table.add_row("Runtime", format_uptime(stats.uptime_seconds))
    table.add_row("Memory (RSS)", format_bytes(stats.rss_bytes))
    table.add_row("CPU user", f"{stats.cpu_user_seconds:.1f}s")
    table.add_row("CPU system", f"{stats.cpu_system_seconds:.1f}s")
    console.print(table)
