"""``solvewatch serve``: HTTP server with a server-sent snapshot stream."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from solvewatch.cli.commands._options import LOG_DIR_OPTION, resolve_config
from solvewatch.core.watcher import FatalObserverError
from solvewatch.monitor.session import MonitorSession
from solvewatch.server.app import serve

console = Console()


def serve_cmd(
    log_dir: Optional[Path] = LOG_DIR_OPTION,
    host: Optional[str] = typer.Option(
        None, "--host", help="Bind address. Defaults to SOLVEWATCH_HOST."
    ),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Bind port. Defaults to SOLVEWATCH_PORT."
    ),
) -> None:
    """Serve the current snapshot, trends and process stats over HTTP."""
    cfg = resolve_config(log_dir)
    bind_host = host or cfg.host
    bind_port = port if port is not None else cfg.port

    console.print(f"[bold cyan]Serving[/bold cyan] http://{bind_host}:{bind_port}")
    try:
        serve(MonitorSession(cfg), bind_host, bind_port)
    except FatalObserverError as exc:
        console.print(f"[bold red]Cannot watch snapshot file:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except OSError as exc:
        console.print(f"[bold red]Cannot bind {bind_host}:{bind_port}:[/bold red] {exc}")
        raise typer.Exit(code=1)
