"""Main Typer application: imports and registers all CLI commands.

Entry point: ``solvewatch`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging
from typing import Optional

import typer

from solvewatch.cli.commands.process_cmd import process_cmd
from solvewatch.cli.commands.serve_cmd import serve_cmd
from solvewatch.cli.commands.snapshot_cmd import snapshot_cmd
from solvewatch.cli.commands.trends_cmd import trends_cmd
from solvewatch.cli.commands.watch_cmd import watch_cmd
from solvewatch.config import config

app = typer.Typer(
    name="solvewatch",
    help="solvewatch: live monitor for a long-running puzzle solver.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ...). Defaults to SOLVEWATCH_LOG_LEVEL.",
    ),
) -> None:
    """Configure logging before any command runs."""
    level = (log_level or config.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
app.command(name="snapshot", help="Parse and print the current snapshot once.")(snapshot_cmd)
app.command(name="watch", help="Live terminal monitor with stability heatmap.")(watch_cmd)
app.command(name="serve", help="Serve snapshots over HTTP with a server-sent event stream.")(
    serve_cmd
)
app.command(name="trends", help="Print sampled trend data from the stats CSV.")(trends_cmd)
app.command(name="process", help="Show resource usage of the solver process.")(process_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
