"""solvewatch CLI: Typer-based command-line interface.

Provides the ``solvewatch`` command with subcommands for one-shot
snapshot inspection, live terminal monitoring, the HTTP push server,
trend sampling and solver process stats.

All output uses Rich for formatted terminal display.
"""
