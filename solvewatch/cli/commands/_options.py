"""Shared CLI option helpers."""

from __future__ import annotations

from pathlib import Path

import typer

from solvewatch.config import WatchConfig, config

LOG_DIR_OPTION = typer.Option(
    None,
    "--log-dir",
    "-d",
    help="Solver output directory. Defaults to SOLVEWATCH_LOG_DIR.",
)


def resolve_config(log_dir: Path | None) -> WatchConfig:
    """Return the global config, with ``log_dir`` overridden when given."""
    if log_dir is None:
        return config
    return config.model_copy(update={"log_dir": log_dir})
